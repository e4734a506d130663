import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser


class SubscriptionStatus(models.TextChoices):
    FREE = 'free', 'Free'
    ACTIVE = 'active', 'Active'


class Gender(models.TextChoices):
    MALE = 'male', 'Male'
    FEMALE = 'female', 'Female'
    NON_BINARY = 'non-binary', 'Non-binary'
    PREFER_NOT_TO_SAY = 'prefer-not-to-say', 'Prefer not to say'
    CUSTOM = 'custom', 'Custom'


class User(AbstractUser):
    """
    Account with onboarding profile, gamification counters and billing ids.
    Other apps reference users by UUID only.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    profile_image_url = models.URLField(blank=True, null=True)

    # Billing
    stripe_customer_id = models.CharField(max_length=255, blank=True, null=True)
    stripe_subscription_id = models.CharField(max_length=255, blank=True, null=True)
    subscription_status = models.CharField(
        max_length=20,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.FREE
    )

    # Onboarding profile
    interests = models.JSONField(default=list, blank=True)
    life_goal = models.TextField(blank=True, null=True)
    daily_free_time = models.PositiveSmallIntegerField(null=True, blank=True, help_text="Hours per day")
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=20, choices=Gender.choices, blank=True, null=True)
    onboarding_completed = models.BooleanField(default=False)

    # Gamification
    productivity_score = models.IntegerField(default=100)
    productivity_streak = models.PositiveIntegerField(default=0)
    last_activity_date = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ['username']

    def __str__(self):
        return self.email or self.username
