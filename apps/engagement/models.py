import uuid
from django.db import models


class ActivityType(models.TextChoices):
    TASK_COMPLETED = 'task_completed', 'Task Completed'


class Activity(models.Model):
    """
    Public feed entry. Copies the display name and score at the time of the
    event so the feed never joins back to users.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)
    user_name = models.CharField(max_length=150)
    activity_type = models.CharField(max_length=30, choices=ActivityType.choices)
    description = models.CharField(max_length=255)
    task_title = models.TextField(blank=True, null=True)
    points = models.IntegerField(default=0, help_text="Productivity score after the event")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name_plural = 'Activities'

    def __str__(self):
        return f"{self.user_name} {self.description}"
