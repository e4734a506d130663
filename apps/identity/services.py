"""Services for Identity app."""
import logging
from typing import Optional

from .models import User
from .dtos import UserDTO, RegisterIn, OnboardingIn

logger = logging.getLogger(__name__)


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        subscription_status=user.subscription_status,
        interests=list(user.interests or []),
        life_goal=user.life_goal,
        daily_free_time=user.daily_free_time,
        age=user.age,
        gender=user.gender,
        onboarding_completed=user.onboarding_completed,
        productivity_score=user.productivity_score,
        productivity_streak=user.productivity_streak,
        last_activity_date=user.last_activity_date,
    )


def get_user_dto(user_id) -> Optional[UserDTO]:
    try:
        return to_user_dto(User.objects.get(id=user_id))
    except User.DoesNotExist:
        return None


def get_user_interests(user_id) -> list:
    """Interest tags used to bias catalyst generation."""
    interests = User.objects.filter(id=user_id).values_list('interests', flat=True).first()
    return list(interests or [])


def register_user(payload: RegisterIn) -> User:
    """
    Create a new active account.
    Raises ValueError if the username is taken.
    """
    if User.objects.filter(username=payload.username).exists():
        raise ValueError("Username already taken")

    user = User.objects.create_user(
        username=payload.username,
        email=payload.email,
        password=payload.password,
        first_name=payload.first_name,
        last_name=payload.last_name,
    )
    logger.info(f"Registered user {user.id}")
    return user


def complete_onboarding(user_id, payload: OnboardingIn) -> Optional[UserDTO]:
    try:
        user = User.objects.get(id=user_id)
    except User.DoesNotExist:
        return None

    user.interests = payload.interests
    user.life_goal = payload.life_goal
    user.daily_free_time = payload.daily_free_time
    user.age = payload.age
    user.gender = payload.gender
    user.onboarding_completed = True
    user.save(update_fields=[
        'interests', 'life_goal', 'daily_free_time', 'age', 'gender', 'onboarding_completed',
    ])
    return to_user_dto(user)
