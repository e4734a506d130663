"""
Services for Engagement app.

Productivity points, daily streaks and the public activity feed.
"""
import logging
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.identity.models import User
from .models import Activity, ActivityType
from .dtos import ActivityDTO

logger = logging.getLogger(__name__)


POINTS_TASK_STARTED = 3
POINTS_TASK_COMPLETED = 10
POINTS_CATALYST_COMPLETED = 3

FEED_SIZE = 20
ANONYMOUS_NAME = "Someone"


def next_streak(current: int, last_activity: Optional[date], today: date) -> int:
    """
    Same day keeps the streak, the following day extends it,
    anything older (or no history) starts over at 1.
    """
    if last_activity == today:
        return max(current, 1)
    if last_activity == today - timedelta(days=1):
        return current + 1
    return 1


def award_points(user_id: UUID, points: int) -> Optional[int]:
    """
    Add points and roll the streak forward.
    Returns the new score, or None if the user no longer exists.
    """
    today = timezone.localdate()

    with transaction.atomic():
        user = User.objects.select_for_update().filter(id=user_id).first()
        if not user:
            logger.warning(f"Cannot award {points} points: user {user_id} not found")
            return None

        user.productivity_streak = next_streak(user.productivity_streak, user.last_activity_date, today)
        user.productivity_score += points
        user.last_activity_date = today
        user.save(update_fields=['productivity_score', 'productivity_streak', 'last_activity_date'])

    logger.debug(f"User {user_id} +{points} points (score {user.productivity_score}, streak {user.productivity_streak})")
    return user.productivity_score


def to_activity_dto(activity: Activity) -> ActivityDTO:
    return ActivityDTO(
        id=activity.id,
        user_id=activity.user_id,
        user_name=activity.user_name,
        activity_type=activity.activity_type,
        description=activity.description,
        task_title=activity.task_title,
        points=activity.points,
        created_at=activity.created_at,
    )


def record_task_completed(user_id: UUID, task_title: str) -> Optional[ActivityDTO]:
    user = User.objects.filter(id=user_id).first()
    if not user:
        return None

    activity = Activity.objects.create(
        user_id=user.id,
        user_name=user.first_name or ANONYMOUS_NAME,
        activity_type=ActivityType.TASK_COMPLETED,
        description="just completed a task!",
        task_title=task_title,
        points=user.productivity_score,
    )
    return to_activity_dto(activity)


def get_activity_feed(limit: int = FEED_SIZE) -> List[ActivityDTO]:
    """Most recent activities across all users, newest first."""
    return [to_activity_dto(a) for a in Activity.objects.order_by('-created_at')[:limit]]


def reset_stale_streaks(today: Optional[date] = None) -> int:
    """
    Zero the streak of every user whose last activity is older than yesterday.
    Returns the number of users reset.
    """
    today = today or timezone.localdate()
    yesterday = today - timedelta(days=1)

    count = User.objects.filter(
        productivity_streak__gt=0,
        last_activity_date__lt=yesterday,
    ).update(productivity_streak=0)

    logger.info(f"Reset {count} stale productivity streaks")
    return count
