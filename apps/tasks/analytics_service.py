"""
Analytics services for Tasks.
Computes a user's productivity snapshot from tasks and task events.
"""
import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.db import DatabaseError
from django.db.models import Avg, Count, Q
from django.utils import timezone

from .models import Task, TaskEvent, TaskStatus
from .dtos import AnalyticsSnapshotDTO

logger = logging.getLogger(__name__)


class AnalyticsUnavailableError(Exception):
    """Storage failed while computing analytics; there is no fallback."""


def round_half_up(value) -> int:
    return int(Decimal(str(value)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def percentage(part: int, whole: int) -> int:
    """part / whole as a whole-number percentage; 0 when whole is 0."""
    if not whole:
        return 0
    return round_half_up(Decimal(part) * 100 / Decimal(whole))


def local_midnight(now: Optional[datetime] = None) -> datetime:
    """Start of the current day in the server's TIME_ZONE."""
    now = timezone.localtime(now or timezone.now())
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def compute_analytics(user_id: UUID) -> AnalyticsSnapshotDTO:
    """
    Recompute the snapshot from raw rows. No caching, no writes.

    Raises:
        AnalyticsUnavailableError: if the underlying queries fail.
    """
    today_start = local_midnight()

    try:
        task_totals = Task.objects.filter(user_id=user_id).aggregate(
            total=Count('id'),
            completed=Count('id', filter=Q(status=TaskStatus.COMPLETED)),
            started_today=Count(
                'id',
                filter=Q(created_at__gte=today_start) & ~Q(status=TaskStatus.NOT_STARTED),
            ),
        )

        # Avg ignores NULL time_to_start values
        event_totals = TaskEvent.objects.filter(user_id=user_id).aggregate(
            total=Count('id'),
            catalyst_completed=Count('id', filter=Q(catalyst_completed=True)),
            avg_time_to_start=Avg('time_to_start'),
        )
    except DatabaseError as e:
        logger.exception(f"Analytics query failed for user {user_id}")
        raise AnalyticsUnavailableError("Analytics unavailable") from e

    total_tasks = task_totals['total'] or 0
    completed_tasks = task_totals['completed'] or 0
    avg_time_to_start = event_totals['avg_time_to_start']

    return AnalyticsSnapshotDTO(
        total_tasks=total_tasks,
        completed_tasks=completed_tasks,
        tasks_started_today=task_totals['started_today'] or 0,
        catalyst_success_rate=percentage(
            event_totals['catalyst_completed'] or 0,
            event_totals['total'] or 0,
        ),
        average_time_to_start=round_half_up(avg_time_to_start) if avg_time_to_start is not None else 0,
        completion_rate=percentage(completed_tasks, total_tasks),
    )
