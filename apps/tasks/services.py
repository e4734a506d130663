"""
Services for Tasks app.

Task creation with its catalyst, forward-only status transitions that append
task events, and the catalyst lifecycle (regenerate, complete, rate).

Services return None for rows the user does not own and raise ValueError
for business-rule violations; routers translate both into HTTP errors.
"""
import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.engagement import services as engagement
from apps.identity.services import get_user_interests
from apps.intelligence.catalyst import CatalystGenerator, get_catalyst_generator
from apps.intelligence.dtos import CatalystRequestDTO, CatalystResultDTO

from .models import Task, Catalyst, TaskEvent, TaskStatus
from .dtos import CatalystDTO, TaskDTO, TaskWithCatalystDTO, TaskCreatedDTO

logger = logging.getLogger(__name__)


# Position of each status in the lifecycle; transitions may only move forward
STATUS_ORDER = {
    TaskStatus.NOT_STARTED: 0,
    TaskStatus.IN_PROGRESS: 1,
    TaskStatus.COMPLETED: 2,
}


# =============================================================================
# Mapping helpers
# =============================================================================

def to_task_dto(task: Task) -> TaskDTO:
    return TaskDTO(
        id=task.id,
        user_id=task.user_id,
        title=task.title,
        description=task.description,
        category=task.category,
        priority=task.priority,
        status=task.status,
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )


def to_catalyst_dto(catalyst: Catalyst) -> CatalystDTO:
    return CatalystDTO(
        id=catalyst.id,
        task_id=catalyst.task_id,
        content=catalyst.content,
        estimated_minutes=catalyst.estimated_minutes,
        source=catalyst.source,
        completed=catalyst.completed,
        completed_at=catalyst.completed_at,
        relevance_score=catalyst.relevance_score,
        matched_interests=list(catalyst.matched_interests or []),
        rating=catalyst.rating,
        created_at=catalyst.created_at,
    )


def _with_catalyst(task: Task, catalyst: Optional[Catalyst]) -> TaskWithCatalystDTO:
    return TaskWithCatalystDTO(
        id=task.id,
        user_id=task.user_id,
        title=task.title,
        description=task.description,
        category=task.category,
        priority=task.priority,
        status=task.status,
        completed_at=task.completed_at,
        created_at=task.created_at,
        updated_at=task.updated_at,
        catalyst=to_catalyst_dto(catalyst) if catalyst else None,
    )


def minutes_since(start: datetime, end: datetime) -> int:
    """Whole minutes elapsed, floored, never negative."""
    return max(0, int((end - start).total_seconds() // 60))


def _catalyst_request(task: Task) -> CatalystRequestDTO:
    return CatalystRequestDTO(
        task_title=task.title,
        task_description=task.description or None,
        category=task.category or None,
        priority=task.priority or None,
    )


def _save_catalyst(task_id: UUID, result: CatalystResultDTO) -> Catalyst:
    return Catalyst.objects.create(
        task_id=task_id,
        content=result.content,
        estimated_minutes=result.estimated_minutes,
        source=result.source,
        relevance_score=result.relevance_score,
        matched_interests=list(result.matched_interests),
    )


# =============================================================================
# Tasks
# =============================================================================

def create_task(
    user_id: UUID,
    title: str,
    description: Optional[str] = None,
    category: str = 'personal',
    priority: str = 'medium',
    generator: Optional[CatalystGenerator] = None,
) -> TaskCreatedDTO:
    """
    Create a task together with its catalyst and an initial event row.

    The catalyst is generated before the transaction opens so the
    text-generation call never holds a database transaction.
    """
    generator = generator or get_catalyst_generator()

    result = generator.generate_catalyst(
        CatalystRequestDTO(
            task_title=title,
            task_description=description or None,
            category=category or None,
            priority=priority or None,
        ),
        interests=get_user_interests(user_id),
    )

    with transaction.atomic():
        task = Task.objects.create(
            user_id=user_id,
            title=title,
            description=description,
            category=category,
            priority=priority,
        )
        catalyst = _save_catalyst(task.id, result)
        TaskEvent.objects.create(user_id=user_id, task_id=task.id)

    logger.info(f"Created task {task.id} with {result.source} catalyst ({result.estimated_minutes} min)")

    return TaskCreatedDTO(task=to_task_dto(task), catalyst=to_catalyst_dto(catalyst))


def list_tasks(user_id: UUID) -> List[TaskWithCatalystDTO]:
    """All of the user's tasks, newest first, each with its current catalyst."""
    tasks = list(Task.objects.filter(user_id=user_id).order_by('-created_at'))

    catalysts = {}
    for catalyst in Catalyst.objects.filter(task_id__in=[t.id for t in tasks]).order_by('-created_at'):
        catalysts.setdefault(catalyst.task_id, catalyst)

    return [_with_catalyst(task, catalysts.get(task.id)) for task in tasks]


def get_task(task_id: UUID, user_id: UUID) -> Optional[TaskWithCatalystDTO]:
    task = Task.objects.filter(id=task_id, user_id=user_id).first()
    if not task:
        return None
    catalyst = Catalyst.objects.filter(task_id=task.id).order_by('-created_at').first()
    return _with_catalyst(task, catalyst)


def update_task_status(task_id: UUID, user_id: UUID, status: str) -> Optional[TaskDTO]:
    """
    Move a task forward through not_started -> in_progress -> completed.

    Skipping in_progress is allowed. Moving backward raises ValueError.
    Re-sending the current status changes nothing and records no event.
    Each real transition appends exactly one TaskEvent.
    """
    if status not in STATUS_ORDER:
        raise ValueError("Invalid status")

    with transaction.atomic():
        task = Task.objects.select_for_update().filter(id=task_id, user_id=user_id).first()
        if not task:
            return None

        if task.status == status:
            return to_task_dto(task)

        if STATUS_ORDER[status] < STATUS_ORDER[task.status]:
            raise ValueError(f"Cannot move task from {task.status} to {status}")

        now = timezone.now()
        elapsed = minutes_since(task.created_at, now)
        task.status = status

        if status == TaskStatus.COMPLETED:
            task.completed_at = now
            TaskEvent.objects.create(
                user_id=user_id,
                task_id=task.id,
                task_completed=True,
                time_to_complete=elapsed,
            )
        else:
            TaskEvent.objects.create(
                user_id=user_id,
                task_id=task.id,
                task_started=True,
                time_to_start=elapsed,
            )

        task.save(update_fields=['status', 'completed_at', 'updated_at'])

        if status == TaskStatus.COMPLETED:
            engagement.award_points(user_id, engagement.POINTS_TASK_COMPLETED)
            engagement.record_task_completed(user_id, task.title)
        else:
            engagement.award_points(user_id, engagement.POINTS_TASK_STARTED)

    logger.info(f"Task {task.id} moved to {status} after {elapsed} min")
    return to_task_dto(task)


def delete_task(task_id: UUID, user_id: UUID) -> bool:
    """Delete a task and its catalysts. Task events stay in the log."""
    with transaction.atomic():
        task = Task.objects.filter(id=task_id, user_id=user_id).first()
        if not task:
            return False
        Catalyst.objects.filter(task_id=task.id).delete()
        task.delete()
    return True


# =============================================================================
# Catalysts
# =============================================================================

def regenerate_catalyst(
    task_id: UUID,
    user_id: UUID,
    generator: Optional[CatalystGenerator] = None,
) -> Optional[CatalystDTO]:
    """Replace the task's catalyst with a freshly generated one."""
    task = Task.objects.filter(id=task_id, user_id=user_id).first()
    if not task:
        return None

    generator = generator or get_catalyst_generator()
    result = generator.generate_catalyst(_catalyst_request(task), interests=get_user_interests(user_id))

    with transaction.atomic():
        Catalyst.objects.filter(task_id=task.id).delete()
        catalyst = _save_catalyst(task.id, result)

    logger.info(f"Regenerated catalyst for task {task.id} ({result.source})")
    return to_catalyst_dto(catalyst)


def _get_owned_catalyst(catalyst_id: UUID, user_id: UUID, for_update: bool = False) -> Optional[Catalyst]:
    queryset = Catalyst.objects.select_for_update() if for_update else Catalyst.objects
    catalyst = queryset.filter(id=catalyst_id).first()
    if not catalyst:
        return None
    if not Task.objects.filter(id=catalyst.task_id, user_id=user_id).exists():
        return None
    return catalyst


def set_catalyst_completion(catalyst_id: UUID, user_id: UUID, completed: bool) -> Optional[CatalystDTO]:
    """
    Mark a catalyst complete or incomplete.
    Only an incomplete -> complete change appends an event and awards points.
    """
    with transaction.atomic():
        catalyst = _get_owned_catalyst(catalyst_id, user_id, for_update=True)
        if not catalyst:
            return None

        if completed and not catalyst.completed:
            catalyst.completed = True
            catalyst.completed_at = timezone.now()
            catalyst.save(update_fields=['completed', 'completed_at'])
            TaskEvent.objects.create(
                user_id=user_id,
                task_id=catalyst.task_id,
                catalyst_completed=True,
            )
            engagement.award_points(user_id, engagement.POINTS_CATALYST_COMPLETED)
        elif not completed and catalyst.completed:
            catalyst.completed = False
            catalyst.completed_at = None
            catalyst.save(update_fields=['completed', 'completed_at'])

    return to_catalyst_dto(catalyst)


def rate_catalyst(catalyst_id: UUID, user_id: UUID, rating: int) -> Optional[CatalystDTO]:
    if not 1 <= rating <= 5:
        raise ValueError("Rating must be between 1 and 5")

    catalyst = _get_owned_catalyst(catalyst_id, user_id)
    if not catalyst:
        return None

    catalyst.rating = rating
    catalyst.save(update_fields=['rating'])
    logger.info(f"Catalyst {catalyst.id} rated: {rating}/5")
    return to_catalyst_dto(catalyst)
