import uuid
from django.db import models


class TaskStatus(models.TextChoices):
    """Forward-only lifecycle of a task."""
    NOT_STARTED = 'not_started', 'Not Started'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'


class TaskPriority(models.TextChoices):
    LOW = 'low', 'Low'
    MEDIUM = 'medium', 'Medium'
    HIGH = 'high', 'High'


class Task(models.Model):
    """
    A user's task. Uses a UUID user reference instead of an FK
    to keep the tasks app independent of identity.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)

    title = models.TextField()
    description = models.TextField(blank=True, null=True)
    category = models.CharField(max_length=100, default='personal')
    priority = models.CharField(
        max_length=10,
        choices=TaskPriority.choices,
        default=TaskPriority.MEDIUM
    )
    status = models.CharField(
        max_length=20,
        choices=TaskStatus.choices,
        default=TaskStatus.NOT_STARTED
    )

    # Set if and only if status is COMPLETED
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user_id', 'status'], name='task_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"


class Catalyst(models.Model):
    """
    The micro-task attached to a task. One per task; regeneration replaces it.
    Deleted together with its task.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    task_id = models.UUIDField(db_index=True)

    content = models.TextField()
    estimated_minutes = models.PositiveSmallIntegerField(default=5)
    source = models.CharField(max_length=20, default='ai', help_text="'ai' or 'fallback'")

    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)

    # Relevance to the user's onboarding interests
    relevance_score = models.PositiveSmallIntegerField(default=0)
    matched_interests = models.JSONField(default=list, blank=True)

    rating = models.PositiveSmallIntegerField(null=True, blank=True, help_text="1-5 quality rating")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"Catalyst for {self.task_id}: {self.content[:40]}"


class TaskEvent(models.Model):
    """
    Append-only log of task milestones.
    Each row records one transition; rows are never updated.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.UUIDField(db_index=True)
    task_id = models.UUIDField(db_index=True)

    catalyst_completed = models.BooleanField(default=False)
    task_started = models.BooleanField(default=False)
    task_completed = models.BooleanField(default=False)
    time_to_start = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes from creation to start")
    time_to_complete = models.PositiveIntegerField(null=True, blank=True, help_text="Minutes from creation to completion")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']

    def __str__(self):
        return f"TaskEvent {self.id} for task {self.task_id}"
