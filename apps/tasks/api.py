"""
API endpoints for Tasks app.

Three routers share this module:
    router            -> /api/tasks/
    catalyst_router   -> /api/catalysts/
    analytics_router  -> /api/analytics
"""
from typing import List
from uuid import UUID
from ninja import Router
from ninja.errors import HttpError
from django.http import HttpRequest

from apps.identity.security import require_auth
from .schemas import (
    TaskIn, TaskStatusIn, CatalystCompletionIn, CatalystRatingIn,
    TaskOut, TaskWithCatalystOut, TaskCreatedOut, CatalystOut, AnalyticsOut,
)
from . import services
from .analytics_service import AnalyticsUnavailableError, compute_analytics

router = Router(tags=["Tasks"])
catalyst_router = Router(tags=["Catalysts"])
analytics_router = Router(tags=["Analytics"])


# =============================================================================
# Task Endpoints
# =============================================================================

@router.get("/", response=List[TaskWithCatalystOut], auth=None)
def list_tasks(request: HttpRequest):
    """List the current user's tasks, newest first."""
    user = require_auth(request)
    return services.list_tasks(user.id)


@router.post("/", response=TaskCreatedOut, auth=None)
def create_task(request: HttpRequest, payload: TaskIn):
    """Create a task and generate its catalyst."""
    user = require_auth(request)
    return services.create_task(
        user_id=user.id,
        title=payload.title,
        description=payload.description,
        category=payload.category,
        priority=payload.priority,
    )


@router.get("/{task_id}", response=TaskWithCatalystOut, auth=None)
def get_task(request: HttpRequest, task_id: UUID):
    user = require_auth(request)
    task = services.get_task(task_id, user.id)
    if not task:
        raise HttpError(404, "Task not found")
    return task


@router.patch("/{task_id}/status", response=TaskOut, auth=None)
def update_task_status(request: HttpRequest, task_id: UUID, payload: TaskStatusIn):
    """
    Move a task forward in its lifecycle.
    Unknown statuses and backward moves return 400.
    """
    user = require_auth(request)
    try:
        task = services.update_task_status(task_id, user.id, payload.status)
    except ValueError as e:
        raise HttpError(400, str(e))
    if not task:
        raise HttpError(404, "Task not found")
    return task


@router.delete("/{task_id}", response={204: None}, auth=None)
def delete_task(request: HttpRequest, task_id: UUID):
    user = require_auth(request)
    if not services.delete_task(task_id, user.id):
        raise HttpError(404, "Task not found")
    return 204, None


@router.post("/{task_id}/catalyst", response=CatalystOut, auth=None)
def regenerate_catalyst(request: HttpRequest, task_id: UUID):
    """Replace the task's catalyst with a new one."""
    user = require_auth(request)
    catalyst = services.regenerate_catalyst(task_id, user.id)
    if not catalyst:
        raise HttpError(404, "Task not found")
    return catalyst


# =============================================================================
# Catalyst Endpoints
# =============================================================================

@catalyst_router.patch("/{catalyst_id}/complete", response=CatalystOut, auth=None)
def complete_catalyst(request: HttpRequest, catalyst_id: UUID, payload: CatalystCompletionIn):
    user = require_auth(request)
    catalyst = services.set_catalyst_completion(catalyst_id, user.id, payload.completed)
    if not catalyst:
        raise HttpError(404, "Catalyst not found")
    return catalyst


@catalyst_router.patch("/{catalyst_id}/rating", response=CatalystOut, auth=None)
def rate_catalyst(request: HttpRequest, catalyst_id: UUID, payload: CatalystRatingIn):
    user = require_auth(request)
    try:
        catalyst = services.rate_catalyst(catalyst_id, user.id, payload.rating)
    except ValueError as e:
        raise HttpError(400, str(e))
    if not catalyst:
        raise HttpError(404, "Catalyst not found")
    return catalyst


# =============================================================================
# Analytics Endpoints
# =============================================================================

@analytics_router.get("", response=AnalyticsOut, auth=None)
def get_analytics(request: HttpRequest):
    """Productivity snapshot for the current user, recomputed on every call."""
    user = require_auth(request)
    try:
        return compute_analytics(user.id)
    except AnalyticsUnavailableError:
        raise HttpError(503, "Analytics unavailable")
