"""
API Schemas for Tasks app.
Pydantic/Ninja schemas for request/response validation.
"""
from typing import Optional, List, Literal
from uuid import UUID
from datetime import datetime
from ninja import Schema
from pydantic import Field, field_validator


# =============================================================================
# Request Schemas
# =============================================================================

class TaskIn(Schema):
    """Schema for creating a task."""
    title: str = Field(..., max_length=500)
    description: Optional[str] = None
    category: str = Field(default="personal", max_length=100)
    priority: Literal["low", "medium", "high"] = "medium"

    @field_validator('title')
    @classmethod
    def title_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Title is required")
        return v

    @field_validator('description')
    @classmethod
    def blank_description_is_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class TaskStatusIn(Schema):
    """Any string is accepted here; the service rejects unknown statuses with 400."""
    status: str


class CatalystCompletionIn(Schema):
    completed: bool


class CatalystRatingIn(Schema):
    rating: int


# =============================================================================
# Response Schemas
# =============================================================================

class CatalystOut(Schema):
    id: UUID
    task_id: UUID
    content: str
    estimated_minutes: int
    source: str
    completed: bool
    completed_at: Optional[datetime] = None
    relevance_score: int
    matched_interests: List[str]
    rating: Optional[int] = None
    created_at: datetime


class TaskOut(Schema):
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str] = None
    category: str
    priority: str
    status: str
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TaskWithCatalystOut(TaskOut):
    catalyst: Optional[CatalystOut] = None


class TaskCreatedOut(Schema):
    task: TaskOut
    catalyst: CatalystOut


class AnalyticsOut(Schema):
    total_tasks: int
    completed_tasks: int
    tasks_started_today: int
    catalyst_success_rate: int
    average_time_to_start: int
    completion_rate: int


class ErrorOut(Schema):
    detail: str
