"""DTOs for Tasks app - Data Transfer Objects for cross-app communication."""
from dataclasses import dataclass
from typing import Optional, List
from uuid import UUID
from datetime import datetime


@dataclass(frozen=True)
class CatalystDTO:
    id: UUID
    task_id: UUID
    content: str
    estimated_minutes: int
    source: str
    completed: bool
    completed_at: Optional[datetime]
    relevance_score: int
    matched_interests: List[str]
    rating: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class TaskDTO:
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str]
    category: str
    priority: str
    status: str
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TaskWithCatalystDTO:
    """Task as listed on the dashboard, with its current catalyst if any."""
    id: UUID
    user_id: UUID
    title: str
    description: Optional[str]
    category: str
    priority: str
    status: str
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    catalyst: Optional[CatalystDTO] = None


@dataclass(frozen=True)
class TaskCreatedDTO:
    task: TaskDTO
    catalyst: CatalystDTO


@dataclass(frozen=True)
class AnalyticsSnapshotDTO:
    """
    Point-in-time productivity summary for one user.
    Rates and averages are whole numbers; everything is 0 without data.
    """
    total_tasks: int
    completed_tasks: int
    tasks_started_today: int
    catalyst_success_rate: int
    average_time_to_start: int
    completion_rate: int
