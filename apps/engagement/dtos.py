"""DTOs for Engagement app."""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID
from datetime import datetime


@dataclass(frozen=True)
class ActivityDTO:
    id: UUID
    user_id: UUID
    user_name: str
    activity_type: str
    description: str
    task_title: Optional[str]
    points: int
    created_at: datetime
