from typing import Optional
from uuid import UUID
from datetime import datetime
from ninja import Schema


class ActivityOut(Schema):
    id: UUID
    user_id: UUID
    user_name: str
    activity_type: str
    description: str
    task_title: Optional[str] = None
    points: int
    created_at: datetime
