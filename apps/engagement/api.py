"""
API endpoints for Engagement app.
"""
from typing import List
from ninja import Router
from django.http import HttpRequest

from apps.identity.security import require_auth
from .schemas import ActivityOut
from .services import get_activity_feed

router = Router(tags=["Engagement"])


@router.get("", response=List[ActivityOut], auth=None)
def activity_feed(request: HttpRequest):
    """The 20 most recent completions across all users."""
    require_auth(request)
    return get_activity_feed()
