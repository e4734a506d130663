"""
Request authentication helpers shared by every router.

A request is authenticated either by a Django session (admin, tests) or by
the JWT access token cookie issued at login.
"""
from typing import Optional
from django.http import HttpRequest
from ninja.errors import HttpError

from .jwt_auth import ACCESS_COOKIE, get_user_id_from_token
from .models import User


def get_current_user(request: HttpRequest) -> Optional[User]:
    """Return the authenticated active user, or None."""
    session_user = getattr(request, 'user', None)
    if session_user is not None and session_user.is_authenticated:
        return session_user if session_user.is_active else None

    access_token = request.COOKIES.get(ACCESS_COOKIE)
    if not access_token:
        return None

    user_id = get_user_id_from_token(access_token)
    if not user_id:
        return None

    try:
        return User.objects.get(id=user_id, is_active=True)
    except User.DoesNotExist:
        return None


def require_auth(request: HttpRequest) -> User:
    """
    Require authentication. Raises 401 if not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HttpError(401, "Authentication required")
    return user
