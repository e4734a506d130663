"""
Identity API endpoints with JWT authentication.

Provides registration, login, logout, token refresh, profile and onboarding.
Tokens travel in httpOnly cookies.
"""
import os
from uuid import UUID
from ninja import Router
from ninja.errors import HttpError
from django.conf import settings
from django.contrib.auth import authenticate
from django.http import HttpRequest, HttpResponse

from .models import User
from .dtos import AuthOut, LoginIn, OnboardingIn, RegisterIn, UserOut
from .services import complete_onboarding, get_user_dto, register_user
from .security import require_auth
from .jwt_auth import (
    ACCESS_COOKIE,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_COOKIE,
    create_access_token,
    get_cookie_settings,
    get_user_id_from_token,
    set_auth_cookies,
)

router = Router(tags=["Identity"])


def is_production() -> bool:
    return bool(os.getenv('RUNNING_IN_PRODUCTION')) or not settings.DEBUG


def _auth_response(user_id: UUID, message: str = None) -> HttpResponse:
    body = AuthOut(success=True, user=UserOut.from_orm(get_user_dto(user_id)), message=message)
    return HttpResponse(body.model_dump_json(), content_type='application/json')


# =============================================================================
# Auth Endpoints
# =============================================================================

@router.post("/register", response=AuthOut, auth=None)
def register(request: HttpRequest, payload: RegisterIn):
    """Create an account and log it in."""
    try:
        user = register_user(payload)
    except ValueError as e:
        raise HttpError(400, str(e))

    response = _auth_response(user.id, message="Registered")
    return set_auth_cookies(response, user.id, is_production())


@router.post("/login", response=AuthOut, auth=None)
def login_user(request: HttpRequest, payload: LoginIn):
    """
    Authenticate user and set JWT tokens in httpOnly cookies.
    """
    user = authenticate(request, username=payload.username, password=payload.password)

    if user is None:
        raise HttpError(401, "Invalid username or password")

    response = _auth_response(user.id)
    return set_auth_cookies(response, user.id, is_production())


@router.post("/logout", response=AuthOut, auth=None)
def logout_user(request: HttpRequest):
    """Clear authentication cookies."""
    response = HttpResponse(
        AuthOut(success=True, message="Logged out").model_dump_json(),
        content_type='application/json'
    )
    response.delete_cookie(ACCESS_COOKIE, path='/')
    response.delete_cookie(REFRESH_COOKIE, path='/')
    return response


@router.post("/refresh", response=AuthOut, auth=None)
def refresh_token(request: HttpRequest):
    """Issue a new access token from the refresh token cookie."""
    refresh_value = request.COOKIES.get(REFRESH_COOKIE)
    if not refresh_value:
        raise HttpError(401, "No refresh token")

    user_id = get_user_id_from_token(refresh_value, token_type='refresh')
    if not user_id or not User.objects.filter(id=user_id, is_active=True).exists():
        raise HttpError(401, "Invalid refresh token")

    response = _auth_response(user_id)
    response.set_cookie(
        ACCESS_COOKIE,
        create_access_token(user_id),
        **get_cookie_settings(is_production(), ACCESS_TOKEN_EXPIRE_MINUTES * 60),
    )
    return response


@router.get("/me", response=UserOut, auth=None)
def get_me(request: HttpRequest):
    """Get current authenticated user's profile."""
    user = require_auth(request)
    return get_user_dto(user.id)


@router.post("/onboarding", response=UserOut, auth=None)
def onboarding(request: HttpRequest, payload: OnboardingIn):
    """Store the onboarding profile; interests feed catalyst relevance."""
    user = require_auth(request)
    user_dto = complete_onboarding(user.id, payload)
    if not user_dto:
        raise HttpError(404, "User not found")
    return user_dto
