"""
JWT utilities for TaskCatalyst.

Issues and validates the access/refresh token pair that the identity
endpoints store in httpOnly cookies.
"""
import jwt
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID
from django.conf import settings


JWT_ALGORITHM = 'HS256'
ACCESS_TOKEN_EXPIRE_MINUTES = 15
REFRESH_TOKEN_EXPIRE_DAYS = 7

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


def _encode(payload: dict) -> str:
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=JWT_ALGORITHM)


def create_access_token(user_id: UUID) -> str:
    """
    Create a short-lived access token.
    Expires in 15 minutes.
    """
    now = datetime.now(timezone.utc)
    return _encode({
        'sub': str(user_id),
        'exp': now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        'iat': now,
        'type': 'access',
    })


def create_refresh_token(user_id: UUID) -> str:
    """
    Create a long-lived refresh token used to mint new access tokens.
    Expires in 7 days.
    """
    now = datetime.now(timezone.utc)
    return _encode({
        'sub': str(user_id),
        'exp': now + timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
        'iat': now,
        'type': 'refresh',
    })


def create_token_pair(user_id: UUID) -> Tuple[str, str]:
    """Returns (access_token, refresh_token)."""
    return create_access_token(user_id), create_refresh_token(user_id)


def decode_token(token: str) -> Optional[dict]:
    """
    Decode and validate a JWT token.

    Returns:
        Decoded payload if valid, None if invalid/expired.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None


def get_user_id_from_token(token: str, token_type: str = 'access') -> Optional[UUID]:
    """Extract the user id from a valid token of the given type."""
    payload = decode_token(token)
    if not payload or payload.get('type') != token_type or 'sub' not in payload:
        return None
    try:
        return UUID(payload['sub'])
    except ValueError:
        return None


def get_cookie_settings(is_production: bool = False, max_age: int = 0) -> dict:
    """
    Cookie settings for auth tokens.

    Production cookies are Secure; both environments use SameSite=Lax.
    """
    return {
        'httponly': True,
        'secure': is_production,
        'samesite': 'Lax',
        'path': '/',
        'max_age': max_age,
    }


def set_auth_cookies(response, user_id: UUID, is_production: bool = False):
    """Attach a fresh token pair to the response."""
    access_token, refresh_token = create_token_pair(user_id)
    response.set_cookie(
        ACCESS_COOKIE, access_token,
        **get_cookie_settings(is_production, ACCESS_TOKEN_EXPIRE_MINUTES * 60),
    )
    response.set_cookie(
        REFRESH_COOKIE, refresh_token,
        **get_cookie_settings(is_production, REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60),
    )
    return response
