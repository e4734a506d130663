"""DTOs and request schemas for Identity app."""
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID
from typing import Optional, List, Literal

from ninja import Schema
from pydantic import Field, field_validator


@dataclass(frozen=True)
class UserDTO:
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    profile_image_url: Optional[str]
    subscription_status: str
    interests: List[str] = field(default_factory=list)
    life_goal: Optional[str] = None
    daily_free_time: Optional[int] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    onboarding_completed: bool = False
    productivity_score: int = 100
    productivity_streak: int = 0
    last_activity_date: Optional[date] = None


class UserOut(Schema):
    id: UUID
    username: str
    email: str
    first_name: str
    last_name: str
    profile_image_url: Optional[str] = None
    subscription_status: str
    interests: List[str]
    life_goal: Optional[str] = None
    daily_free_time: Optional[int] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    onboarding_completed: bool
    productivity_score: int
    productivity_streak: int
    last_activity_date: Optional[date] = None


class RegisterIn(Schema):
    username: str = Field(..., min_length=1, max_length=150)
    email: str
    password: str = Field(..., min_length=8)
    first_name: str = ""
    last_name: str = ""


class LoginIn(Schema):
    username: str
    password: str


class OnboardingIn(Schema):
    interests: List[str] = Field(..., min_length=3, max_length=5)
    life_goal: str = Field(..., min_length=1, max_length=200)
    daily_free_time: int = Field(..., ge=0, le=24)
    age: int = Field(..., ge=13, le=120)
    gender: Literal["male", "female", "non-binary", "prefer-not-to-say", "custom"]

    @field_validator('interests')
    @classmethod
    def strip_interests(cls, v):
        cleaned = [i.strip() for i in v if i.strip()]
        if len(cleaned) != len(v):
            raise ValueError("Interests must be non-empty")
        return cleaned


class AuthOut(Schema):
    success: bool
    user: Optional[UserOut] = None
    message: Optional[str] = None
