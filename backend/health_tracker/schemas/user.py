"""Pydantic schemas for Users, auth and preferences."""
from __future__ import annotations
from datetime import datetime
from typing import Annotated, Any, Optional
from pydantic import EmailStr, Field, StringConstraints, model_validator

from health_tracker.models.user import NotificationThreshold, Theme, Language
from health_tracker.schemas.base import ApiModel

# Passwords are compared byte for byte, so they opt out of the model-wide stripping.
Password = Annotated[str, StringConstraints(strip_whitespace=False)]


class UserSummary(ApiModel):
    """Owner summary embedded in alerts and tests."""
    id: str
    name: str
    email: str


class UserOut(ApiModel):
    id: str
    name: str
    email: str
    is_active: bool
    is_admin: bool
    preferences: dict[str, Any] = Field(validation_alias="effective_preferences")
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class RegisterRequest(ApiModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: Password = Field(min_length=6, max_length=128)


class LoginRequest(ApiModel):
    email: EmailStr
    password: Password = Field(min_length=1)


class AuthOut(ApiModel):
    message: str
    token: str
    user: UserOut


class TokenOut(ApiModel):
    token: str


class ProfileUpdate(ApiModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None


class ProfileOut(ApiModel):
    message: str
    user: UserOut


class UserEnvelope(ApiModel):
    user: UserOut


class PreferencesUpdate(ApiModel):
    notification_threshold: Optional[NotificationThreshold] = None
    email_notifications: Optional[bool] = None
    theme: Optional[Theme] = None
    language: Optional[Language] = None


class PreferencesOut(ApiModel):
    message: str
    preferences: dict[str, Any]


class PasswordChange(ApiModel):
    current_password: Password = Field(min_length=1)
    new_password: Password = Field(min_length=6, max_length=128)
    confirm_password: Password

    @model_validator(mode="after")
    def _confirmation_matches(self) -> "PasswordChange":
        if self.confirm_password != self.new_password:
            raise ValueError("Password confirmation does not match")
        return self


class UserStats(ApiModel):
    total_alerts: int
    active_alerts: int
    total_tests: int
    member_since: datetime
    last_login: Optional[datetime] = None


class UserStatsOut(ApiModel):
    stats: UserStats


class UserListOut(ApiModel):
    users: list[UserOut]
    count: int
