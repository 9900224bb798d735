"""Request-scoped dependencies: settings and the three auth modes."""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from health_tracker.config import Settings
from health_tracker.database import get_db
from health_tracker.errors import AuthError, ForbiddenError
from health_tracker.models.user import User
from health_tracker.services import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _token(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials else None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> User:
    """Required mode: fail the request unless the token resolves to an active user."""
    return auth_service.resolve_token(db, _token(credentials), settings)


def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Optional[User]:
    """Optional mode: anonymous (None) instead of failing."""
    try:
        return auth_service.resolve_token(db, _token(credentials), settings)
    except AuthError:
        return None


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Elevated mode: an authenticated administrator."""
    if not user.is_admin:
        raise ForbiddenError()
    return user
