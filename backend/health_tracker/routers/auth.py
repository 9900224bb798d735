"""Registration, login and token routes."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from health_tracker.config import Settings
from health_tracker.database import get_db
from health_tracker.dependencies import get_current_user, get_settings
from health_tracker.models.user import User
from health_tracker.schemas.base import MessageOut
from health_tracker.schemas.user import RegisterRequest, LoginRequest, AuthOut, TokenOut, UserEnvelope
from health_tracker.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=AuthOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create an account and return a token for it."""
    user = auth_service.register_user(db, payload.name, payload.email, payload.password)
    token = auth_service.create_access_token(user.id, settings)
    return {"message": "User registered successfully", "token": token, "user": user}


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = auth_service.authenticate(db, payload.email, payload.password)
    token = auth_service.create_access_token(user.id, settings)
    return {"message": "Login successful", "token": token, "user": user}


@router.get("/me", response_model=UserEnvelope)
def me(user: User = Depends(get_current_user)):
    return {"user": user}


@router.post("/refresh", response_model=TokenOut)
def refresh(user: User = Depends(get_current_user), settings: Settings = Depends(get_settings)):
    """Issue a fresh token for a still-valid one."""
    return {"token": auth_service.create_access_token(user.id, settings)}


@router.post("/logout", response_model=MessageOut)
def logout(user: User = Depends(get_current_user)):
    # Tokens are stateless; the client discards its copy.
    logger.info("User %s logged out", user.id)
    return {"message": "Logout successful"}
