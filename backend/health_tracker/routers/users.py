"""User API routes — self-service profile plus admin-only user management."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from health_tracker.database import get_db
from health_tracker.dependencies import get_current_user, require_admin
from health_tracker.errors import ConflictError, NotFound, ValidationFailed
from health_tracker.models.alert import Alert, AlertStatus
from health_tracker.models.diagnostic_test import DiagnosticTest
from health_tracker.models.user import User
from health_tracker.schemas.base import MessageOut
from health_tracker.schemas.user import (
    UserEnvelope, ProfileUpdate, ProfileOut, PreferencesUpdate, PreferencesOut,
    PasswordChange, UserStatsOut, UserListOut,
)
from health_tracker.services import auth_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/profile", response_model=UserEnvelope)
def get_profile(user: User = Depends(get_current_user)):
    return {"user": user}


@router.put("/profile", response_model=ProfileOut)
def update_profile(payload: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Update name and/or email; a new email must not belong to another user."""
    if payload.name is not None:
        user.name = payload.name
    if payload.email is not None:
        email = auth_service.normalize_email(payload.email)
        if auth_service.email_taken(db, email, exclude_id=user.id):
            raise ConflictError("Email is already taken by another user")
        user.email = email
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email is already taken by another user")
    db.refresh(user)
    logger.info("Updated profile for user %s", user.id)
    return {"message": "Profile updated successfully", "user": user}


@router.put("/preferences", response_model=PreferencesOut)
def update_preferences(
    payload: PreferencesUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Merge the supplied preference keys into the stored map."""
    changes = payload.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude_none=True)
    user.preferences = {**(user.preferences or {}), **changes}
    db.commit()
    db.refresh(user)
    logger.info("Updated preferences for user %s (%s)", user.id, ", ".join(sorted(changes)))
    return {"message": "Preferences updated successfully", "preferences": user.effective_preferences}


@router.put("/password", response_model=MessageOut)
def change_password(payload: PasswordChange, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not auth_service.verify_password(user.password_hash, payload.current_password):
        raise ValidationFailed(
            "Current password is incorrect",
            errors=[{"field": "currentPassword", "message": "Current password is incorrect"}],
        )
    user.password_hash = auth_service.hash_password(payload.new_password)
    db.commit()
    logger.info("Changed password for user %s", user.id)
    return {"message": "Password changed successfully"}


@router.delete("/account", response_model=MessageOut)
def deactivate_account(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Soft delete: the account stays but can no longer authenticate."""
    user.is_active = False
    db.commit()
    logger.info("Deactivated user %s", user.id)
    return {"message": "Account deactivated successfully"}


@router.get("/stats", response_model=UserStatsOut)
def user_stats(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    total_alerts = db.query(func.count(Alert.id)).filter(Alert.user_id == user.id).scalar()
    active_alerts = (
        db.query(func.count(Alert.id))
        .filter(Alert.user_id == user.id, Alert.status == AlertStatus.active)
        .scalar()
    )
    total_tests = db.query(func.count(DiagnosticTest.id)).filter(DiagnosticTest.user_id == user.id).scalar()
    return {
        "stats": {
            "total_alerts": total_alerts,
            "active_alerts": active_alerts,
            "total_tests": total_tests,
            "member_since": user.created_at,
            "last_login": user.last_login,
        }
    }


@router.get("/", response_model=UserListOut)
def list_users(admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """List all users (admin only)."""
    users = db.query(User).order_by(User.created_at).all()
    return {"users": users, "count": len(users)}


@router.delete("/{user_id}", response_model=MessageOut)
def delete_user(user_id: str, admin: User = Depends(require_admin), db: Session = Depends(get_db)):
    """Hard delete a user; their alerts and tests go with them."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User not found")
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user %s", admin.id, user_id)
    return {"message": "User deleted successfully"}
