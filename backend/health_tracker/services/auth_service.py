"""Credential handling and bearer-token resolution.

Responsibilities:
- Password hashing (werkzeug.security) and signed tokens (PyJWT)
- Classifying token failures: missing, invalid, expired, inactive
- Registration with email uniqueness, login with last-login bookkeeping
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

import jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from health_tracker.config import Settings
from health_tracker.errors import AuthError, ConflictError
from health_tracker.models.user import User, utcnow

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user_id: str, settings: Settings, now: Optional[datetime] = None) -> str:
    """Sign a token carrying the user id and an expiry."""
    issued = now or utcnow()
    claims = {
        "sub": user_id,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.JWT_EXPIRES_MINUTES),
    }
    return jwt.encode(claims, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str, settings: Settings) -> str:
    """Return the user id claimed by ``token`` or raise a classified AuthError."""
    try:
        claims = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Access denied. Token expired.", reason="expired")
    except jwt.InvalidTokenError:
        raise AuthError("Access denied. Invalid token.", reason="invalid")

    user_id = claims.get("sub")
    if not user_id:
        raise AuthError("Access denied. Invalid token.", reason="invalid")
    return user_id


def resolve_token(db: Session, token: Optional[str], settings: Settings) -> User:
    """Resolve a bearer credential to an active user."""
    try:
        if not token:
            raise AuthError("Access denied. No token provided.", reason="missing")
        user_id = decode_token(token, settings)
        user = db.query(User).filter(User.id == user_id).first()
        if not user or not user.is_active:
            raise AuthError("Access denied. Invalid token or user inactive.", reason="inactive")
    except AuthError as exc:
        logger.info("Rejected bearer credential (%s)", exc.reason)
        raise
    return user


def email_taken(db: Session, email: str, exclude_id: Optional[str] = None) -> bool:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def register_user(db: Session, name: str, email: str, password: str) -> User:
    email = normalize_email(email)
    if email_taken(db, email):
        raise ConflictError("User already exists with this email")

    user = User(name=name, email=email, password_hash=hash_password(password), preferences={})
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("User already exists with this email")
    db.refresh(user)
    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Check credentials and stamp ``last_login``."""
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user or not verify_password(user.password_hash, password):
        logger.info("Failed login attempt")
        raise AuthError("Invalid credentials", reason="invalid")
    if not user.is_active:
        raise AuthError("Account is deactivated", reason="inactive")

    user.last_login = utcnow()
    db.commit()
    db.refresh(user)
    logger.info("User %s logged in", user.id)
    return user
