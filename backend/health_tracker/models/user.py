"""User ORM model — credential store and preference blob."""
import uuid
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, Boolean, JSON
from sqlalchemy.orm import relationship

from health_tracker.database import Base, UTCDateTime


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationThreshold(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Theme(str, enum.Enum):
    light = "light"
    dark = "dark"


class Language(str, enum.Enum):
    en = "en"
    es = "es"
    fr = "fr"
    de = "de"


DEFAULT_PREFERENCES = {
    "notificationThreshold": NotificationThreshold.medium.value,
    "emailNotifications": True,
    "theme": Theme.light.value,
    "language": Language.en.value,
}


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    is_admin = Column(Boolean, nullable=False, default=False)
    preferences = Column(JSON, nullable=False, default=dict)
    last_login = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    alerts = relationship(
        "Alert", back_populates="user", cascade="all, delete-orphan", passive_deletes=True,
    )
    diagnostic_tests = relationship(
        "DiagnosticTest", back_populates="user", cascade="all, delete-orphan", passive_deletes=True,
    )

    @property
    def effective_preferences(self) -> dict:
        """Stored preferences layered over the defaults."""
        return {**DEFAULT_PREFERENCES, **(self.preferences or {})}
