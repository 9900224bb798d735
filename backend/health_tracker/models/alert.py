"""Alert ORM model."""
import uuid
import enum

from sqlalchemy import Column, String, Text, JSON, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import relationship

from health_tracker.database import Base, UTCDateTime
from health_tracker.models.user import utcnow


class AlertStatus(str, enum.Enum):
    active = "active"
    acknowledged = "acknowledged"
    resolved = "resolved"
    dismissed = "dismissed"


class AlertPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class AlertType(str, enum.Enum):
    general = "general"
    health = "health"
    system = "system"
    diagnostic = "diagnostic"
    reminder = "reminder"


# Higher rank sorts first.
PRIORITY_RANK = {
    AlertPriority.critical: 4,
    AlertPriority.high: 3,
    AlertPriority.medium: 2,
    AlertPriority.low: 1,
}


class Alert(Base):
    __tablename__ = "alerts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=True)
    status = Column(SAEnum(AlertStatus), nullable=False, default=AlertStatus.active, index=True)
    priority = Column(SAEnum(AlertPriority), nullable=False, default=AlertPriority.medium, index=True)
    type = Column(SAEnum(AlertType), nullable=False, default=AlertType.general)
    # "metadata" is reserved on declarative classes.
    alert_metadata = Column("metadata", JSON, nullable=False, default=dict)
    acknowledged_at = Column(UTCDateTime, nullable=True)
    resolved_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="alerts")
