"""Alert service — owner-scoped create / lookup / patch / delete.

Ownership: every lookup is by id AND owner. A row that belongs to someone
else raises exactly the same NotFound as a row that does not exist.
"""
import logging
from typing import Any

from sqlalchemy.orm import Session

from health_tracker.errors import NotFound
from health_tracker.models.alert import Alert, AlertStatus
from health_tracker.models.user import User
from health_tracker.schemas.alert import AlertCreate, AlertUpdate
from health_tracker.services import transitions

logger = logging.getLogger(__name__)


def get_owned_alert(db: Session, owner: User, alert_id: str) -> Alert:
    alert = db.query(Alert).filter(Alert.id == alert_id, Alert.user_id == owner.id).first()
    if not alert:
        raise NotFound("Alert not found")
    return alert


def create_alert(db: Session, owner: User, payload: AlertCreate) -> Alert:
    """Persist a new alert; the owner always comes from the caller's identity."""
    alert = Alert(
        user_id=owner.id,
        title=payload.title,
        message=payload.message,
        priority=payload.priority,
        type=payload.type,
        alert_metadata=dict(payload.metadata),
    )
    db.add(alert)
    db.commit()
    db.refresh(alert)
    logger.info("Created alert %s for user %s", alert.id, owner.id)
    return alert


def apply_patch(alert: Alert, patch: AlertUpdate) -> Alert:
    """Apply the fields present in ``patch``.

    ``metadata`` is shallow-merged into the stored map; every other field is
    replaced. A status change runs through the transition rules.
    """
    updates: dict[str, Any] = patch.model_dump(exclude_unset=True)
    for field, value in updates.items():
        if field == "metadata":
            alert.alert_metadata = {**(alert.alert_metadata or {}), **value}
        elif field == "status":
            transitions.set_alert_status(alert, AlertStatus(value))
        else:
            setattr(alert, field, value)
    return alert


def update_alert(db: Session, owner: User, alert_id: str, patch: AlertUpdate) -> Alert:
    alert = get_owned_alert(db, owner, alert_id)
    apply_patch(alert, patch)
    db.commit()
    db.refresh(alert)
    logger.info("Updated alert %s (%s)", alert.id, ", ".join(sorted(patch.model_fields_set)) or "no fields")
    return alert


def acknowledge_alert(db: Session, owner: User, alert_id: str) -> Alert:
    alert = transitions.acknowledge(get_owned_alert(db, owner, alert_id))
    db.commit()
    db.refresh(alert)
    logger.info("Acknowledged alert %s", alert.id)
    return alert


def resolve_alert(db: Session, owner: User, alert_id: str) -> Alert:
    alert = transitions.resolve(get_owned_alert(db, owner, alert_id))
    db.commit()
    db.refresh(alert)
    logger.info("Resolved alert %s", alert.id)
    return alert


def delete_alert(db: Session, owner: User, alert_id: str) -> None:
    alert = get_owned_alert(db, owner, alert_id)
    db.delete(alert)
    db.commit()
    logger.info("Deleted alert %s for user %s", alert_id, owner.id)
