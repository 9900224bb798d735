"""Diagnostic test service — owner-scoped create / lookup / patch / delete."""
import logging

from sqlalchemy.orm import Session

from health_tracker.errors import NotFound
from health_tracker.models.diagnostic_test import DiagnosticTest
from health_tracker.models.user import User
from health_tracker.schemas.diagnostic_test import DiagnosticTestCreate, DiagnosticTestUpdate
from health_tracker.services import transitions

logger = logging.getLogger(__name__)


def get_owned_test(db: Session, owner: User, test_id: str) -> DiagnosticTest:
    test = (
        db.query(DiagnosticTest)
        .filter(DiagnosticTest.id == test_id, DiagnosticTest.user_id == owner.id)
        .first()
    )
    if not test:
        raise NotFound("Diagnostic test not found")
    return test


def create_test(db: Session, owner: User, payload: DiagnosticTestCreate) -> DiagnosticTest:
    test = DiagnosticTest(user_id=owner.id, **payload.model_dump())
    db.add(test)
    db.commit()
    db.refresh(test)
    logger.info("Created diagnostic test %s for user %s", test.id, owner.id)
    return test


def update_test(db: Session, owner: User, test_id: str, patch: DiagnosticTestUpdate) -> DiagnosticTest:
    """Replace each field present in ``patch``; omitted fields keep their value."""
    test = get_owned_test(db, owner, test_id)
    for field, value in patch.model_dump(exclude_unset=True).items():
        setattr(test, field, value)
    db.commit()
    db.refresh(test)
    logger.info("Updated diagnostic test %s", test.id)
    return test


def review_test(db: Session, owner: User, test_id: str) -> DiagnosticTest:
    test = transitions.mark_reviewed(get_owned_test(db, owner, test_id))
    db.commit()
    db.refresh(test)
    logger.info("Marked diagnostic test %s as reviewed", test.id)
    return test


def cancel_test(db: Session, owner: User, test_id: str) -> DiagnosticTest:
    test = transitions.cancel(get_owned_test(db, owner, test_id))
    db.commit()
    db.refresh(test)
    logger.info("Cancelled diagnostic test %s", test.id)
    return test


def delete_test(db: Session, owner: User, test_id: str) -> None:
    test = get_owned_test(db, owner, test_id)
    db.delete(test)
    db.commit()
    logger.info("Deleted diagnostic test %s for user %s", test_id, owner.id)
