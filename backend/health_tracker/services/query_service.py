"""Owner-scoped list queries, pagination and summary counts.

Every query here starts from ``user_id == owner``; filters are ANDed on
top and unsupplied filters are ignored. Orderings end with the primary key
so that consecutive pages never repeat or skip a row.
"""
import math
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Query, Session, joinedload

from health_tracker.models.alert import Alert, AlertPriority, AlertStatus, AlertType, PRIORITY_RANK
from health_tracker.models.diagnostic_test import DiagnosticTest, TestStatus, TestType
from health_tracker.schemas.base import Pagination

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


class Page:
    """One page of an ordered result plus the count of the whole result."""

    def __init__(self, items: list, total: int, page: int, limit: int):
        self.items = items
        self.total = total
        self.page = page
        self.limit = limit

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def pagination(self) -> Pagination:
        return Pagination(
            current_page=self.page,
            total_pages=self.total_pages,
            total_items=self.total,
            items_per_page=self.limit,
            has_next_page=self.has_next,
            has_prev_page=self.has_prev,
        )


def paginate(query: Query, page: int = DEFAULT_PAGE, limit: int = DEFAULT_LIMIT) -> Page:
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return Page(items=items, total=total, page=page, limit=limit)


def _severity_rank():
    return case(
        *[(Alert.priority == priority, rank) for priority, rank in PRIORITY_RANK.items()],
        else_=0,
    )


def alert_query(
    db: Session,
    user_id: str,
    status: Optional[AlertStatus] = None,
    priority: Optional[AlertPriority] = None,
    alert_type: Optional[AlertType] = None,
) -> Query:
    """Owner's alerts, most severe first, then newest first."""
    query = db.query(Alert).options(joinedload(Alert.user)).filter(Alert.user_id == user_id)
    if status:
        query = query.filter(Alert.status == status)
    if priority:
        query = query.filter(Alert.priority == priority)
    if alert_type:
        query = query.filter(Alert.type == alert_type)
    return query.order_by(_severity_rank().desc(), Alert.created_at.desc(), Alert.id)


def active_alerts(db: Session, user_id: str) -> list[Alert]:
    return alert_query(db, user_id, status=AlertStatus.active).all()


def diagnostic_test_query(
    db: Session,
    user_id: str,
    test_type: Optional[TestType] = None,
    status: Optional[TestStatus] = None,
    is_abnormal: Optional[bool] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> Query:
    """Owner's diagnostic tests, most recent test date first.

    ``date_from`` and ``date_to`` are inclusive; a missing bound leaves that
    side open.
    """
    query = (
        db.query(DiagnosticTest)
        .options(joinedload(DiagnosticTest.user))
        .filter(DiagnosticTest.user_id == user_id)
    )
    if test_type:
        query = query.filter(DiagnosticTest.test_type == test_type)
    if status:
        query = query.filter(DiagnosticTest.status == status)
    if is_abnormal is not None:
        query = query.filter(DiagnosticTest.is_abnormal == is_abnormal)
    if date_from:
        query = query.filter(DiagnosticTest.date >= date_from)
    if date_to:
        query = query.filter(DiagnosticTest.date <= date_to)
    return query.order_by(
        DiagnosticTest.date.desc(), DiagnosticTest.created_at.desc(), DiagnosticTest.id,
    )


def abnormal_tests(db: Session, user_id: str) -> list[DiagnosticTest]:
    return diagnostic_test_query(db, user_id, is_abnormal=True).all()


def recent_tests(db: Session, user_id: str, days: int, today: Optional[date] = None) -> list[DiagnosticTest]:
    cutoff = (today or date.today()) - timedelta(days=days)
    return diagnostic_test_query(db, user_id, date_from=cutoff).all()


def _bump(counts: dict[str, int], key: str, n: int) -> None:
    counts[key] = counts.get(key, 0) + n


def alert_summary(db: Session, user_id: str) -> dict:
    """Total plus sparse counts by status and by priority, from one grouped query."""
    rows = (
        db.query(Alert.status, Alert.priority, func.count(Alert.id))
        .filter(Alert.user_id == user_id)
        .group_by(Alert.status, Alert.priority)
        .all()
    )
    total = 0
    by_status: dict[str, int] = {}
    by_priority: dict[str, int] = {}
    for status, priority, n in rows:
        total += n
        _bump(by_status, AlertStatus(status).value, n)
        _bump(by_priority, AlertPriority(priority).value, n)
    return {"total": total, "by_status": by_status, "by_priority": by_priority}


def diagnostic_test_summary(db: Session, user_id: str, recent_days: int = 30, today: Optional[date] = None) -> dict:
    """Total, abnormal and recent counts plus sparse counts by status and type."""
    cutoff = (today or date.today()) - timedelta(days=recent_days)
    rows = (
        db.query(
            DiagnosticTest.status,
            DiagnosticTest.test_type,
            DiagnosticTest.is_abnormal,
            func.count(DiagnosticTest.id),
            func.sum(case((DiagnosticTest.date >= cutoff, 1), else_=0)),
        )
        .filter(DiagnosticTest.user_id == user_id)
        .group_by(DiagnosticTest.status, DiagnosticTest.test_type, DiagnosticTest.is_abnormal)
        .all()
    )
    summary = {"total": 0, "abnormal": 0, "recent": 0, "by_status": {}, "by_type": {}}
    for status, test_type, is_abnormal, n, n_recent in rows:
        summary["total"] += n
        if is_abnormal:
            summary["abnormal"] += n
        summary["recent"] += int(n_recent or 0)
        _bump(summary["by_status"], TestStatus(status).value, n)
        _bump(summary["by_type"], TestType(test_type).value, n)
    return summary
