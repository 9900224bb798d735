"""Status transitions for alerts and diagnostic tests.

Acknowledged and resolved alerts carry a timestamp that is set the first
time the status is reached and never moved afterwards. Both the dedicated
endpoints and the generic update path go through ``set_alert_status``;
dismissal has no dedicated endpoint and is reached through the generic path.
"""
from datetime import datetime
from typing import Optional

from health_tracker.models.alert import Alert, AlertStatus
from health_tracker.models.diagnostic_test import DiagnosticTest, TestStatus
from health_tracker.models.user import utcnow


def set_alert_status(alert: Alert, status: AlertStatus, now: Optional[datetime] = None) -> Alert:
    now = now or utcnow()
    alert.status = status
    if status == AlertStatus.acknowledged and alert.acknowledged_at is None:
        alert.acknowledged_at = now
    if status == AlertStatus.resolved and alert.resolved_at is None:
        alert.resolved_at = now
    return alert


def acknowledge(alert: Alert, now: Optional[datetime] = None) -> Alert:
    return set_alert_status(alert, AlertStatus.acknowledged, now)


def resolve(alert: Alert, now: Optional[datetime] = None) -> Alert:
    return set_alert_status(alert, AlertStatus.resolved, now)


def mark_reviewed(test: DiagnosticTest) -> DiagnosticTest:
    test.status = TestStatus.reviewed
    return test


def cancel(test: DiagnosticTest) -> DiagnosticTest:
    test.status = TestStatus.cancelled
    return test
