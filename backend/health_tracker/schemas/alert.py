"""Pydantic schemas for Alerts."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Optional
from pydantic import Field, model_validator

from health_tracker.models.alert import AlertStatus, AlertPriority, AlertType
from health_tracker.schemas.base import ApiModel, Pagination
from health_tracker.schemas.user import UserSummary


class AlertCreate(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    message: Optional[str] = Field(default=None, max_length=1000)
    priority: AlertPriority = AlertPriority.medium
    type: AlertType = AlertType.general
    metadata: dict[str, Any] = Field(default_factory=dict)


class AlertUpdate(ApiModel):
    """Patch: only fields present in the request are applied."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    message: Optional[str] = Field(default=None, max_length=1000)
    status: Optional[AlertStatus] = None
    priority: Optional[AlertPriority] = None
    type: Optional[AlertType] = None
    metadata: Optional[dict[str, Any]] = None

    @model_validator(mode="after")
    def _required_fields_not_cleared(self) -> "AlertUpdate":
        for field in ("title", "status", "priority", "type", "metadata"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class AlertOut(ApiModel):
    id: str
    title: str
    message: Optional[str] = None
    status: AlertStatus
    priority: AlertPriority
    type: AlertType
    user_id: str
    metadata: dict[str, Any] = Field(validation_alias="alert_metadata")
    acknowledged_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    user: UserSummary


class AlertEnvelope(ApiModel):
    alert: AlertOut


class AlertMessageOut(ApiModel):
    message: str
    alert: AlertOut


class AlertListOut(ApiModel):
    alerts: list[AlertOut]
    pagination: Pagination


class AlertCollectionOut(ApiModel):
    alerts: list[AlertOut]
    count: int


class AlertSummary(ApiModel):
    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]


class AlertSummaryOut(ApiModel):
    summary: AlertSummary
