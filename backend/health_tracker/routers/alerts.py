"""Alert API routes — every route is scoped to the authenticated owner."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from health_tracker.database import get_db
from health_tracker.dependencies import get_current_user
from health_tracker.models.alert import AlertStatus, AlertPriority, AlertType
from health_tracker.models.user import User
from health_tracker.schemas.alert import (
    AlertCreate, AlertUpdate, AlertEnvelope, AlertMessageOut, AlertListOut,
    AlertCollectionOut, AlertSummaryOut,
)
from health_tracker.schemas.base import MessageOut
from health_tracker.services import alert_service, query_service

router = APIRouter()


@router.get("", response_model=AlertListOut)
def list_alerts(
    page: int = Query(query_service.DEFAULT_PAGE, ge=1),
    limit: int = Query(query_service.DEFAULT_LIMIT, ge=1, le=query_service.MAX_LIMIT),
    alert_status: Optional[AlertStatus] = Query(None, alias="status"),
    priority: Optional[AlertPriority] = Query(None),
    alert_type: Optional[AlertType] = Query(None, alias="type"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """List the caller's alerts, most severe and newest first."""
    query = query_service.alert_query(db, user.id, alert_status, priority, alert_type)
    result = query_service.paginate(query, page, limit)
    return {"alerts": result.items, "pagination": result.pagination()}


@router.get("/active", response_model=AlertCollectionOut)
def list_active_alerts(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    alerts = query_service.active_alerts(db, user.id)
    return {"alerts": alerts, "count": len(alerts)}


@router.get("/stats/summary", response_model=AlertSummaryOut)
def alert_summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Counts by status and priority; zero-count keys are omitted."""
    return {"summary": query_service.alert_summary(db, user.id)}


@router.get("/{alert_id}", response_model=AlertEnvelope)
def get_alert(alert_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"alert": alert_service.get_owned_alert(db, user, alert_id)}


@router.post("", response_model=AlertMessageOut, status_code=status.HTTP_201_CREATED)
def create_alert(payload: AlertCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    alert = alert_service.create_alert(db, user, payload)
    return {"message": "Alert created successfully", "alert": alert}


@router.put("/{alert_id}", response_model=AlertMessageOut)
def update_alert(
    alert_id: str,
    payload: AlertUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Partial update; metadata is merged into the existing map."""
    alert = alert_service.update_alert(db, user, alert_id, payload)
    return {"message": "Alert updated successfully", "alert": alert}


@router.put("/{alert_id}/acknowledge", response_model=AlertMessageOut)
def acknowledge_alert(alert_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    alert = alert_service.acknowledge_alert(db, user, alert_id)
    return {"message": "Alert acknowledged successfully", "alert": alert}


@router.put("/{alert_id}/resolve", response_model=AlertMessageOut)
def resolve_alert(alert_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    alert = alert_service.resolve_alert(db, user, alert_id)
    return {"message": "Alert resolved successfully", "alert": alert}


@router.delete("/{alert_id}", response_model=MessageOut)
def delete_alert(alert_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    alert_service.delete_alert(db, user, alert_id)
    return {"message": "Alert deleted successfully"}
