from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.models.events import EventLog
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.schemas.events import EventLogCreate, EventLogOut
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies
from healthdata.security.events import EventType, delete_events_for_user, list_events_for_user, record_event

router = APIRouter(prefix="/events-log", tags=["events-log"])

_SERVER_EVENT_TYPES = {t.value for t in EventType}


@router.get("", response_model=list[EventLogOut])
def list_events(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[EventLog]:
    ensure_allowed(policies.events.can_view_all(principal), "Insufficient permissions to view the events log")
    return list(db.scalars(select(EventLog).order_by(EventLog.id)).all())


@router.post("", response_model=EventLogOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventLogCreate,
    request: Request,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> EventLog:
    ensure_allowed(policies.events.can_create(principal), "Insufficient permissions to record an event")
    if payload.event_type in _SERVER_EVENT_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Event type {payload.event_type} is reserved for the server",
        )
    return record_event(
        db,
        payload.event_type,
        user_id=principal.user_id,
        request=request,
        details=payload.details,
    )


@router.get("/{user_id}", response_model=list[EventLogOut])
def get_user_events(
    user_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[EventLog]:
    ensure_allowed(policies.events.can_view(principal, user_id), "Insufficient permissions to view these events")
    return list_events_for_user(db, user_id)


@router.delete("/{user_id}")
def delete_user_events(
    user_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(policies.events.can_delete(principal, user_id), "Insufficient permissions to delete these events")
    deleted = delete_events_for_user(db, user_id)
    return {"success": True, "deleted": deleted, "message": "Events deleted successfully"}
