"""
Audit events log.

Authentication and authorization outcomes are written to ``events_log`` so an
administrator can review what a user did or was refused. Clients may also
append their own events through the ``/events-log`` routes.
"""

from __future__ import annotations

from enum import Enum
import hashlib
import logging
from typing import Any

from fastapi import Request
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from healthdata.models.events import EventLog

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    PROFILE_CREATED = "PROFILE_CREATED"
    AUTH_REJECTED = "AUTH_REJECTED"
    PERMISSION_DENIED = "PERMISSION_DENIED"


def hash_client_ip(request: Request | None) -> str | None:
    if request is None or request.client is None or not request.client.host:
        return None
    return hashlib.sha256(request.client.host.encode("utf-8")).hexdigest()


def record_event(
    db: Session,
    event_type: EventType | str,
    *,
    user_id: str | None = None,
    request: Request | None = None,
    details: dict[str, Any] | None = None,
) -> EventLog:
    """Append one event and commit it."""

    event = EventLog(
        event_type=getattr(event_type, "value", event_type),
        user_id=user_id,
        ip_hash=hash_client_ip(request),
        user_agent=request.headers.get("user-agent") if request is not None else None,
        details=details,
    )
    db.add(event)
    db.commit()
    logger.debug("Recorded event type=%s user=%s", event.event_type, user_id)
    return event


def list_events_for_user(db: Session, user_id: str) -> list[EventLog]:
    stmt = select(EventLog).where(EventLog.user_id == user_id).order_by(EventLog.created_at, EventLog.id)
    return list(db.scalars(stmt).all())


def delete_events_for_user(db: Session, user_id: str) -> int:
    result = db.execute(delete(EventLog).where(EventLog.user_id == user_id))
    db.commit()
    logger.info("Deleted %s events for user=%s", result.rowcount, user_id)
    return result.rowcount
