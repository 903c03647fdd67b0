from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventLogCreate(BaseModel):
    # The event is always recorded for the caller; there is no user_id field.
    event_type: str = Field(min_length=1, max_length=50, pattern=r"^[A-Z0-9_]+$")
    details: dict[str, Any] | None = None


class EventLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_type: str
    user_id: str | None
    ip_hash: str | None
    user_agent: str | None
    details: dict[str, Any] | None
    created_at: datetime
