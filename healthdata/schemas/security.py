from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class RoleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str


class ProfileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    first_name: str | None
    last_name: str | None
    bio: str | None
    organization_element_code: str | None
    roles: list[RoleOut]
    created_at: datetime
    updated_at: datetime


class ProfileCreate(BaseModel):
    user_id: str = Field(pattern=r"^[0-9a-fA-F-]{36}$")
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    organization_element_code: str | None = None
    role_codes: list[str] = Field(default_factory=list)


class ProfileUpdate(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    bio: str | None = None
    # Only admins may change affiliation or role assignments.
    organization_element_code: str | None = None
    role_codes: list[str] | None = None
