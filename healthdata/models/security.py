from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from healthdata.db.base import Base

if TYPE_CHECKING:
    from healthdata.models.data import OrganizationElement


profile_roles = Table(
    "profile_roles",
    Base.metadata,
    Column("profile_id", ForeignKey("profiles.id"), primary_key=True),
    Column("role_id", ForeignKey("roles.id"), primary_key=True),
)


class Role(Base):
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # Matched by exact string equality; there is no role hierarchy.
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    profiles: Mapped[list["Profile"]] = relationship(
        secondary=profile_roles,
        back_populates="roles",
    )


class Profile(Base):
    """Application-level identity; 1:1 with an authentication identity (``user_id``)."""

    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, index=True)

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    organization_element_code: Mapped[str | None] = mapped_column(
        ForeignKey("organization_elements.code"), nullable=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    organization: Mapped["OrganizationElement | None"] = relationship(back_populates="profiles")
    roles: Mapped[list[Role]] = relationship(
        secondary=profile_roles,
        back_populates="profiles",
    )
