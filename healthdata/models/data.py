from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from healthdata.db.base import Base

if TYPE_CHECKING:
    from healthdata.models.security import Profile


class OrganizationElement(Base):
    __tablename__ = "organization_elements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Auth user id of the designated manager; grants update rights on the organization.
    data_manager_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    entries: Mapped[list["DataEntry"]] = relationship(back_populates="organization")
    profiles: Mapped[list["Profile"]] = relationship(back_populates="organization")


class DataCategory(Base):
    __tablename__ = "data_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    designation: Mapped[str | None] = mapped_column(String(100), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    entries: Mapped[list["DataEntry"]] = relationship(back_populates="category")
    indicators: Mapped[list["Indicator"]] = relationship(back_populates="category")
    variables: Mapped[list["Variable"]] = relationship(back_populates="category")


class DataSource(Base):
    __tablename__ = "data_sources"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    variables: Mapped[list["Variable"]] = relationship(back_populates="data_source")


class Variable(Base):
    __tablename__ = "variables"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    designation: Mapped[str | None] = mapped_column(String(200), nullable=True)

    data_source_id: Mapped[int] = mapped_column(ForeignKey("data_sources.id"), nullable=False, index=True)
    category_code: Mapped[str] = mapped_column(ForeignKey("data_categories.code"), nullable=False, index=True)

    frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    data_source: Mapped[DataSource] = relationship(back_populates="variables")
    category: Mapped[DataCategory] = relationship(back_populates="variables")
    entries: Mapped[list["DataEntry"]] = relationship(back_populates="variable")


class Indicator(Base):
    __tablename__ = "indicators"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    code: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    category_code: Mapped[str] = mapped_column(ForeignKey("data_categories.code"), nullable=False, index=True)

    designation: Mapped[str | None] = mapped_column(String(200), nullable=True)
    definition: Mapped[str | None] = mapped_column(Text, nullable=True)
    goal: Mapped[str | None] = mapped_column(Text, nullable=True)
    formula: Mapped[str | None] = mapped_column(Text, nullable=True)
    level: Mapped[str | None] = mapped_column(String(50), nullable=True)
    calculation_method: Mapped[str | None] = mapped_column(Text, nullable=True)
    collection_frequency: Mapped[str | None] = mapped_column(String(50), nullable=True)
    interpretation: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    category: Mapped[DataCategory] = relationship(back_populates="indicators")


class DataEntry(Base):
    """One time-series data point reported by an organization."""

    __tablename__ = "data_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    variable_code: Mapped[str] = mapped_column(ForeignKey("variables.code"), nullable=False, index=True)
    category_code: Mapped[str] = mapped_column(ForeignKey("data_categories.code"), nullable=False, index=True)

    # Ownership of the entry is decided by this column, not by a profile foreign key.
    organization_element_code: Mapped[str] = mapped_column(
        ForeignKey("organization_elements.code"), nullable=False, index=True
    )

    value: Mapped[float | None] = mapped_column(Float, nullable=True)
    valid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    period: Mapped[str | None] = mapped_column(String(20), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    variable: Mapped[Variable] = relationship(back_populates="entries")
    category: Mapped[DataCategory] = relationship(back_populates="entries")
    organization: Mapped[OrganizationElement] = relationship(back_populates="entries")
