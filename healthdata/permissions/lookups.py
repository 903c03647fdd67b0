"""
Resource ownership lookups.

Each lookup fetches the minimal projection a policy needs to decide ownership
or deletion safety. A missing id returns ``None``; the policies treat that as a
denial. Store errors are not caught here.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from healthdata.models.data import (
    DataCategory,
    DataEntry,
    DataSource,
    Indicator,
    OrganizationElement,
    Variable,
)
from healthdata.models.security import Profile


# ---- Snapshots -----------------------------------------------------------------------


@dataclass(frozen=True)
class EntrySnapshot:
    id: int
    organization_element_code: str


@dataclass(frozen=True)
class CategorySnapshot:
    id: int
    code: str
    entry_organization_codes: frozenset[str]
    entry_count: int
    indicator_count: int
    variable_count: int

    @property
    def has_dependents(self) -> bool:
        return bool(self.entry_count or self.indicator_count or self.variable_count)


@dataclass(frozen=True)
class VariableSnapshot:
    id: int
    code: str
    entry_organization_codes: frozenset[str]


@dataclass(frozen=True)
class OrganizationSnapshot:
    id: int
    code: str
    data_manager_id: str | None
    entry_count: int
    profile_count: int

    @property
    def has_dependents(self) -> bool:
        return bool(self.entry_count or self.profile_count)


@dataclass(frozen=True)
class SourceSnapshot:
    id: int
    code: str


# ---- Lookup contracts ----------------------------------------------------------------


class EntryLookup(Protocol):
    def find_by_id(self, entry_id: int) -> EntrySnapshot | None: ...


class CategoryLookup(Protocol):
    def find_by_id(self, category_id: int) -> CategorySnapshot | None: ...


class VariableLookup(Protocol):
    def find_by_id(self, variable_id: int) -> VariableSnapshot | None: ...


class OrganizationLookup(Protocol):
    def find_by_id(self, organization_id: int) -> OrganizationSnapshot | None: ...


class SourceLookup(Protocol):
    def find_by_id(self, source_id: int) -> SourceSnapshot | None: ...


# ---- SQLAlchemy implementations ------------------------------------------------------


def _count(db: Session, model, column, value) -> int:
    return db.execute(select(func.count()).select_from(model).where(column == value)).scalar_one()


def _entry_organization_codes(db: Session, column, value) -> frozenset[str]:
    stmt = select(DataEntry.organization_element_code).where(column == value).distinct()
    return frozenset(db.scalars(stmt).all())


class SqlEntryLookup:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, entry_id: int) -> EntrySnapshot | None:
        row = self._db.execute(
            select(DataEntry.id, DataEntry.organization_element_code).where(DataEntry.id == entry_id)
        ).first()
        if row is None:
            return None
        return EntrySnapshot(id=row.id, organization_element_code=row.organization_element_code)


class SqlCategoryLookup:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, category_id: int) -> CategorySnapshot | None:
        row = self._db.execute(
            select(DataCategory.id, DataCategory.code).where(DataCategory.id == category_id)
        ).first()
        if row is None:
            return None

        return CategorySnapshot(
            id=row.id,
            code=row.code,
            entry_organization_codes=_entry_organization_codes(self._db, DataEntry.category_code, row.code),
            entry_count=_count(self._db, DataEntry, DataEntry.category_code, row.code),
            indicator_count=_count(self._db, Indicator, Indicator.category_code, row.code),
            variable_count=_count(self._db, Variable, Variable.category_code, row.code),
        )


class SqlVariableLookup:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, variable_id: int) -> VariableSnapshot | None:
        row = self._db.execute(select(Variable.id, Variable.code).where(Variable.id == variable_id)).first()
        if row is None:
            return None

        return VariableSnapshot(
            id=row.id,
            code=row.code,
            entry_organization_codes=_entry_organization_codes(self._db, DataEntry.variable_code, row.code),
        )


class SqlOrganizationLookup:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, organization_id: int) -> OrganizationSnapshot | None:
        row = self._db.execute(
            select(
                OrganizationElement.id,
                OrganizationElement.code,
                OrganizationElement.data_manager_id,
            ).where(OrganizationElement.id == organization_id)
        ).first()
        if row is None:
            return None

        return OrganizationSnapshot(
            id=row.id,
            code=row.code,
            data_manager_id=row.data_manager_id,
            entry_count=_count(self._db, DataEntry, DataEntry.organization_element_code, row.code),
            profile_count=_count(self._db, Profile, Profile.organization_element_code, row.code),
        )


class SqlSourceLookup:
    def __init__(self, db: Session) -> None:
        self._db = db

    def find_by_id(self, source_id: int) -> SourceSnapshot | None:
        row = self._db.execute(select(DataSource.id, DataSource.code).where(DataSource.id == source_id)).first()
        if row is None:
            return None
        return SourceSnapshot(id=row.id, code=row.code)
