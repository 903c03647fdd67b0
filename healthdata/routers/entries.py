from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.filters import data_scope
from healthdata.db.session import get_db
from healthdata.models.data import DataEntry
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import apply_update, commit_or_409, get_or_404
from healthdata.schemas.data import EntryCreate, EntryOut, EntryUpdate
from healthdata.security.context import DataScope
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=list[EntryOut])
def list_entries(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[DataEntry]:
    ensure_allowed(policies.entries.can_view_all(principal), "Insufficient permissions to view data entries")

    # Non-admins only see their own organization's entries (see healthdata/db/filters.py).
    scope = DataScope.for_principal(principal, policies.entries.roles)
    with data_scope(db, scope):
        return list(db.scalars(select(DataEntry).order_by(DataEntry.id)).all())


@router.post("", response_model=EntryOut, status_code=status.HTTP_201_CREATED)
def create_entry(
    payload: EntryCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataEntry:
    ensure_allowed(
        policies.entries.can_create_for(principal, payload.organization_element_code),
        "Insufficient permissions to create a data entry for this organization",
    )
    entry = DataEntry(**payload.model_dump())
    db.add(entry)
    commit_or_409(db, "Data entry")
    db.refresh(entry)
    return entry


@router.get("/{id}", response_model=EntryOut)
def get_entry(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataEntry:
    ensure_allowed(policies.entries.can_view(principal, id), "Insufficient permissions to view this data entry")
    return get_or_404(db, DataEntry, id, "Data entry")


@router.put("/{id}", response_model=EntryOut)
def update_entry(
    id: int,
    payload: EntryUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataEntry:
    ensure_allowed(policies.entries.can_update(principal, id), "Insufficient permissions to update this data entry")
    if payload.organization_element_code is not None:
        # Moving an entry counts as writing into the target organization.
        ensure_allowed(
            policies.entries.can_create_for(principal, payload.organization_element_code),
            "Insufficient permissions to move this data entry to that organization",
        )
    entry = get_or_404(db, DataEntry, id, "Data entry")
    apply_update(entry, payload)
    commit_or_409(db, "Data entry")
    db.refresh(entry)
    return entry


@router.delete("/{id}")
def delete_entry(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(policies.entries.can_delete(principal, id), "Insufficient permissions to delete this data entry")
    entry = get_or_404(db, DataEntry, id, "Data entry")
    db.delete(entry)
    commit_or_409(db, "Data entry")
    return {"success": True, "message": "Data entry deleted successfully"}
