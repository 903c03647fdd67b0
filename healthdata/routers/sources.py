from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.models.data import DataSource
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import apply_update, commit_or_409, get_or_404
from healthdata.schemas.data import SourceCreate, SourceOut, SourceUpdate
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/sources", tags=["sources"])


@router.get("", response_model=list[SourceOut])
def list_sources(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[DataSource]:
    ensure_allowed(policies.sources.can_view_all(principal), "Insufficient permissions to view data sources")
    return list(db.scalars(select(DataSource).order_by(DataSource.id)).all())


@router.post("", response_model=SourceOut, status_code=status.HTTP_201_CREATED)
def create_source(
    payload: SourceCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataSource:
    ensure_allowed(policies.sources.can_create(principal), "Insufficient permissions to create a data source")
    source = DataSource(**payload.model_dump())
    db.add(source)
    commit_or_409(db, "Data source")
    db.refresh(source)
    return source


@router.get("/{id}", response_model=SourceOut)
def get_source(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataSource:
    ensure_allowed(policies.sources.can_view(principal, id), "Insufficient permissions to view this data source")
    return get_or_404(db, DataSource, id, "Data source")


@router.put("/{id}", response_model=SourceOut)
def update_source(
    id: int,
    payload: SourceUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataSource:
    ensure_allowed(policies.sources.can_update(principal, id), "Insufficient permissions to update this data source")
    source = get_or_404(db, DataSource, id, "Data source")
    apply_update(source, payload)
    commit_or_409(db, "Data source")
    db.refresh(source)
    return source


@router.delete("/{id}")
def delete_source(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(policies.sources.can_delete(principal, id), "Insufficient permissions to delete this data source")
    source = get_or_404(db, DataSource, id, "Data source")
    db.delete(source)
    commit_or_409(db, "Data source")
    return {"success": True, "message": "Data source deleted successfully"}
