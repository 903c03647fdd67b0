from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.models.data import Indicator
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import apply_update, commit_or_409, get_or_404
from healthdata.schemas.data import IndicatorCreate, IndicatorOut, IndicatorUpdate
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/indicators", tags=["indicators"])


@router.get("", response_model=list[IndicatorOut])
def list_indicators(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[Indicator]:
    ensure_allowed(policies.indicators.can_view_all(principal), "Insufficient permissions to view indicators")
    return list(db.scalars(select(Indicator).order_by(Indicator.id)).all())


@router.post("", response_model=IndicatorOut, status_code=status.HTTP_201_CREATED)
def create_indicator(
    payload: IndicatorCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Indicator:
    ensure_allowed(policies.indicators.can_create(principal), "Insufficient permissions to create an indicator")
    indicator = Indicator(**payload.model_dump())
    db.add(indicator)
    commit_or_409(db, "Indicator")
    db.refresh(indicator)
    return indicator


@router.get("/{id}", response_model=IndicatorOut)
def get_indicator(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Indicator:
    ensure_allowed(policies.indicators.can_view(principal, id), "Insufficient permissions to view this indicator")
    return get_or_404(db, Indicator, id, "Indicator")


@router.put("/{id}", response_model=IndicatorOut)
def update_indicator(
    id: int,
    payload: IndicatorUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Indicator:
    ensure_allowed(policies.indicators.can_update(principal, id), "Insufficient permissions to update this indicator")
    indicator = get_or_404(db, Indicator, id, "Indicator")
    apply_update(indicator, payload)
    commit_or_409(db, "Indicator")
    db.refresh(indicator)
    return indicator


@router.delete("/{id}")
def delete_indicator(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(policies.indicators.can_delete(principal, id), "Insufficient permissions to delete this indicator")
    indicator = get_or_404(db, Indicator, id, "Indicator")
    db.delete(indicator)
    commit_or_409(db, "Indicator")
    return {"success": True, "message": "Indicator deleted successfully"}
