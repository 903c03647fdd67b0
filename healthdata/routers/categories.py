from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.models.data import DataCategory
from healthdata.permissions.lookups import SqlCategoryLookup
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import apply_update, commit_or_409, ensure_code_change_allowed, get_or_404
from healthdata.schemas.data import CategoryCreate, CategoryOut, CategoryUpdate
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryOut])
def list_categories(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[DataCategory]:
    ensure_allowed(policies.categories.can_view_all(principal), "Insufficient permissions to view data categories")
    return list(db.scalars(select(DataCategory).order_by(DataCategory.id)).all())


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataCategory:
    ensure_allowed(policies.categories.can_create(principal), "Insufficient permissions to create a data category")
    category = DataCategory(**payload.model_dump())
    db.add(category)
    commit_or_409(db, "Data category")
    db.refresh(category)
    return category


@router.get("/{id}", response_model=CategoryOut)
def get_category(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataCategory:
    ensure_allowed(policies.categories.can_view(principal, id), "Insufficient permissions to view this data category")
    return get_or_404(db, DataCategory, id, "Data category")


@router.put("/{id}", response_model=CategoryOut)
def update_category(
    id: int,
    payload: CategoryUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> DataCategory:
    ensure_allowed(
        policies.categories.can_update(principal, id), "Insufficient permissions to update this data category"
    )
    category = get_or_404(db, DataCategory, id, "Data category")
    ensure_code_change_allowed(
        category.code,
        payload,
        lambda: SqlCategoryLookup(db).find_by_id(id).has_dependents,
        "Data category",
    )
    apply_update(category, payload)
    commit_or_409(db, "Data category")
    db.refresh(category)
    return category


@router.delete("/{id}")
def delete_category(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(
        policies.categories.can_delete(principal, id), "Insufficient permissions to delete this data category"
    )
    category = get_or_404(db, DataCategory, id, "Data category")
    db.delete(category)
    commit_or_409(db, "Data category")
    return {"success": True, "message": "Data category deleted successfully"}
