from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.models.data import OrganizationElement
from healthdata.permissions.lookups import SqlOrganizationLookup
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import apply_update, commit_or_409, ensure_code_change_allowed, get_or_404
from healthdata.schemas.data import OrganizationCreate, OrganizationOut, OrganizationUpdate
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/organizations", tags=["organizations"])


@router.get("", response_model=list[OrganizationOut])
def list_organizations(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[OrganizationElement]:
    ensure_allowed(policies.organizations.can_view_all(principal), "Insufficient permissions to view organizations")
    return list(db.scalars(select(OrganizationElement).order_by(OrganizationElement.id)).all())


@router.post("", response_model=OrganizationOut, status_code=status.HTTP_201_CREATED)
def create_organization(
    payload: OrganizationCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> OrganizationElement:
    ensure_allowed(policies.organizations.can_create(principal), "Insufficient permissions to create an organization")
    organization = OrganizationElement(**payload.model_dump())
    db.add(organization)
    commit_or_409(db, "Organization")
    db.refresh(organization)
    return organization


@router.get("/{id}", response_model=OrganizationOut)
def get_organization(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> OrganizationElement:
    ensure_allowed(
        policies.organizations.can_view(principal, id), "Insufficient permissions to view this organization"
    )
    return get_or_404(db, OrganizationElement, id, "Organization")


@router.put("/{id}", response_model=OrganizationOut)
def update_organization(
    id: int,
    payload: OrganizationUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> OrganizationElement:
    ensure_allowed(
        policies.organizations.can_update(principal, id), "Insufficient permissions to update this organization"
    )
    organization = get_or_404(db, OrganizationElement, id, "Organization")
    ensure_code_change_allowed(
        organization.code,
        payload,
        lambda: SqlOrganizationLookup(db).find_by_id(id).has_dependents,
        "Organization",
    )
    apply_update(organization, payload)
    commit_or_409(db, "Organization")
    db.refresh(organization)
    return organization


@router.delete("/{id}")
def delete_organization(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(
        policies.organizations.can_delete(principal, id), "Insufficient permissions to delete this organization"
    )
    organization = get_or_404(db, OrganizationElement, id, "Organization")
    db.delete(organization)
    commit_or_409(db, "Organization")
    return {"success": True, "message": "Organization deleted successfully"}
