from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.models.data import Variable
from healthdata.permissions.lookups import SqlVariableLookup
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import apply_update, commit_or_409, ensure_code_change_allowed, get_or_404
from healthdata.schemas.data import VariableCreate, VariableOut, VariableUpdate
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/variables", tags=["variables"])


@router.get("", response_model=list[VariableOut])
def list_variables(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[Variable]:
    ensure_allowed(policies.variables.can_view_all(principal), "Insufficient permissions to view variables")
    return list(db.scalars(select(Variable).order_by(Variable.id)).all())


@router.post("", response_model=VariableOut, status_code=status.HTTP_201_CREATED)
def create_variable(
    payload: VariableCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Variable:
    ensure_allowed(policies.variables.can_create(principal), "Insufficient permissions to create a variable")
    variable = Variable(**payload.model_dump())
    db.add(variable)
    commit_or_409(db, "Variable")
    db.refresh(variable)
    return variable


@router.get("/{id}", response_model=VariableOut)
def get_variable(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Variable:
    ensure_allowed(policies.variables.can_view(principal, id), "Insufficient permissions to view this variable")
    return get_or_404(db, Variable, id, "Variable")


@router.put("/{id}", response_model=VariableOut)
def update_variable(
    id: int,
    payload: VariableUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Variable:
    ensure_allowed(policies.variables.can_update(principal, id), "Insufficient permissions to update this variable")
    variable = get_or_404(db, Variable, id, "Variable")
    # Entries reference variables by code.
    ensure_code_change_allowed(
        variable.code,
        payload,
        lambda: bool(SqlVariableLookup(db).find_by_id(id).entry_organization_codes),
        "Variable",
    )
    apply_update(variable, payload)
    commit_or_409(db, "Variable")
    db.refresh(variable)
    return variable


@router.delete("/{id}")
def delete_variable(
    id: int,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(policies.variables.can_delete(principal, id), "Insufficient permissions to delete this variable")
    variable = get_or_404(db, Variable, id, "Variable")
    db.delete(variable)
    commit_or_409(db, "Variable")
    return {"success": True, "message": "Variable deleted successfully"}
