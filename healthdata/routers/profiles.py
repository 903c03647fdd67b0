from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from healthdata.db.session import get_db
from healthdata.models.security import Profile, Role
from healthdata.permissions.policies import PolicySet
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.routers.common import commit_or_409
from healthdata.schemas.security import ProfileCreate, ProfileOut, ProfileUpdate
from healthdata.security.dependencies import ensure_allowed, get_current_principal, get_policies

router = APIRouter(prefix="/profile", tags=["profile"])


def _get_profile_or_404(db: Session, user_id: str) -> Profile:
    profile = db.execute(
        select(Profile).where(Profile.user_id == user_id).options(selectinload(Profile.roles))
    ).scalar_one_or_none()
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


def _roles_by_code(db: Session, codes: list[str]) -> list[Role]:
    roles = list(db.scalars(select(Role).where(Role.code.in_(codes))).all())
    unknown = sorted(set(codes) - {r.code for r in roles})
    if unknown:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown role codes: {unknown}")
    return roles


@router.get("", response_model=list[ProfileOut])
def list_profiles(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> list[Profile]:
    ensure_allowed(policies.profiles.can_view_all(principal), "Insufficient permissions to view profiles")
    stmt = select(Profile).options(selectinload(Profile.roles)).order_by(Profile.id)
    return list(db.scalars(stmt).all())


@router.get("/me", response_model=ProfileOut)
def me(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    db: Session = Depends(get_db),
) -> Profile:
    return _get_profile_or_404(db, principal.user_id)


@router.post("", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def create_profile(
    payload: ProfileCreate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Profile:
    ensure_allowed(policies.profiles.can_create(principal), "Insufficient permissions to create a profile")
    profile = Profile(**payload.model_dump(exclude={"role_codes"}))
    profile.roles = _roles_by_code(db, payload.role_codes)
    db.add(profile)
    commit_or_409(db, "Profile")
    return _get_profile_or_404(db, payload.user_id)


@router.get("/{user_id}", response_model=ProfileOut)
def get_profile(
    user_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Profile:
    ensure_allowed(policies.profiles.can_view(principal, user_id), "Insufficient permissions to view this profile")
    return _get_profile_or_404(db, user_id)


@router.put("/{user_id}", response_model=ProfileOut)
def update_profile(
    user_id: str,
    payload: ProfileUpdate,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> Profile:
    ensure_allowed(policies.profiles.can_update(principal, user_id), "Insufficient permissions to update this profile")

    changes = payload.model_dump(exclude_unset=True)
    if {"organization_element_code", "role_codes"} & changes.keys():
        ensure_allowed(
            policies.profiles.is_admin(principal),
            "Only administrators may change affiliation or roles",
        )

    profile = _get_profile_or_404(db, user_id)
    role_codes = changes.pop("role_codes", None)
    for field, value in changes.items():
        setattr(profile, field, value)
    if role_codes is not None:
        profile.roles = _roles_by_code(db, role_codes)
    commit_or_409(db, "Profile")
    return _get_profile_or_404(db, user_id)


@router.delete("/{user_id}")
def delete_profile(
    user_id: str,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    policies: PolicySet = Depends(get_policies),
    db: Session = Depends(get_db),
) -> dict[str, object]:
    ensure_allowed(policies.profiles.can_delete(principal, user_id), "Insufficient permissions to delete this profile")
    profile = _get_profile_or_404(db, user_id)
    db.delete(profile)
    commit_or_409(db, "Profile")
    return {"success": True, "message": "Profile deleted successfully"}
