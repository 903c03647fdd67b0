from __future__ import annotations

import logging
import uuid

from fastapi import HTTPException, Request, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from healthdata.models.security import Profile, Role
from healthdata.permissions.principal import AuthenticatedPrincipal, ProfileWithRoles
from healthdata.permissions.roles import RoleCode
from healthdata.security.config import SecurityConfig
from healthdata.security.events import EventType, record_event

logger = logging.getLogger(__name__)


def extract_user_id(request: Request, config: SecurityConfig) -> str | None:
    """
    Demo auth: extract bearer token and treat it as the auth user id.

    - Input: `Authorization: Bearer <token>`
    - Demo behavior: `<token>` must be a UUID (the identity provider's user id)
    - Production behavior (documented only): verify the provider's JWT and read `sub`
    """

    header_name = config.auth.authorization_header
    bearer_prefix = config.auth.bearer_prefix

    raw = request.headers.get(header_name)
    if not raw:
        logger.info("Missing Authorization header (auth required) path=%s method=%s", request.url.path, request.method)
        return None

    prefix = f"{bearer_prefix} "
    if not raw.startswith(prefix):
        logger.warning("Invalid Authorization header format path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header_name}. Expected '{bearer_prefix} <token>'.",
        )

    token = raw[len(prefix) :].strip()
    if not token:
        logger.warning("Empty bearer token path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {header_name}. Missing token after '{bearer_prefix}'.",
        )

    try:
        return str(uuid.UUID(token))
    except ValueError as exc:
        logger.warning("Bearer token not a UUID (demo expects user id) path=%s method=%s", request.url.path, request.method)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid bearer token for demo (expected a user id UUID).",
        ) from exc


def load_profile(db: Session, user_id: str, request: Request | None = None) -> Profile:
    """
    Load the profile (roles eagerly) for an auth user id.

    A profile is created on first access, with the default ``USER`` role when
    that role exists. When two first requests race, the loser's insert hits the
    unique ``user_id`` and it reads the winner's profile instead.
    """

    profile = _select_profile(db, user_id)
    if profile is not None:
        return profile

    profile = Profile(user_id=user_id)
    default_role = db.scalars(select(Role).where(Role.code == RoleCode.USER.value)).first()
    if default_role is not None:
        profile.roles.append(default_role)

    try:
        with db.begin_nested():
            db.add(profile)
    except IntegrityError:
        logger.info("Profile created concurrently user_id=%s", user_id)
        if default_role is not None:
            # Drop the in-memory back-reference to the discarded profile.
            db.expire(default_role, ["profiles"])
    else:
        record_event(db, EventType.PROFILE_CREATED, user_id=user_id, request=request)
        logger.info("Created profile on first access user_id=%s", user_id)

    return _select_profile(db, user_id)


def resolve_principal(
    db: Session,
    user_id: str,
    email: str | None = None,
    request: Request | None = None,
) -> AuthenticatedPrincipal:
    profile = load_profile(db, user_id, request=request)
    return AuthenticatedPrincipal(
        user_id=user_id,
        email=email,
        profile=ProfileWithRoles.from_model(profile),
    )


def _select_profile(db: Session, user_id: str) -> Profile | None:
    return db.execute(
        select(Profile).where(Profile.user_id == user_id).options(selectinload(Profile.roles))
    ).scalar_one_or_none()
