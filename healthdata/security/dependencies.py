from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from healthdata.db.session import get_db
from healthdata.permissions.policies import PolicySet, build_policies
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.security.auth import extract_user_id, resolve_principal
from healthdata.security.config import SecurityConfig
from healthdata.security.events import EventType, record_event


def get_security_config(request: Request) -> SecurityConfig:
    config = getattr(request.app.state, "security_config", None)
    if config is None:
        raise RuntimeError("Security config not loaded. Did app startup run?")
    return config


def get_current_principal(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    db: Session = Depends(get_db),
) -> AuthenticatedPrincipal:
    """
    Resolve the caller into a principal with roles loaded.

    Stored on ``request.state.principal`` so ``audit_denials`` can attribute a
    refusal to the caller.
    """

    try:
        user_id = extract_user_id(request, config)
    except HTTPException as exc:
        record_event(
            db,
            EventType.AUTH_REJECTED,
            request=request,
            details={"method": request.method, "path": request.url.path, "detail": exc.detail},
        )
        raise
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")

    principal = resolve_principal(db, user_id, request=request)
    request.state.principal = principal
    return principal


def get_policies(
    config: SecurityConfig = Depends(get_security_config),
    db: Session = Depends(get_db),
) -> PolicySet:
    return build_policies(db, config.vocabularies)


def ensure_allowed(allowed: bool, detail: str) -> None:
    """Turn a policy answer into a 403; a True answer passes through."""

    if not allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=f"Forbidden - {detail}")


def audit_denials(request: Request, db: Session = Depends(get_db)) -> Iterator[None]:
    """
    Router dependency: record every 403 raised while handling the request.

    Denials are raised before a handler writes anything, so committing the
    event does not commit partial work.
    """

    try:
        yield
    except HTTPException as exc:
        if exc.status_code == status.HTTP_403_FORBIDDEN:
            principal: AuthenticatedPrincipal | None = getattr(request.state, "principal", None)
            record_event(
                db,
                EventType.PERMISSION_DENIED,
                user_id=principal.user_id if principal is not None else None,
                request=request,
                details={
                    "method": request.method,
                    "path": request.url.path,
                    "detail": exc.detail,
                    "principal": principal.to_dict() if principal is not None else None,
                },
            )
        raise
