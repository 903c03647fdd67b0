from __future__ import annotations

import logging
from typing import Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


def get_or_404(db: Session, model: type[ModelT], id: int, label: str) -> ModelT:
    obj = db.get(model, id)
    if obj is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
    return obj


def apply_update(obj: object, payload: BaseModel) -> None:
    """Copy the fields the client actually sent onto ``obj``."""
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(obj, field, value)


def ensure_code_change_allowed(current_code: str, payload: BaseModel, in_use: Callable[[], bool], label: str) -> None:
    """
    Refuse renaming ``code`` while other rows reference it.

    Dependents point at the code column, so a rename would orphan them and let
    the record pass the "no dependents" delete check.
    """
    new_code = payload.model_dump(exclude_unset=True).get("code")
    if new_code is None or new_code == current_code:
        return
    if in_use():
        logger.info("Refused code change %s %s -> %s: still referenced", label, current_code, new_code)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{label} code cannot change while other records reference it",
        )


def commit_or_409(db: Session, label: str) -> None:
    """Commit; a unique/foreign-key violation becomes a 409."""
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.info("Integrity error writing %s: %s", label, exc.orig)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"{label} conflicts with existing data",
        ) from exc
