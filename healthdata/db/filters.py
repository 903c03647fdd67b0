from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import event
from sqlalchemy.orm import Session, with_loader_criteria


@event.listens_for(Session, "do_orm_execute")
def _apply_data_scope(execute_state) -> None:
    """
    Organization scoping for data entries.

    Handlers keep plain queries (``select(DataEntry)``); when a ``DataScope``
    sits in ``Session.info["data_scope"]`` and is restricted, only entries of
    the caller's organization come back.
    """

    if not execute_state.is_select:
        return

    scope = execute_state.session.info.get("data_scope")
    if scope is None or scope.unrestricted:
        return

    # Local import to avoid cycles.
    from healthdata.models.data import DataEntry  # noqa: WPS433 (local import)

    org_code = scope.organization_element_code
    execute_state.statement = execute_state.statement.options(
        with_loader_criteria(DataEntry, lambda cls: cls.organization_element_code == org_code, include_aliases=True),
    )


@contextmanager
def data_scope(db: Session, scope) -> Iterator[Session]:
    """Apply ``scope`` to the queries run inside the block."""

    db.info["data_scope"] = scope
    try:
        yield db
    finally:
        db.info.pop("data_scope", None)
