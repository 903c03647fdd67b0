"""
HTTP-level tests: status codes and row scoping through the FastAPI app.

Requests share the rolled-back db_session, seeded with the demo data.
"""
from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from healthdata.db.init_db import (
    ADMIN_USER_ID,
    CREATOR_NORTH_USER_ID,
    CREATOR_SOUTH_USER_ID,
    VIEWER_NORTH_USER_ID,
    seed_demo_data,
)
from healthdata.db.session import get_db
from healthdata.main import create_app
from healthdata.models.data import DataCategory, DataEntry, Indicator, OrganizationElement, Variable
from healthdata.models.events import EventLog
from healthdata.security.config import SecurityConfig

NEW_USER_ID = "7a7a7a7a-1b1b-4c2c-8d3d-4e4e4e4e4e4e"


def _auth(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_id}"}


@pytest.fixture
def client(db_session):
    seed_demo_data(db_session)

    app = create_app()
    app.state.security_config = SecurityConfig()
    app.dependency_overrides[get_db] = lambda: db_session
    # No context manager: the lifespan (real DB init) stays out of the test.
    return TestClient(app)


@pytest.fixture
def north_entry_id(db_session):
    return db_session.scalars(
        select(DataEntry.id).where(DataEntry.organization_element_code == "ORG_NORTH")
    ).one()


def _category_id(db_session, code):
    return db_session.scalars(select(DataCategory.id).where(DataCategory.code == code)).one()


def test_health_is_public(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_missing_token_is_401(client):
    assert client.get("/entries").status_code == 401


def test_malformed_token_is_400(client):
    response = client.get("/entries", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 400


def test_entry_list_scoped_to_own_organization(client):
    response = client.get("/entries", headers=_auth(VIEWER_NORTH_USER_ID))
    assert response.status_code == 200
    assert {e["organization_element_code"] for e in response.json()} == {"ORG_NORTH"}


def test_admin_sees_every_entry(client):
    response = client.get("/entries", headers=_auth(ADMIN_USER_ID))
    assert response.status_code == 200
    assert {e["organization_element_code"] for e in response.json()} == {"ORG_NORTH", "ORG_SOUTH"}


def test_creator_updates_own_entry(client, north_entry_id):
    response = client.put(
        f"/entries/{north_entry_id}",
        json={"value": 420, "valid": True},
        headers=_auth(CREATOR_NORTH_USER_ID),
    )
    assert response.status_code == 200
    assert response.json()["value"] == 420


def test_creator_of_other_organization_gets_403(client, north_entry_id):
    response = client.put(
        f"/entries/{north_entry_id}",
        json={"value": 1},
        headers=_auth(CREATOR_SOUTH_USER_ID),
    )
    assert response.status_code == 403
    assert response.json()["detail"].startswith("Forbidden - ")


def test_creator_cannot_move_entry_to_other_organization(client, north_entry_id):
    response = client.put(
        f"/entries/{north_entry_id}",
        json={"organization_element_code": "ORG_SOUTH"},
        headers=_auth(CREATOR_NORTH_USER_ID),
    )
    assert response.status_code == 403


def test_creator_cannot_create_entry_for_other_organization(client):
    payload = {
        "variable_code": "ASSISTED_BIRTHS",
        "category_code": "MATERNAL_HEALTH",
        "organization_element_code": "ORG_SOUTH",
        "value": 10,
    }
    assert client.post("/entries", json=payload, headers=_auth(CREATOR_NORTH_USER_ID)).status_code == 403

    payload["organization_element_code"] = "ORG_NORTH"
    response = client.post("/entries", json=payload, headers=_auth(CREATOR_NORTH_USER_ID))
    assert response.status_code == 201
    assert response.json()["organization_element_code"] == "ORG_NORTH"


def test_unknown_id_is_404_for_admin_and_403_for_others(client):
    assert client.get("/entries/99999", headers=_auth(ADMIN_USER_ID)).status_code == 404
    assert client.get("/entries/99999", headers=_auth(VIEWER_NORTH_USER_ID)).status_code == 403


def test_category_delete_blocked_while_in_use(client, db_session):
    in_use = _category_id(db_session, "MATERNAL_HEALTH")
    unused = _category_id(db_session, "UNUSED_CATEGORY")

    assert client.delete(f"/categories/{in_use}", headers=_auth(ADMIN_USER_ID)).status_code == 403

    response = client.delete(f"/categories/{unused}", headers=_auth(ADMIN_USER_ID))
    assert response.status_code == 200
    assert response.json()["success"] is True


def test_first_request_creates_profile_with_user_role(client):
    response = client.get("/profile/me", headers=_auth(NEW_USER_ID))
    assert response.status_code == 200
    assert [r["code"] for r in response.json()["roles"]] == ["USER"]

    # USER carries no data role.
    assert client.get("/entries", headers=_auth(NEW_USER_ID)).status_code == 403


def test_indicator_view_open_but_list_needs_data_role(client, db_session):
    indicator_id = db_session.scalars(select(Indicator.id)).first()
    assert client.get(f"/indicators/{indicator_id}", headers=_auth(NEW_USER_ID)).status_code == 200
    assert client.get("/indicators", headers=_auth(NEW_USER_ID)).status_code == 403


def test_profile_access(client):
    assert client.get(f"/profile/{ADMIN_USER_ID}", headers=_auth(VIEWER_NORTH_USER_ID)).status_code == 403
    assert client.get(f"/profile/{VIEWER_NORTH_USER_ID}", headers=_auth(VIEWER_NORTH_USER_ID)).status_code == 200
    assert client.delete(f"/profile/{ADMIN_USER_ID}", headers=_auth(ADMIN_USER_ID)).status_code == 403


def test_non_admin_cannot_change_own_roles(client):
    response = client.put(
        f"/profile/{VIEWER_NORTH_USER_ID}",
        json={"role_codes": ["ADMIN"]},
        headers=_auth(VIEWER_NORTH_USER_ID),
    )
    assert response.status_code == 403


def test_organization_data_manager_updates_organization(client, db_session):
    north_id = db_session.scalars(select(OrganizationElement.id).where(OrganizationElement.code == "ORG_NORTH")).one()
    response = client.put(
        f"/organizations/{north_id}",
        json={"description": "Updated by the data manager"},
        headers=_auth(CREATOR_NORTH_USER_ID),
    )
    assert response.status_code == 200
    assert (
        client.put(f"/organizations/{north_id}", json={"description": "x"}, headers=_auth(VIEWER_NORTH_USER_ID)).status_code
        == 403
    )


def _events(db_session, event_type, user_id=None):
    stmt = select(EventLog).where(EventLog.event_type == event_type)
    if user_id is not None:
        stmt = stmt.where(EventLog.user_id == user_id)
    return list(db_session.scalars(stmt).all())


# ---- Renaming referenced codes -----------------------------------------------------


def test_creator_cannot_rename_category_in_use(client, db_session):
    in_use = _category_id(db_session, "MATERNAL_HEALTH")

    response = client.put(
        f"/categories/{in_use}",
        json={"code": "RENAMED_CAT"},
        headers=_auth(CREATOR_NORTH_USER_ID),
    )
    assert response.status_code == 409

    # Dependents still point at the category, so the admin still may not delete it.
    assert client.delete(f"/categories/{in_use}", headers=_auth(ADMIN_USER_ID)).status_code == 403
    entries = db_session.scalars(select(DataEntry).where(DataEntry.category_code == "MATERNAL_HEALTH")).all()
    assert len(entries) == 2


def test_unused_category_can_be_renamed(client, db_session):
    unused = _category_id(db_session, "UNUSED_CATEGORY")
    response = client.put(f"/categories/{unused}", json={"code": "SPARE_CATEGORY"}, headers=_auth(ADMIN_USER_ID))
    assert response.status_code == 200
    assert response.json()["code"] == "SPARE_CATEGORY"


def test_category_update_keeping_code_is_allowed(client, db_session):
    in_use = _category_id(db_session, "MATERNAL_HEALTH")
    response = client.put(
        f"/categories/{in_use}",
        json={"code": "MATERNAL_HEALTH", "designation": "Maternal and newborn health"},
        headers=_auth(CREATOR_NORTH_USER_ID),
    )
    assert response.status_code == 200


def test_data_manager_cannot_rename_organization_in_use(client, db_session):
    north_id = db_session.scalars(select(OrganizationElement.id).where(OrganizationElement.code == "ORG_NORTH")).one()

    response = client.put(
        f"/organizations/{north_id}",
        json={"code": "ORG_RENAMED"},
        headers=_auth(CREATOR_NORTH_USER_ID),
    )
    assert response.status_code == 409
    assert client.delete(f"/organizations/{north_id}", headers=_auth(ADMIN_USER_ID)).status_code == 403


def test_variable_with_entries_cannot_be_renamed(client, db_session):
    variable_id = db_session.scalars(select(Variable.id).where(Variable.code == "ASSISTED_BIRTHS")).one()
    response = client.put(f"/variables/{variable_id}", json={"code": "BIRTHS"}, headers=_auth(ADMIN_USER_ID))
    assert response.status_code == 409


# ---- Events log --------------------------------------------------------------------


def test_denial_is_recorded_in_events_log(client, db_session, north_entry_id):
    client.put(f"/entries/{north_entry_id}", json={"value": 1}, headers=_auth(CREATOR_SOUTH_USER_ID))

    denied = _events(db_session, "PERMISSION_DENIED", CREATOR_SOUTH_USER_ID)
    assert len(denied) == 1
    assert denied[0].details["path"] == f"/entries/{north_entry_id}"
    assert denied[0].details["principal"]["organization_element_code"] == "ORG_SOUTH"
    assert denied[0].ip_hash is not None


def test_allowed_request_records_no_denial(client, db_session):
    client.get("/entries", headers=_auth(VIEWER_NORTH_USER_ID))
    assert _events(db_session, "PERMISSION_DENIED") == []


def test_malformed_token_and_first_access_are_recorded(client, db_session):
    client.get("/entries", headers={"Authorization": "Bearer nope"})
    assert len(_events(db_session, "AUTH_REJECTED")) == 1

    client.get("/profile/me", headers=_auth(NEW_USER_ID))
    client.get("/profile/me", headers=_auth(NEW_USER_ID))
    assert len(_events(db_session, "PROFILE_CREATED", NEW_USER_ID)) == 1


def test_user_records_and_reads_own_events(client):
    response = client.post(
        "/events-log",
        json={"event_type": "REPORT_EXPORTED", "details": {"format": "csv"}},
        headers=_auth(VIEWER_NORTH_USER_ID),
    )
    assert response.status_code == 201
    assert response.json()["user_id"] == VIEWER_NORTH_USER_ID

    response = client.get(f"/events-log/{VIEWER_NORTH_USER_ID}", headers=_auth(VIEWER_NORTH_USER_ID))
    assert response.status_code == 200
    assert [e["event_type"] for e in response.json()] == ["REPORT_EXPORTED"]


def test_server_event_types_cannot_be_posted(client):
    response = client.post("/events-log", json={"event_type": "PERMISSION_DENIED"}, headers=_auth(VIEWER_NORTH_USER_ID))
    assert response.status_code == 400


def test_events_of_others_are_admin_only(client, db_session):
    client.post("/events-log", json={"event_type": "REPORT_EXPORTED"}, headers=_auth(VIEWER_NORTH_USER_ID))

    assert client.get(f"/events-log/{VIEWER_NORTH_USER_ID}", headers=_auth(CREATOR_NORTH_USER_ID)).status_code == 403
    assert client.get("/events-log", headers=_auth(VIEWER_NORTH_USER_ID)).status_code == 403
    assert client.delete(f"/events-log/{VIEWER_NORTH_USER_ID}", headers=_auth(VIEWER_NORTH_USER_ID)).status_code == 403

    response = client.delete(f"/events-log/{VIEWER_NORTH_USER_ID}", headers=_auth(ADMIN_USER_ID))
    assert response.status_code == 200
    assert response.json()["deleted"] >= 1
    assert _events(db_session, "REPORT_EXPORTED", VIEWER_NORTH_USER_ID) == []
