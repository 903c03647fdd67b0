from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from healthdata.db.base import Base
from healthdata.db.session import SessionLocal, engine
from healthdata.models.data import (
    DataCategory,
    DataEntry,
    DataSource,
    Indicator,
    OrganizationElement,
    Variable,
)
from healthdata.models.security import Profile, Role
from healthdata.permissions.roles import RoleCode

# Fixed auth user ids so the seeded profiles can be used as bearer tokens.
ADMIN_USER_ID = "00000000-0000-4000-8000-000000000001"
CREATOR_NORTH_USER_ID = "00000000-0000-4000-8000-000000000002"
VIEWER_NORTH_USER_ID = "00000000-0000-4000-8000-000000000003"
CREATOR_SOUTH_USER_ID = "00000000-0000-4000-8000-000000000004"


def init_db(seed: bool = True) -> None:
    """
    Create tables and, optionally, seed demo data.

    The seed is small and deterministic so the permission rules can be tried
    without additional setup.
    """

    Base.metadata.create_all(bind=engine)
    if not seed:
        return

    with SessionLocal() as db:
        if _has_seed_data(db):
            return
        seed_demo_data(db)


def _has_seed_data(db: Session) -> bool:
    return db.execute(select(Role.id).limit(1)).first() is not None


def seed_demo_data(db: Session) -> None:
    roles = {
        code: Role(code=code.value, description=description)
        for code, description in (
            (RoleCode.ADMIN, "Full access"),
            (RoleCode.CREATOR, "Creates and edits data for own organization"),
            (RoleCode.VIEWER, "Reads data of own organization"),
            (RoleCode.USER, "Default role, no data access"),
        )
    }
    db.add_all(roles.values())

    north = OrganizationElement(code="ORG_NORTH", name="North District", data_manager_id=CREATOR_NORTH_USER_ID)
    south = OrganizationElement(code="ORG_SOUTH", name="South District")
    db.add_all([north, south])
    db.flush()

    admin = Profile(user_id=ADMIN_USER_ID, first_name="Ada", last_name="Admin")
    admin.roles.append(roles[RoleCode.ADMIN])

    creator_north = Profile(
        user_id=CREATOR_NORTH_USER_ID,
        first_name="Cora",
        last_name="North",
        organization_element_code=north.code,
    )
    creator_north.roles.append(roles[RoleCode.CREATOR])

    viewer_north = Profile(
        user_id=VIEWER_NORTH_USER_ID,
        first_name="Vic",
        last_name="North",
        organization_element_code=north.code,
    )
    viewer_north.roles.append(roles[RoleCode.VIEWER])

    creator_south = Profile(
        user_id=CREATOR_SOUTH_USER_ID,
        first_name="Sam",
        last_name="South",
        organization_element_code=south.code,
    )
    creator_south.roles.append(roles[RoleCode.CREATOR])

    db.add_all([admin, creator_north, viewer_north, creator_south])

    maternal = DataCategory(code="MATERNAL_HEALTH", designation="Maternal health")
    unused = DataCategory(code="UNUSED_CATEGORY", designation="Empty category")
    survey = DataSource(code="HOUSEHOLD_SURVEY", name="Household survey", url="https://example.org/survey")
    db.add_all([maternal, unused, survey])
    db.flush()

    births = Variable(
        code="ASSISTED_BIRTHS",
        designation="Births assisted by skilled personnel",
        data_source_id=survey.id,
        category_code=maternal.code,
        frequency="yearly",
    )
    coverage = Indicator(
        code="ASSISTED_BIRTH_RATE",
        designation="Skilled birth attendance rate",
        category_code=maternal.code,
        formula="ASSISTED_BIRTHS / LIVE_BIRTHS",
    )
    db.add_all([births, coverage])
    db.flush()

    db.add_all(
        [
            DataEntry(
                variable_code=births.code,
                category_code=maternal.code,
                organization_element_code=north.code,
                value=412,
                valid=True,
                year=2024,
                period="Y",
            ),
            DataEntry(
                variable_code=births.code,
                category_code=maternal.code,
                organization_element_code=south.code,
                value=377,
                valid=False,
                year=2024,
                period="Y",
            ),
        ]
    )

    db.commit()
