from healthdata.models.data import (
    DataCategory,
    DataEntry,
    DataSource,
    Indicator,
    OrganizationElement,
    Variable,
)
from healthdata.models.events import EventLog
from healthdata.models.security import Profile, Role, profile_roles

__all__ = [
    "DataCategory",
    "DataEntry",
    "DataSource",
    "EventLog",
    "Indicator",
    "OrganizationElement",
    "Profile",
    "Role",
    "Variable",
    "profile_roles",
]
