"""
Permission evaluation for the health-data resources.

This package has no dependency on FastAPI. Given an ``AuthenticatedPrincipal``
and a resource id, each policy answers ``can_create`` / ``can_view`` /
``can_view_all`` / ``can_update`` / ``can_delete`` with a plain bool; callers
turn ``False`` into a 403.

The evaluation is advisory: a caller that checks and then writes in a separate
step can race with a concurrent change of affiliation or ownership. Callers
needing strict consistency re-validate inside their write transaction.
"""

from .policies import PolicySet, build_policies
from .principal import AuthenticatedPrincipal, ProfileWithRoles, RoleRef
from .roles import RoleCode, RoleVocabulary, has_all_roles, has_any_role, has_role

__all__ = [
    "AuthenticatedPrincipal",
    "PolicySet",
    "ProfileWithRoles",
    "RoleCode",
    "RoleRef",
    "RoleVocabulary",
    "build_policies",
    "has_all_roles",
    "has_any_role",
    "has_role",
]
