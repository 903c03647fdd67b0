"""Principals and in-memory lookups shared by the policy tests."""
from __future__ import annotations

from healthdata.permissions.principal import AuthenticatedPrincipal, ProfileWithRoles, RoleRef


def make_principal(
    *roles: str,
    org: str | None = None,
    user_id: str = "11111111-1111-4111-8111-111111111111",
    no_roles: bool = False,
) -> AuthenticatedPrincipal:
    """Build a principal; ``no_roles=True`` leaves the role collection absent (None)."""
    profile = ProfileWithRoles(
        user_id=user_id,
        organization_element_code=org,
        roles=None if no_roles else tuple(RoleRef(code=r) for r in roles),
    )
    return AuthenticatedPrincipal(user_id=user_id, profile=profile, email="someone@example.com")


class FakeLookup:
    """Dict-backed lookup that records which ids were requested."""

    def __init__(self, snapshots=None):
        self._snapshots = {s.id: s for s in (snapshots or [])}
        self.calls: list[int] = []

    def find_by_id(self, resource_id):
        self.calls.append(resource_id)
        return self._snapshots.get(resource_id)


class FailingLookup:
    """Lookup whose store is down."""

    def find_by_id(self, resource_id):
        raise ConnectionError("store unavailable")
