from __future__ import annotations

from healthdata.permissions.lookups import EntryLookup
from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.permissions.roles import RoleVocabulary


class EntryPolicy(ResourcePolicy[int]):
    """
    Data entries belong to the organization named by their
    ``organization_element_code``. Non-admins may only read or change entries of
    their own organization; deletion is admin-only.
    """

    resource = "entries"

    def __init__(self, lookup: EntryLookup, roles: RoleVocabulary | None = None) -> None:
        super().__init__(roles)
        self._lookup = lookup

    def can_create(self, principal: AuthenticatedPrincipal) -> bool:
        return self._admin_or_affiliated_creator(principal)

    def can_create_for(self, principal: AuthenticatedPrincipal, organization_element_code: str) -> bool:
        """Create check for a concrete target organization."""
        if not self.can_create(principal):
            return False
        if self.is_admin(principal) or self.owns(principal, organization_element_code):
            return True
        return self._deny("create", principal, None, f"cannot write for organization {organization_element_code!r}")

    def can_view_all(self, principal: AuthenticatedPrincipal) -> bool:
        return self._reader(principal)

    def can_view(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if not self.can_read(principal):
            return self._deny("view", principal, resource_id, "no data role")
        if self.is_admin(principal):
            return True

        entry = self._lookup.find_by_id(resource_id)
        if entry is None:
            return self._deny("view", principal, resource_id, "not found")
        if not self.owns(principal, entry.organization_element_code):
            return self._deny("view", principal, resource_id, "organization mismatch")
        return True

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if self.is_admin(principal):
            return True
        if not self.is_creator(principal):
            return self._deny("update", principal, resource_id, "requires creator")

        entry = self._lookup.find_by_id(resource_id)
        if entry is None:
            return self._deny("update", principal, resource_id, "not found")
        if not self.owns(principal, entry.organization_element_code):
            return self._deny("update", principal, resource_id, "organization mismatch")
        return True

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        return self._admin_only("delete", principal, resource_id)
