from __future__ import annotations

from healthdata.permissions.lookups import OrganizationLookup
from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.permissions.roles import RoleVocabulary


class OrganizationPolicy(ResourcePolicy[int]):
    """
    Viewing an organization requires affiliation with it; updating it requires a
    creator role and being its designated data manager (``data_manager_id``),
    not affiliation.
    Deleting requires admin and no entries or affiliated profiles left.
    """

    resource = "organizations"

    def __init__(self, lookup: OrganizationLookup, roles: RoleVocabulary | None = None) -> None:
        super().__init__(roles)
        self._lookup = lookup

    def can_create(self, principal: AuthenticatedPrincipal) -> bool:
        return self._admin_or_affiliated_creator(principal)

    def can_view_all(self, principal: AuthenticatedPrincipal) -> bool:
        return self._reader(principal)

    def can_view(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if not self.can_read(principal):
            return self._deny("view", principal, resource_id, "no data role")
        if self.is_admin(principal):
            return True

        organization = self._lookup.find_by_id(resource_id)
        if organization is None:
            return self._deny("view", principal, resource_id, "not found")
        if not self.owns(principal, organization.code):
            return self._deny("view", principal, resource_id, "not affiliated")
        return True

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if self.is_admin(principal):
            return True
        if not self.is_creator(principal):
            return self._deny("update", principal, resource_id, "requires creator")

        organization = self._lookup.find_by_id(resource_id)
        if organization is None:
            return self._deny("update", principal, resource_id, "not found")
        if not organization.data_manager_id or organization.data_manager_id != principal.user_id:
            return self._deny("update", principal, resource_id, "not the data manager")
        return True

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if not self.is_admin(principal):
            return self._deny("delete", principal, resource_id, "requires admin")

        organization = self._lookup.find_by_id(resource_id)
        if organization is not None and organization.has_dependents:
            return self._deny(
                "delete",
                principal,
                resource_id,
                f"in use (entries={organization.entry_count} profiles={organization.profile_count})",
            )
        return True
