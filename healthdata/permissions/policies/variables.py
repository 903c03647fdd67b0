from __future__ import annotations

from healthdata.permissions.lookups import VariableLookup
from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.permissions.roles import RoleVocabulary


class VariablePolicy(ResourcePolicy[int]):
    resource = "variables"

    def __init__(self, lookup: VariableLookup, roles: RoleVocabulary | None = None) -> None:
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
        return self._owns_variable("view", principal, resource_id)

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if self.is_admin(principal):
            return True
        if not self.is_creator(principal):
            return self._deny("update", principal, resource_id, "requires creator")
        return self._owns_variable("update", principal, resource_id)

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        return self._admin_only("delete", principal, resource_id)

    def _owns_variable(self, action: str, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        # Same ownership signal as categories: any entry reported by the principal's organization.
        variable = self._lookup.find_by_id(resource_id)
        if variable is None:
            return self._deny(action, principal, resource_id, "not found")
        if not any(self.owns(principal, code) for code in variable.entry_organization_codes):
            return self._deny(action, principal, resource_id, "no entry from own organization")
        return True
