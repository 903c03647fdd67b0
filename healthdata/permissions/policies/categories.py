from __future__ import annotations

from healthdata.permissions.lookups import CategoryLookup
from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.permissions.roles import RoleVocabulary


class CategoryPolicy(ResourcePolicy[int]):
    """
    A category is "owned" by every organization that has reported an entry in it.

    Deleting requires admin and an empty category: no entries, indicators or
    variables. Admin does not override the emptiness check.
    """

    resource = "categories"

    def __init__(self, lookup: CategoryLookup, roles: RoleVocabulary | None = None) -> None:
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
        return self._owns_category("view", principal, resource_id)

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if self.is_admin(principal):
            return True
        if not self.is_creator(principal):
            return self._deny("update", principal, resource_id, "requires creator")
        return self._owns_category("update", principal, resource_id)

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        if not self.is_admin(principal):
            return self._deny("delete", principal, resource_id, "requires admin")

        category = self._lookup.find_by_id(resource_id)
        if category is not None and category.has_dependents:
            return self._deny(
                "delete",
                principal,
                resource_id,
                f"in use (entries={category.entry_count} indicators={category.indicator_count} "
                f"variables={category.variable_count})",
            )
        return True

    def _owns_category(self, action: str, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        category = self._lookup.find_by_id(resource_id)
        if category is None:
            return self._deny(action, principal, resource_id, "not found")
        if not any(self.owns(principal, code) for code in category.entry_organization_codes):
            return self._deny(action, principal, resource_id, "no entry from own organization")
        return True
