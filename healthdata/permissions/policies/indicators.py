from __future__ import annotations

from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal


class IndicatorPolicy(ResourcePolicy[int]):
    """Indicators are administered globally: no organization dimension."""

    resource = "indicators"

    def can_create(self, principal: AuthenticatedPrincipal) -> bool:
        return self._admin_only("create", principal, None)

    def can_view(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        # Any authenticated principal, with or without roles.
        return True

    def can_view_all(self, principal: AuthenticatedPrincipal) -> bool:
        return self._reader(principal)

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        return self._admin_only("update", principal, resource_id)

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: int) -> bool:
        return self._admin_only("delete", principal, resource_id)
