from __future__ import annotations

from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal


class ProfilePolicy(ResourcePolicy[str]):
    """Profiles are addressed by auth user id; users may see and edit their own."""

    resource = "profiles"

    def can_create(self, principal: AuthenticatedPrincipal) -> bool:
        return self._admin_only("create", principal, None)

    def can_view_all(self, principal: AuthenticatedPrincipal) -> bool:
        return self._admin_only("view_all", principal, None)

    def can_view(self, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        return self._admin_or_self("view", principal, resource_id)

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        return self._admin_or_self("update", principal, resource_id)

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        if not self.is_admin(principal):
            return self._deny("delete", principal, resource_id, "requires admin")
        if principal.profile.user_id == resource_id:
            return self._deny("delete", principal, resource_id, "cannot delete own profile")
        return True

    def _admin_or_self(self, action: str, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        if self.is_admin(principal) or principal.profile.user_id == resource_id:
            return True
        return self._deny(action, principal, resource_id, "not own profile")
