from __future__ import annotations

from healthdata.permissions.policies.base import ResourcePolicy
from healthdata.permissions.principal import AuthenticatedPrincipal


class EventLogPolicy(ResourcePolicy[str]):
    """
    Audit events, addressed by the auth user id they belong to.

    Any authenticated principal may append events about themselves. Reading
    someone's trail is for admins or the user themselves; purging it is admin
    only. Events are never edited.
    """

    resource = "events"

    def can_create(self, principal: AuthenticatedPrincipal) -> bool:
        return True

    def can_view_all(self, principal: AuthenticatedPrincipal) -> bool:
        return self._admin_only("view_all", principal, None)

    def can_view(self, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        if self.is_admin(principal) or principal.user_id == resource_id:
            return True
        return self._deny("view", principal, resource_id, "not own events")

    def can_update(self, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        return self._deny("update", principal, resource_id, "events are append-only")

    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: str) -> bool:
        return self._admin_only("delete", principal, resource_id)
