"""
Uniform policy contract shared by every resource type.

Policies answer yes/no; they never raise for a denial. Role checks always run
before any lookup so that a cheap "no" avoids I/O, and lookups within one check
run one after another. Lookup errors propagate to the caller.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import ClassVar, Generic, TypeVar

from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.permissions.roles import DEFAULT_VOCABULARY, RoleVocabulary, has_any_role

logger = logging.getLogger(__name__)

IdT = TypeVar("IdT")


class ResourcePolicy(ABC, Generic[IdT]):
    resource: ClassVar[str]

    def __init__(self, roles: RoleVocabulary | None = None) -> None:
        self.roles = roles or DEFAULT_VOCABULARY

    # ---- Contract -------------------------------------------------------------------

    @abstractmethod
    def can_create(self, principal: AuthenticatedPrincipal) -> bool: ...

    @abstractmethod
    def can_view(self, principal: AuthenticatedPrincipal, resource_id: IdT) -> bool: ...

    @abstractmethod
    def can_view_all(self, principal: AuthenticatedPrincipal) -> bool: ...

    @abstractmethod
    def can_update(self, principal: AuthenticatedPrincipal, resource_id: IdT) -> bool: ...

    @abstractmethod
    def can_delete(self, principal: AuthenticatedPrincipal, resource_id: IdT) -> bool: ...

    # ---- Role helpers ---------------------------------------------------------------

    def is_admin(self, principal: AuthenticatedPrincipal) -> bool:
        return has_any_role(principal.profile, self.roles.admin)

    def is_creator(self, principal: AuthenticatedPrincipal) -> bool:
        return has_any_role(principal.profile, self.roles.creator)

    def can_read(self, principal: AuthenticatedPrincipal) -> bool:
        return has_any_role(principal.profile, self.roles.readers)

    def is_affiliated_creator(self, principal: AuthenticatedPrincipal) -> bool:
        return self.is_creator(principal) and bool(principal.profile.organization_element_code)

    @staticmethod
    def owns(principal: AuthenticatedPrincipal, organization_element_code: str | None) -> bool:
        own_code = principal.profile.organization_element_code
        return bool(own_code) and own_code == organization_element_code

    # ---- Shared rules ---------------------------------------------------------------

    def _admin_or_affiliated_creator(self, principal: AuthenticatedPrincipal) -> bool:
        if self.is_admin(principal):
            return True
        if self.is_affiliated_creator(principal):
            return True
        return self._deny("create", principal, None, "requires admin, or creator with an organization")

    def _reader(self, principal: AuthenticatedPrincipal) -> bool:
        if self.can_read(principal):
            return True
        return self._deny("view_all", principal, None, "no data role")

    def _admin_only(self, action: str, principal: AuthenticatedPrincipal, resource_id: IdT | None) -> bool:
        if self.is_admin(principal):
            return True
        return self._deny(action, principal, resource_id, "requires admin")

    def _deny(
        self,
        action: str,
        principal: AuthenticatedPrincipal,
        resource_id: IdT | None,
        reason: str,
    ) -> bool:
        logger.debug(
            "Permission denied resource=%s action=%s id=%s user=%s roles=%s reason=%s",
            self.resource,
            action,
            resource_id,
            principal.user_id,
            list(principal.profile.role_codes),
            reason,
        )
        return False
