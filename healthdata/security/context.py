from __future__ import annotations

from dataclasses import dataclass

from healthdata.permissions.principal import AuthenticatedPrincipal
from healthdata.permissions.roles import RoleVocabulary, has_any_role


@dataclass(frozen=True)
class DataScope:
    """
    Row scope for list queries, attached to ``Session.info["data_scope"]``.

    ``can_view_all`` only decides whether a list may be served; which rows it
    contains is narrowed here, by organization, for non-admin callers.
    """

    organization_element_code: str | None
    unrestricted: bool

    @classmethod
    def for_principal(cls, principal: AuthenticatedPrincipal, roles: RoleVocabulary) -> DataScope:
        return cls(
            organization_element_code=principal.profile.organization_element_code,
            unrestricted=has_any_role(principal.profile, roles.admin),
        )
