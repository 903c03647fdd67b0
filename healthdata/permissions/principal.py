"""Resolved principal handed to the permission policies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from healthdata.models.security import Profile


@dataclass(frozen=True)
class RoleRef:
    code: str


@dataclass(frozen=True)
class ProfileWithRoles:
    """
    Snapshot of a profile and its role assignments.

    ``roles=None`` models a profile whose role collection was never loaded or is
    absent; the role predicates treat it as holding no roles.
    """

    user_id: str
    organization_element_code: str | None
    roles: tuple[RoleRef, ...] | None
    first_name: str | None = None
    last_name: str | None = None

    @classmethod
    def from_model(cls, profile: Profile) -> ProfileWithRoles:
        return cls(
            user_id=profile.user_id,
            organization_element_code=profile.organization_element_code,
            roles=tuple(RoleRef(code=r.code) for r in profile.roles),
            first_name=profile.first_name,
            last_name=profile.last_name,
        )

    @property
    def role_codes(self) -> tuple[str, ...]:
        return tuple(r.code for r in self.roles or ())


@dataclass(frozen=True)
class AuthenticatedPrincipal:
    """The acting user: auth identity plus its fully-resolved profile."""

    user_id: str
    profile: ProfileWithRoles
    email: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "user_id": self.user_id,
            "email": self.email,
            "organization_element_code": self.profile.organization_element_code,
            "roles": list(self.profile.role_codes),
        }
