"""
Role predicates and the role-code vocabulary.

Role codes are matched by exact, case-sensitive string equality. There is no
role hierarchy: wherever ``ADMIN`` should imply blanket access, a policy checks
for it explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class RoleCode(str, Enum):
    ADMIN = "ADMIN"
    CREATOR = "CREATOR"
    VIEWER = "VIEWER"
    # Given to lazily created profiles; grants no data access on its own.
    USER = "USER"


def has_role(profile: Any, role_code: str) -> bool:
    """
    True if ``profile.roles`` holds a role whose ``code`` equals ``role_code``.

    Accepts the ``ProfileWithRoles`` snapshot as well as the ORM ``Profile``.
    A missing profile or missing role collection answers False.
    """

    roles = getattr(profile, "roles", None)
    if not roles:
        return False
    return any(role.code == role_code for role in roles)


def has_any_role(profile: Any, role_codes: Iterable[str]) -> bool:
    return any(has_role(profile, code) for code in role_codes)


def has_all_roles(profile: Any, role_codes: Iterable[str]) -> bool:
    # Empty ``role_codes`` is vacuously satisfied, even without a role collection.
    return all(has_role(profile, code) for code in role_codes)


@dataclass(frozen=True)
class RoleVocabulary:
    """Role codes one resource domain recognizes for each capability."""

    admin: tuple[str, ...] = (RoleCode.ADMIN.value,)
    creator: tuple[str, ...] = (RoleCode.CREATOR.value,)
    viewer: tuple[str, ...] = (RoleCode.VIEWER.value,)

    @property
    def readers(self) -> tuple[str, ...]:
        """Codes that may read data: viewers, creators and admins."""
        seen: dict[str, None] = {}
        for code in (*self.viewer, *self.creator, *self.admin):
            seen.setdefault(code, None)
        return tuple(seen)


DEFAULT_VOCABULARY = RoleVocabulary()
