from __future__ import annotations

from pathlib import Path
from typing import Any, Literal, get_args

import yaml
from pydantic import BaseModel, ConfigDict, Field

from healthdata.permissions.roles import RoleCode, RoleVocabulary

ResourceName = Literal[
    "categories",
    "entries",
    "events",
    "indicators",
    "organizations",
    "profiles",
    "sources",
    "variables",
]


class AuthConfig(BaseModel):
    # Only the demo bearer-uuid scheme is implemented; other providers fail validation.
    provider: Literal["dummy"] = "dummy"
    authorization_header: str = "Authorization"
    bearer_prefix: str = "Bearer"


class RoleCodes(BaseModel):
    model_config = ConfigDict(extra="forbid")

    admin: list[str] = Field(default_factory=lambda: [RoleCode.ADMIN.value])
    creator: list[str] = Field(default_factory=lambda: [RoleCode.CREATOR.value])
    viewer: list[str] = Field(default_factory=lambda: [RoleCode.VIEWER.value])


class RoleCodesOverride(BaseModel):
    """Per-resource override; unset fields fall back to the defaults."""

    model_config = ConfigDict(extra="forbid")

    admin: list[str] | None = None
    creator: list[str] | None = None
    viewer: list[str] | None = None


class RolesConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default: RoleCodes = Field(default_factory=RoleCodes)
    resources: dict[ResourceName, RoleCodesOverride] = Field(default_factory=dict)


class SecurityConfigModel(BaseModel):
    auth: AuthConfig = Field(default_factory=AuthConfig)
    roles: RolesConfig = Field(default_factory=RolesConfig)


class SecurityConfig:
    """
    Runtime helper around the validated config.

    Resolves one ``RoleVocabulary`` per resource so policies never hardcode role
    literals.
    """

    def __init__(self, model: SecurityConfigModel | None = None):
        self.model = model or SecurityConfigModel()

        default = self.model.roles.default
        vocabularies: dict[str, RoleVocabulary] = {}
        for resource in get_args(ResourceName):
            override = self.model.roles.resources.get(resource) or RoleCodesOverride()
            vocabularies[resource] = RoleVocabulary(
                admin=tuple(override.admin if override.admin is not None else default.admin),
                creator=tuple(override.creator if override.creator is not None else default.creator),
                viewer=tuple(override.viewer if override.viewer is not None else default.viewer),
            )
        self._vocabularies = vocabularies

    @property
    def auth(self) -> AuthConfig:
        return self.model.auth

    @property
    def vocabularies(self) -> dict[str, RoleVocabulary]:
        return dict(self._vocabularies)

    def vocabulary(self, resource: str) -> RoleVocabulary:
        try:
            return self._vocabularies[resource]
        except KeyError:
            raise ValueError(f"Unknown resource {resource!r}") from None


def load_security_config(path: Path) -> SecurityConfig:
    raw_text = path.read_text(encoding="utf-8")
    raw: dict[str, Any] = yaml.safe_load(raw_text) or {}

    if "security" not in raw:
        raise ValueError(f"Missing top-level 'security' key in config: {path}")

    model = SecurityConfigModel.model_validate(raw["security"] or {})
    return SecurityConfig(model)
