"""Tests for loading the YAML security config into role vocabularies."""
from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from healthdata.permissions.roles import RoleVocabulary
from healthdata.security.config import SecurityConfig, load_security_config

REPO_CONFIG = Path(__file__).resolve().parents[2] / "config" / "security_config.yaml"


def _write(tmp_path, text):
    path = tmp_path / "security_config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_shipped_config_loads_with_default_codes():
    config = load_security_config(REPO_CONFIG)
    assert config.auth.bearer_prefix == "Bearer"
    for vocab in config.vocabularies.values():
        assert vocab == RoleVocabulary()


def test_resource_override_replaces_only_named_capability(tmp_path):
    path = _write(
        tmp_path,
        """
security:
  roles:
    default:
      admin: [ADMIN]
      creator: [CREATOR]
      viewer: [VIEWER]
    resources:
      entries:
        admin: [DATA_ADMIN, ADMIN]
""",
    )
    config = load_security_config(path)

    entries = config.vocabulary("entries")
    assert entries.admin == ("DATA_ADMIN", "ADMIN")
    assert entries.creator == ("CREATOR",)
    assert config.vocabulary("categories").admin == ("ADMIN",)


def test_missing_security_key_is_rejected(tmp_path):
    path = _write(tmp_path, "roles: {}\n")
    with pytest.raises(ValueError, match="security"):
        load_security_config(path)


def test_unknown_resource_is_rejected(tmp_path):
    path = _write(tmp_path, "security:\n  roles:\n    resources:\n      widgets: {}\n")
    with pytest.raises(ValidationError):
        load_security_config(path)


def test_unknown_capability_is_rejected(tmp_path):
    path = _write(tmp_path, "security:\n  roles:\n    default:\n      superuser: [ROOT]\n")
    with pytest.raises(ValidationError):
        load_security_config(path)


def test_vocabulary_for_unknown_resource_raises():
    with pytest.raises(ValueError):
        SecurityConfig().vocabulary("widgets")


def test_unsupported_auth_provider_is_rejected(tmp_path):
    path = _write(tmp_path, "security:\n  auth:\n    provider: azure\n")
    with pytest.raises(ValidationError):
        load_security_config(path)


def test_events_resource_has_a_vocabulary():
    assert SecurityConfig().vocabulary("events") == RoleVocabulary()
