"""Tests for the role predicates and role vocabulary."""

from types import SimpleNamespace

from healthdata.permissions.principal import ProfileWithRoles, RoleRef
from healthdata.permissions.roles import RoleVocabulary, has_all_roles, has_any_role, has_role


def _profile(*codes, roles_absent=False):
    return ProfileWithRoles(
        user_id="u-1",
        organization_element_code=None,
        roles=None if roles_absent else tuple(RoleRef(code=c) for c in codes),
    )


def test_has_role_exact_match():
    profile = _profile("ADMIN", "VIEWER")
    assert has_role(profile, "ADMIN") is True
    assert has_role(profile, "CREATOR") is False


def test_has_role_is_case_sensitive():
    assert has_role(_profile("ADMIN"), "admin") is False
    assert has_role(_profile("ADMIN"), "ADMIN ") is False


def test_absent_roles_answer_false_without_error():
    profile = _profile(roles_absent=True)
    assert has_role(profile, "ADMIN") is False
    assert has_any_role(profile, ["ADMIN", "VIEWER"]) is False
    assert has_all_roles(profile, ["ADMIN"]) is False


def test_missing_profile_answers_false():
    assert has_role(None, "ADMIN") is False
    assert has_any_role(None, ["ADMIN"]) is False


def test_has_any_role():
    profile = _profile("VIEWER")
    assert has_any_role(profile, ["ADMIN", "VIEWER"]) is True
    assert has_any_role(profile, ["ADMIN", "CREATOR"]) is False
    assert has_any_role(profile, []) is False


def test_has_all_roles():
    profile = _profile("VIEWER", "CREATOR")
    assert has_all_roles(profile, ["VIEWER", "CREATOR"]) is True
    assert has_all_roles(profile, ["VIEWER", "ADMIN"]) is False


def test_has_all_roles_empty_list_is_vacuously_true():
    assert has_all_roles(_profile("VIEWER"), []) is True
    assert has_all_roles(_profile(), []) is True
    assert has_all_roles(_profile(roles_absent=True), []) is True


def test_predicates_accept_orm_like_objects():
    profile = SimpleNamespace(roles=[SimpleNamespace(code="CREATOR")])
    assert has_role(profile, "CREATOR") is True
    assert has_any_role(profile, ["ADMIN", "CREATOR"]) is True


def test_vocabulary_readers_deduplicated_in_order():
    vocab = RoleVocabulary(admin=("ADMIN",), creator=("CREATOR", "ADMIN"), viewer=("VIEWER",))
    assert vocab.readers == ("VIEWER", "CREATOR", "ADMIN")


def test_default_vocabulary():
    vocab = RoleVocabulary()
    assert vocab.admin == ("ADMIN",)
    assert vocab.creator == ("CREATOR",)
    assert vocab.viewer == ("VIEWER",)
