"""Tests for ProfilePolicy."""

from helpers import make_principal
from healthdata.permissions.policies import ProfilePolicy

SELF_ID = "33333333-3333-4333-8333-333333333333"
OTHER_ID = "44444444-4444-4444-8444-444444444444"


def test_user_sees_and_edits_own_profile_only():
    policy = ProfilePolicy()
    user = make_principal("USER", user_id=SELF_ID)
    assert policy.can_view(user, SELF_ID) is True
    assert policy.can_update(user, SELF_ID) is True
    assert policy.can_view(user, OTHER_ID) is False
    assert policy.can_update(user, OTHER_ID) is False


def test_principal_without_roles_still_reaches_own_profile():
    policy = ProfilePolicy()
    assert policy.can_view(make_principal(no_roles=True, user_id=SELF_ID), SELF_ID) is True


def test_admin_manages_every_profile():
    policy = ProfilePolicy()
    admin = make_principal("ADMIN", user_id=SELF_ID)
    assert policy.can_create(admin) is True
    assert policy.can_view_all(admin) is True
    assert policy.can_view(admin, OTHER_ID) is True
    assert policy.can_update(admin, OTHER_ID) is True
    assert policy.can_delete(admin, OTHER_ID) is True


def test_admin_cannot_delete_own_profile():
    assert ProfilePolicy().can_delete(make_principal("ADMIN", user_id=SELF_ID), SELF_ID) is False


def test_non_admin_cannot_list_create_or_delete():
    policy = ProfilePolicy()
    creator = make_principal("CREATOR", "VIEWER", org="ORG_A", user_id=SELF_ID)
    assert policy.can_view_all(creator) is False
    assert policy.can_create(creator) is False
    assert policy.can_delete(creator, SELF_ID) is False
