"""Tests for the policies of shared reference data: indicators, sources and variables."""

import pytest

from helpers import FailingLookup, FakeLookup, make_principal
from healthdata.permissions.lookups import SourceSnapshot, VariableSnapshot
from healthdata.permissions.policies import IndicatorPolicy, SourcePolicy, VariablePolicy


# ---- Indicators ---------------------------------------------------------------------


def test_indicator_view_open_to_any_authenticated_principal():
    policy = IndicatorPolicy()
    assert policy.can_view(make_principal(no_roles=True), 1) is True
    assert policy.can_view(make_principal("USER"), 1) is True


def test_indicator_view_all_needs_data_role():
    policy = IndicatorPolicy()
    assert policy.can_view_all(make_principal("VIEWER")) is True
    assert policy.can_view_all(make_principal("USER")) is False


def test_indicator_writes_are_admin_only():
    policy = IndicatorPolicy()
    creator = make_principal("CREATOR", org="ORG_A")
    admin = make_principal("ADMIN")
    assert policy.can_create(creator) is False
    assert policy.can_update(creator, 1) is False
    assert policy.can_delete(creator, 1) is False
    assert policy.can_create(admin) is True
    assert policy.can_update(admin, 1) is True
    assert policy.can_delete(admin, 1) is True


# ---- Sources ------------------------------------------------------------------------


@pytest.fixture
def source_lookup():
    return FakeLookup([SourceSnapshot(id=1, code="SURVEY")])


def test_source_view_and_update_need_no_ownership(source_lookup):
    policy = SourcePolicy(source_lookup)
    assert policy.can_view(make_principal("VIEWER", org="ORG_A"), 1) is True
    assert policy.can_view(make_principal("VIEWER"), 1) is True
    assert policy.can_update(make_principal("CREATOR", org="ORG_B"), 1) is True


def test_source_unknown_id_denied_for_non_admin(source_lookup):
    policy = SourcePolicy(source_lookup)
    assert policy.can_view(make_principal("VIEWER"), 2) is False
    assert policy.can_update(make_principal("CREATOR"), 2) is False


def test_source_viewer_cannot_update_and_only_admin_deletes(source_lookup):
    policy = SourcePolicy(source_lookup)
    assert policy.can_update(make_principal("VIEWER"), 1) is False
    assert policy.can_delete(make_principal("CREATOR", org="ORG_A"), 1) is False
    assert policy.can_delete(make_principal("ADMIN"), 1) is True
    assert source_lookup.calls == []


def test_source_create_rule(source_lookup):
    policy = SourcePolicy(source_lookup)
    assert policy.can_create(make_principal("CREATOR", org="ORG_A")) is True
    assert policy.can_create(make_principal("CREATOR")) is False


# ---- Variables ----------------------------------------------------------------------


@pytest.fixture
def variable_lookup():
    return FakeLookup(
        [
            VariableSnapshot(id=1, code="BIRTHS", entry_organization_codes=frozenset({"ORG_A"})),
            VariableSnapshot(id=2, code="UNUSED", entry_organization_codes=frozenset()),
        ]
    )


def test_variable_ownership_through_entries(variable_lookup):
    policy = VariablePolicy(variable_lookup)
    assert policy.can_view(make_principal("VIEWER", org="ORG_A"), 1) is True
    assert policy.can_update(make_principal("CREATOR", org="ORG_A"), 1) is True
    assert policy.can_update(make_principal("CREATOR", org="ORG_B"), 1) is False
    assert policy.can_view(make_principal("VIEWER", org="ORG_A"), 2) is False


def test_variable_delete_admin_only(variable_lookup):
    policy = VariablePolicy(variable_lookup)
    assert policy.can_delete(make_principal("CREATOR", org="ORG_A"), 1) is False
    assert policy.can_delete(make_principal("ADMIN"), 1) is True


def test_variable_lookup_failure_propagates():
    with pytest.raises(ConnectionError):
        VariablePolicy(FailingLookup()).can_view(make_principal("VIEWER", org="ORG_A"), 1)
