from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from sqlalchemy.orm import Session

from healthdata.permissions.lookups import (
    SqlCategoryLookup,
    SqlEntryLookup,
    SqlOrganizationLookup,
    SqlSourceLookup,
    SqlVariableLookup,
)
from healthdata.permissions.roles import RoleVocabulary

from .base import ResourcePolicy
from .categories import CategoryPolicy
from .entries import EntryPolicy
from .events import EventLogPolicy
from .indicators import IndicatorPolicy
from .organizations import OrganizationPolicy
from .profiles import ProfilePolicy
from .sources import SourcePolicy
from .variables import VariablePolicy


@dataclass(frozen=True)
class PolicySet:
    """One policy per resource type (plus the audit log), sharing a single session for their lookups."""

    categories: CategoryPolicy
    entries: EntryPolicy
    events: EventLogPolicy
    indicators: IndicatorPolicy
    organizations: OrganizationPolicy
    profiles: ProfilePolicy
    sources: SourcePolicy
    variables: VariablePolicy


def build_policies(db: Session, vocabularies: Mapping[str, RoleVocabulary] | None = None) -> PolicySet:
    """Wire SQL lookups and per-resource role vocabularies (keyed by resource name)."""

    vocab = dict(vocabularies or {})
    return PolicySet(
        categories=CategoryPolicy(SqlCategoryLookup(db), vocab.get(CategoryPolicy.resource)),
        entries=EntryPolicy(SqlEntryLookup(db), vocab.get(EntryPolicy.resource)),
        events=EventLogPolicy(vocab.get(EventLogPolicy.resource)),
        indicators=IndicatorPolicy(vocab.get(IndicatorPolicy.resource)),
        organizations=OrganizationPolicy(SqlOrganizationLookup(db), vocab.get(OrganizationPolicy.resource)),
        profiles=ProfilePolicy(vocab.get(ProfilePolicy.resource)),
        sources=SourcePolicy(SqlSourceLookup(db), vocab.get(SourcePolicy.resource)),
        variables=VariablePolicy(SqlVariableLookup(db), vocab.get(VariablePolicy.resource)),
    )


__all__ = [
    "CategoryPolicy",
    "EntryPolicy",
    "EventLogPolicy",
    "IndicatorPolicy",
    "OrganizationPolicy",
    "PolicySet",
    "ProfilePolicy",
    "ResourcePolicy",
    "SourcePolicy",
    "VariablePolicy",
    "build_policies",
]
