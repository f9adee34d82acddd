"""
Lifetime Abuse Rule — Detects files drowning in explicit lifetime annotations.

`'static` and the elided `'_` are not counted.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "lifetime-abuse"
CATEGORY = Category.ADVANCED_RUST
WEIGHT = 3.5

MAX_NAMED_LIFETIMES = 5
MAX_LIFETIME_PARAMS = 3
IGNORED_LIFETIMES = frozenset({"'static", "'_"})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    named = [lt for lt in model.lifetimes if lt.name not in IGNORED_LIFETIMES]
    for lifetime in named[MAX_NAMED_LIFETIMES:]:
        issues.append(
            _issue(
                model, Severity.SPICY, lifetime.line, "excessive", lifetime.column,
                name=lifetime.name, count=len(named),
            )
        )

    for generics in model.generics:
        declared = [name for name in generics.lifetime_params if name not in IGNORED_LIFETIMES]
        if len(declared) > MAX_LIFETIME_PARAMS:
            issues.append(
                _issue(
                    model, Severity.SPICY, generics.line, "too-many-params",
                    owner=generics.owner, lifetimes=declared,
                )
            )
    return issues
