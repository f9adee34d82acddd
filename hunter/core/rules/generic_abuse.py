"""
Generic Abuse Rule — Detects over-parameterized items and cryptic type parameter names.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "generic-abuse"
CATEGORY = Category.ADVANCED_RUST
WEIGHT = 3.0

MAX_PARAMS = 5
CONVENTIONAL_PARAMS = frozenset({"T", "U", "V", "E", "K"})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for generics in model.generics:
        if generics.count > MAX_PARAMS:
            issues.append(
                _issue(
                    model, Severity.SPICY, generics.line, "too-many-params",
                    owner=generics.owner, count=generics.count,
                )
            )
        for name in generics.type_params:
            if len(name) == 1 and name not in CONVENTIONAL_PARAMS:
                issues.append(
                    _issue(model, Severity.MILD, generics.line, "cryptic-name", owner=generics.owner, name=name)
                )
    return issues
