"""
Trait Complexity Rule — Detects traits that try to be everything.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "trait-complexity"
CATEGORY = Category.ADVANCED_RUST
WEIGHT = 3.0

MAX_ITEMS = 10
MAX_GENERICS = 3

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for trait in model.traits:
        if trait.item_count > MAX_ITEMS:
            issues.append(
                _issue(model, Severity.SPICY, trait.line, "too-many-items", trait=trait.name, items=trait.item_count)
            )
        if trait.generic_count > MAX_GENERICS:
            issues.append(
                _issue(
                    model, Severity.MILD, trait.line, "too-many-generics",
                    trait=trait.name, generics=trait.generic_count,
                )
            )
    return issues
