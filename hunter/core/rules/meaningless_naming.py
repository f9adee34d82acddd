"""
Meaningless Naming Rule — Detects placeholder names left over from prototyping.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "meaningless-naming"
CATEGORY = Category.NAMING
WEIGHT = 2.0

PLACEHOLDER_NAMES = frozenset({
    "foo", "bar", "baz", "qux", "quux", "quuz",
    "example", "sample", "processor", "controller",
    # pinyin placeholders
    "yonghu", "mima", "denglu", "zhuce", "shuju",
})
SPICY_NAMES = frozenset({"foo", "bar", "baz"})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for ident in model.identifiers:
        name = ident.name.lower()
        if name not in PLACEHOLDER_NAMES:
            continue
        severity = Severity.SPICY if name in SPICY_NAMES else Severity.MILD
        issues.append(_issue(model, severity, ident.line, "placeholder", ident.column, name=ident.name))
    return issues
