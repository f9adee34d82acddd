"""
Magic Number Rule — Detects unexplained integer literals in code.

Literals inside const/static items, enum discriminants, attributes and
macro arguments are not reported, nor are 0, 1 and -1 or test code.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "magic-number"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

ALLOWED_VALUES = frozenset({0, 1, -1})
MILD_RANGE = (-100, 1000)

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    low, high = MILD_RANGE
    for literal in model.int_literals:
        if literal.in_const or literal.value in ALLOWED_VALUES or in_test_code(model, literal.line):
            continue
        severity = Severity.MILD if low <= literal.value <= high else Severity.SPICY
        issues.append(_issue(model, severity, literal.line, "literal", literal.column, value=literal.text))
    return issues
