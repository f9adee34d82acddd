"""
Pattern Matching Abuse Rule — Detects files full of destructuring and
matches with too many arms.

Every tuple or slice pattern past the first MAX_PATTERNS is Mild; every
match with more than MAX_ARMS arms is Spicy.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "pattern-matching-abuse"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MAX_PATTERNS = 15
MAX_ARMS = 10

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = [
        _issue(
            model,
            Severity.MILD,
            pattern.line,
            "too-many-patterns",
            pattern.column,
            kind=pattern.kind,
            count=len(model.patterns),
        )
        for pattern in model.patterns[MAX_PATTERNS:]
    ]
    for expr in model.matches:
        if len(expr.arm_patterns) > MAX_ARMS:
            issues.append(
                _issue(model, Severity.SPICY, expr.line, "too-many-arms", expr.column, arms=len(expr.arm_patterns))
            )
    return issues
