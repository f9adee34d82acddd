"""
Complex Closure Rule — Detects closures that should be named functions.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "complex-closure"
CATEGORY = Category.ADVANCED_RUST
WEIGHT = 3.0

MAX_DEPTH = 2
MAX_PARAMS = 5
MAX_BODY_LINES = 10

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for closure in model.closures:
        if closure.depth > MAX_DEPTH:
            issues.append(
                _issue(model, Severity.SPICY, closure.line, "nested", closure.column, depth=closure.depth)
            )
        if closure.param_count > MAX_PARAMS:
            issues.append(
                _issue(
                    model, Severity.MILD, closure.line, "too-many-params", closure.column,
                    params=closure.param_count,
                )
            )
        if closure.body_lines > MAX_BODY_LINES:
            issues.append(
                _issue(model, Severity.MILD, closure.line, "long-body", closure.column, lines=closure.body_lines)
            )
    return issues
