"""
Vec Abuse Rule — Detects `Vec<T>` parameters and piles of `Vec::new()`.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel, TypeUseKind


RULE_ID = "vec-abuse"
CATEGORY = Category.RUST_BASICS
WEIGHT = 2.0

MAX_VEC_NEW = 3

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    for use in model.type_uses:
        if use.kind == TypeUseKind.NAMED and use.name == "Vec" and use.in_parameter:
            issues.append(_issue(model, Severity.MILD, use.line, "parameter", use.column))

    constructions = [
        c for c in model.path_calls
        if c.path == "Vec::new" and not in_test_code(model, c.line, c.in_test)
    ]
    if len(constructions) > MAX_VEC_NEW:
        first = constructions[0]
        issues.append(
            _issue(
                model, Severity.MILD, first.line, "constructions", first.column,
                count=len(constructions), limit=MAX_VEC_NEW,
            )
        )
    return issues
