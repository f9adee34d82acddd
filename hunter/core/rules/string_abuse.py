"""
String Abuse Rule — Detects owned `String` where a borrowed `&str` would do.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel, TypeUseKind


RULE_ID = "string-abuse"
CATEGORY = Category.RUST_BASICS
WEIGHT = 2.0

MAX_CONVERSIONS = 5

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    for use in model.type_uses:
        if use.kind == TypeUseKind.NAMED and use.name == "String" and use.in_parameter:
            issues.append(_issue(model, Severity.MILD, use.line, "parameter", use.column))

    conversions = sorted(
        [(c.line, c.column) for c in model.path_calls
         if c.path in ("String::new", "String::from") and not in_test_code(model, c.line, c.in_test)]
        + [(c.line, c.column) for c in model.method_calls
           if c.name == "to_string" and not in_test_code(model, c.line, c.in_test)]
    )
    if len(conversions) > MAX_CONVERSIONS:
        line, column = conversions[0]
        issues.append(
            _issue(
                model, Severity.SPICY, line, "conversions", column,
                count=len(conversions), limit=MAX_CONVERSIONS,
            )
        )
    return issues
