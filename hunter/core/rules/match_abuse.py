"""
Match Abuse Rule — Detects two-arm matches that are really an `if let`.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "match-abuse"
CATEGORY = Category.RUST_BASICS
WEIGHT = 2.0

COLLAPSIBLE_HEADS = (
    frozenset({"Some", "None"}),
    frozenset({"Some", "_"}),
    frozenset({"Ok", "Err"}),
    frozenset({"Ok", "_"}),
)
TRIVIAL_VALUES = frozenset({"()", "{}", "None", "continue", "break", "return"})

_HEAD = re.compile(r"^(\w+)")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def _head(pattern: str) -> str:
    match = _HEAD.match(pattern)
    return match.group(1) if match else pattern


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for expr in model.matches:
        if len(expr.arm_patterns) != 2:
            continue
        heads = frozenset(_head(p) for p in expr.arm_patterns)
        if heads not in COLLAPSIBLE_HEADS:
            continue
        if not any(value.rstrip(",") in TRIVIAL_VALUES for value in expr.arm_values):
            continue
        issues.append(
            _issue(model, Severity.MILD, expr.line, "if-let", expr.column, arms=list(expr.arm_patterns))
        )
    return issues
