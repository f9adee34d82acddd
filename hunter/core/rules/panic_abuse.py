"""
Panic Abuse Rule — Detects `panic!` used for error handling in library code.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "panic-abuse"
CATEGORY = Category.RUST_BASICS
WEIGHT = 3.0

MAX_PANICS = 2

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    panics = [
        m for m in model.macros
        if m.name == "panic" and not in_test_code(model, m.line, m.in_test)
    ]
    issues = [_issue(model, Severity.SPICY, m.line, "panic", m.column) for m in panics]
    if len(panics) > MAX_PANICS:
        issues.append(
            _issue(
                model, Severity.NUCLEAR, panics[0].line, "excessive", panics[0].column,
                count=len(panics), limit=MAX_PANICS,
            )
        )
    return issues
