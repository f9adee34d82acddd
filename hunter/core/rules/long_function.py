"""
Long Function Rule — Detects function bodies longer than the configured limit.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "long-function"
CATEGORY = Category.COMPLEXITY
WEIGHT = 2.5

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    config = config or AnalysisConfig()
    limit = config.function_length_threshold
    issues: list[Issue] = []

    for func in model.functions:
        lines = func.body_lines
        if lines <= limit:
            continue
        if lines > limit * 2:
            severity = Severity.NUCLEAR
        elif lines > limit * 1.5:
            severity = Severity.SPICY
        else:
            severity = Severity.MILD
        issues.append(
            _issue(model, severity, func.start_line, "too-long", function=func.name, lines=lines, limit=limit)
        )
    return issues
