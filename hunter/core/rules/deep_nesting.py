"""
Deep Nesting Rule — Detects functions whose control flow nests too deep.

One issue per function, reported at the deepest line.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "deep-nesting"
CATEGORY = Category.COMPLEXITY
WEIGHT = 3.0

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    config = config or AnalysisConfig()
    threshold = config.nesting_threshold
    issues: list[Issue] = []

    for func in model.functions:
        depth = func.max_nesting
        if depth <= threshold:
            continue
        if depth > threshold + 4:
            severity = Severity.NUCLEAR
        elif depth > threshold + 2:
            severity = Severity.SPICY
        else:
            severity = Severity.MILD
        issues.append(
            _issue(
                model, severity, func.deepest_line, "too-deep",
                function=func.name, depth=depth, threshold=threshold,
            )
        )
    return issues
