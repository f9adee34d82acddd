"""
Module Nesting Rule — Detects deeply nested inline `mod` blocks.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "module-nesting"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MILD_DEPTH = 3
SPICY_DEPTH = 5

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for module in model.modules:
        if not module.inline or module.depth <= MILD_DEPTH:
            continue
        severity = Severity.SPICY if module.depth > SPICY_DEPTH else Severity.MILD
        issues.append(_issue(model, severity, module.line, "too-deep", name=module.name, depth=module.depth))
    return issues
