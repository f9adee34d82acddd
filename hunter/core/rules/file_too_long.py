"""
File Too Long Rule — Detects source files that should be split into modules.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "file-too-long"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MILD_LINES = 1000
SPICY_LINES = 1500
NUCLEAR_LINES = 2000

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    lines = model.line_count
    if lines > NUCLEAR_LINES:
        severity = Severity.NUCLEAR
    elif lines > SPICY_LINES:
        severity = Severity.SPICY
    elif lines > MILD_LINES:
        severity = Severity.MILD
    else:
        return []
    return [_issue(model, severity, 1, "too-long", lines=lines)]
