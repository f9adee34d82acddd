"""
Slice Abuse Rule — Detects files with an excess of slice types.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel, TypeUseKind


RULE_ID = "slice-abuse"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MAX_SLICES = 15

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    slices = [t for t in model.type_uses if t.kind == TypeUseKind.SLICE]
    return [
        _issue(model, Severity.MILD, use.line, "excessive", use.column, count=len(slices))
        for use in slices[MAX_SLICES:]
    ]
