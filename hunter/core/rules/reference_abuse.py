"""
Reference Abuse Rule — Detects files drowning in reference types.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel, TypeUseKind


RULE_ID = "reference-abuse"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MAX_REFERENCES = 20

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    references = [t for t in model.type_uses if t.kind == TypeUseKind.REFERENCE]
    return [
        _issue(model, Severity.MILD, use.line, "excessive", use.column, count=len(references))
        for use in references[MAX_REFERENCES:]
    ]
