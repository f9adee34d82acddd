"""
Dyn Trait Abuse Rule — Detects pervasive dynamic dispatch.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel, TypeUseKind


RULE_ID = "dyn-trait-abuse"
CATEGORY = Category.RUST_FEATURES
WEIGHT = 3.0

MAX_DYN_USES = 5

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    uses = [t for t in model.type_uses if t.kind == TypeUseKind.DYN]
    return [
        _issue(model, Severity.SPICY, use.line, "excessive", use.column, trait=use.name, count=len(uses))
        for use in uses[MAX_DYN_USES:]
    ]
