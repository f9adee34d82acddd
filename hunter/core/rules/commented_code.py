"""
Commented Code Rule — Detects blocks of commented-out code.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "commented-code"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

LARGE_BLOCK = 10

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    # Blocks are detected with config.min_commented_block when the model is built.
    return [
        _issue(
            model,
            Severity.SPICY if block.size > LARGE_BLOCK else Severity.MILD,
            block.start_line,
            "block",
            lines=block.size,
        )
        for block in model.commented_code
    ]
