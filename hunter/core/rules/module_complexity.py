"""
Module Complexity Rule — Detects `mod` items declared too many levels deep.

Unlike module nesting, this counts `mod name;` declarations as well as
inline modules.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "module-complexity"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MAX_DEPTH = 5

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    return [
        _issue(model, Severity.SPICY, module.line, "too-deep", name=module.name, depth=module.depth)
        for module in model.modules
        if module.depth > MAX_DEPTH
    ]
