"""
Box Abuse Rule — Detects heavy use of `Box` allocation in one file.

Counts `Box::new` calls and `Box<...>` types in code (strings and comments
excluded). One Spicy issue per file, at the first occurrence.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, count_code_matches, first_code_line
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "box-abuse"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MAX_BOXES = 8

_BOX = re.compile(r"\bBox::new\b|\bBox\s*<")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    count = count_code_matches(model, _BOX)
    if count <= MAX_BOXES:
        return []
    return [_issue(model, Severity.SPICY, first_code_line(model, _BOX), "excessive", count=count)]
