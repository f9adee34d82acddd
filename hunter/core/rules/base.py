"""
Shared helpers for rule modules.

Each rule module exposes RULE_ID, CATEGORY, WEIGHT and
`check(model, config) -> list[Issue]`; these helpers keep the Issue
construction and the common lookups in one place.
"""

from __future__ import annotations

import re
from typing import Any

from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


class IssueFactory:
    """Builds Issues pre-filled with one rule's id, category and weight."""

    def __init__(self, rule_id: str, category: Category, weight: float) -> None:
        self.rule_id = rule_id
        self.category = category
        self.weight = weight

    def __call__(
        self,
        model: SourceModel,
        severity: Severity,
        line: int,
        variant: str,
        column: int = 1,
        **data: Any,
    ) -> Issue:
        return Issue(
            rule_id=self.rule_id,
            category=self.category,
            severity=severity,
            file=model.path,
            line=max(line, 1),
            column=max(column, 1),
            message_key=f"{self.rule_id}.{variant}",
            data=data,
            weight=self.weight,
        )


def in_test_code(model: SourceModel, line: int, flagged: bool = False) -> bool:
    return flagged or model.in_test(line)


def first_code_line(model: SourceModel, pattern: re.Pattern[str]) -> int:
    """First line whose code (strings and comments blanked) matches, or 1."""
    for number, text in enumerate(model.code_lines, start=1):
        if pattern.search(text):
            return number
    return 1


def count_code_matches(model: SourceModel, pattern: re.Pattern[str]) -> int:
    return sum(len(pattern.findall(text)) for text in model.code_lines)
