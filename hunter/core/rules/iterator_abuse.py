"""
Iterator Abuse Rule — Detects hand-written loops that an iterator chain expresses directly.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "iterator-abuse"
CATEGORY = Category.RUST_BASICS
WEIGHT = 2.0

INDEX_LOOP = re.compile(r"^0\.\.=?[\w.]+\.len\(\)$")
ACCUMULATE = re.compile(r"\.push\(|\+=")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for loop in model.for_loops:
        if INDEX_LOOP.match(loop.iterable):
            issues.append(
                _issue(model, Severity.MILD, loop.line, "index-loop", loop.column, iterable=loop.iterable)
            )
        elif 1 <= len(loop.statements) <= 2 and any(ACCUMULATE.search(s) for s in loop.statements):
            issues.append(
                _issue(model, Severity.MILD, loop.line, "manual-collect", loop.column, iterable=loop.iterable)
            )
    return issues
