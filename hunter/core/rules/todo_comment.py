"""
TODO Comment Rule — Detects files carrying a backlog of TODO markers.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "todo-comment"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

MARKER = re.compile(r"\b(TODO|FIXME|XXX|HACK)\b")
PLACEHOLDER_MACROS = frozenset({"todo", "unimplemented"})
MILD_COUNT = 5
SPICY_COUNT = 10

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    markers = sorted(
        [c.start_line for c in model.comments for _ in MARKER.finditer(c.text)]
        + [m.line for m in model.macros if m.name in PLACEHOLDER_MACROS]
    )
    count = len(markers)
    if count <= MILD_COUNT:
        return []
    severity = Severity.SPICY if count > SPICY_COUNT else Severity.MILD
    return [_issue(model, severity, markers[0], "backlog", count=count)]
