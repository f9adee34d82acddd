"""
Code Duplication Rule — Detects blocks of lines repeated within one file.

Significant lines (code left after blanking strings and comments, ignoring
lone braces, `use` lines and attributes) are normalized for whitespace and
hashed in windows of `min_duplicate_block` lines. Consecutive duplicated
windows that move together are merged so one copied block yields one issue.
Test code is ignored.
"""

from __future__ import annotations

import re
from collections import defaultdict

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "code-duplication"
CATEGORY = Category.DUPLICATION
WEIGHT = 2.5

_TRIVIAL_LINE = re.compile(r"^[{}()\[\];,]*$")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def _significant_lines(model: SourceModel) -> list[tuple[int, str]]:
    lines: list[tuple[int, str]] = []
    for number, text in enumerate(model.code_lines, start=1):
        normalized = " ".join(text.split())
        if (
            not normalized
            or _TRIVIAL_LINE.match(normalized)
            or normalized.startswith(("use ", "pub use ", "#["))
            or model.in_test(number)
        ):
            continue
        lines.append((number, normalized))
    return lines


def _non_overlapping(starts: list[int], size: int) -> list[int]:
    kept: list[int] = []
    for start in starts:
        if not kept or start >= kept[-1] + size:
            kept.append(start)
    return kept


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    config = config or AnalysisConfig()
    size = config.min_duplicate_block
    lines = _significant_lines(model)
    if len(lines) < size * 2:
        return []

    windows: dict[tuple[str, ...], list[int]] = defaultdict(list)
    for start in range(len(lines) - size + 1):
        key = tuple(text for _, text in lines[start:start + size])
        windows[key].append(start)

    # first occurrence index -> all occurrence indexes
    repeated: dict[int, list[int]] = {}
    for starts in windows.values():
        kept = _non_overlapping(starts, size)
        if len(kept) >= 2:
            repeated[kept[0]] = kept

    issues: list[Issue] = []
    consumed = -1
    for first in sorted(repeated):
        if first <= consumed:
            continue
        starts = repeated[first]
        gap = starts[1] - starts[0]
        length = size
        nxt = first + 1
        while (
            nxt in repeated
            and length < gap
            and len(repeated[nxt]) == len(starts)
            and all(b - a == nxt - first for a, b in zip(starts, repeated[nxt]))
        ):
            length += 1
            nxt += 1
        consumed = nxt - 1

        instances = len(starts)
        if instances >= 4:
            severity = Severity.NUCLEAR
        elif instances == 3:
            severity = Severity.SPICY
        else:
            severity = Severity.MILD
        issues.append(
            _issue(
                model, severity, lines[first][0], "block",
                block_size=length,
                instances=instances,
                lines=[lines[start][0] for start in starts],
            )
        )
    return issues
