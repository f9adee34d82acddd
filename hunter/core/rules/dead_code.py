"""
Dead Code Rule — Detects statements that follow an unconditional exit in the same block.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "dead-code"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

EXIT_STATEMENT = re.compile(
    r"^(return\b|break\b|continue\b|panic!\s*\(|unreachable!\s*\(|(std::)?process::exit\s*\().*;$"
)

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    code = [line.strip() for line in model.code_lines]

    for index, text in enumerate(code):
        exit_match = EXIT_STATEMENT.match(text)
        if exit_match is None:
            continue
        # next non-blank line in the same block
        follower = index + 1
        while follower < len(code) and not code[follower]:
            follower += 1
        if follower >= len(code) or code[follower].startswith("}"):
            continue
        if model.depths[follower] != model.depths[index]:
            continue
        issues.append(
            _issue(
                model, Severity.MILD, follower + 1, "unreachable",
                after=exit_match.group(1).rstrip("( ").rstrip("!"), exit_line=index + 1,
            )
        )
    return issues
