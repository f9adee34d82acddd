"""
Println Debugging Rule — Detects leftover print debugging outside tests.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "println-debugging"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

PRINT_MACROS = frozenset({"println", "print", "eprintln", "eprint", "dbg"})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for macro in model.macros:
        if macro.name not in PRINT_MACROS or in_test_code(model, macro.line, macro.in_test):
            continue
        severity = Severity.SPICY if macro.name == "dbg" else Severity.MILD
        issues.append(_issue(model, severity, macro.line, macro.name, macro.column))
    return issues
