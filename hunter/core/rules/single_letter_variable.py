"""
Single Letter Variable Rule — Detects one-letter bindings outside tiny loops.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import IdentifierKind, SourceModel


RULE_ID = "single-letter-variable"
CATEGORY = Category.NAMING
WEIGHT = 2.0

CONVENTIONAL_LETTERS = frozenset("ijkxyzn")
SHORT_SCOPE_LINES = 3

_CHECKED_KINDS = {
    IdentifierKind.LET,
    IdentifierKind.PARAMETER,
    IdentifierKind.LOOP,
    IdentifierKind.CLOSURE,
}

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for ident in model.identifiers:
        name = ident.name
        if ident.kind not in _CHECKED_KINDS or len(name) != 1 or not name.isalpha():
            continue

        conventional = name in CONVENTIONAL_LETTERS
        if ident.kind in (IdentifierKind.LOOP, IdentifierKind.CLOSURE):
            # `for i in ..` / `|x| x + 1` over a few lines is idiomatic
            if conventional and ident.scope_lines <= SHORT_SCOPE_LINES:
                continue
            severity = Severity.MILD
        else:
            severity = Severity.MILD if conventional else Severity.SPICY

        issues.append(
            _issue(model, severity, ident.line, ident.kind.value, ident.column, name=name)
        )
    return issues
