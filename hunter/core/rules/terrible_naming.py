"""
Terrible Naming Rule — Detects generic names that say nothing about the value.

`data`, `tmp`, `item2`, `handler`: names like these force the reader to
trace the value back to where it was produced.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import IdentifierKind, SourceModel


RULE_ID = "terrible-naming"
CATEGORY = Category.NAMING
WEIGHT = 2.0

TERRIBLE_NAME = re.compile(
    r"^(data|info|temp|tmp|val|value|item|thing|stuff|obj|object|manager|handler|"
    r"helper|util|utils|test|func|function)\d*$",
    re.IGNORECASE,
)

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    """Flag bindings and functions whose whole name is a generic placeholder."""
    issues: list[Issue] = []
    for ident in model.identifiers:
        if ident.kind == IdentifierKind.FIELD or not TERRIBLE_NAME.match(ident.name):
            continue
        if ident.kind == IdentifierKind.FUNCTION:
            issues.append(
                _issue(model, Severity.SPICY, ident.line, "function", ident.column, name=ident.name)
            )
        else:
            issues.append(
                _issue(model, Severity.MILD, ident.line, "binding", ident.column, name=ident.name)
            )
    return issues
