"""
Hungarian Notation Rule — Detects type prefixes baked into names.

Rust's type system already carries the type; `strName`, `bIsOpen` or
`g_counter` only repeat it and go stale when the type changes.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import IdentifierKind, SourceModel


RULE_ID = "hungarian-notation"
CATEGORY = Category.NAMING
WEIGHT = 2.0

# camelCase form: prefix directly followed by an uppercase letter
CAMEL_PREFIX = re.compile(
    r"^(str|int|bool|float|double|char|arr|vec|list|map|set|sz|lp|dw|b|n|p)[A-Z]"
)
# snake_case form is only unambiguous for these prefixes (`set_value`, `n_items` are fine)
SNAKE_PREFIX = re.compile(r"^(g|m|s|p|sz|lp|dw|str|int|bool|arr)_[a-z0-9]")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for ident in model.identifiers:
        if ident.kind == IdentifierKind.FUNCTION:
            continue
        match = CAMEL_PREFIX.match(ident.name) or SNAKE_PREFIX.match(ident.name)
        if match is None:
            continue
        issues.append(
            _issue(
                model, Severity.MILD, ident.line, "prefix", ident.column,
                name=ident.name, prefix=match.group(1),
            )
        )
    return issues
