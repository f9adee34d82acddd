"""
Unnecessary Clone Rule — Detects clones whose result is only borrowed.

Flags `x.clone().len()`-style chains into borrow-only methods, `&x.clone()`,
and every clone past the third inside one function.
"""

from __future__ import annotations

from collections import Counter

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "unnecessary-clone"
CATEGORY = Category.RUST_BASICS
WEIGHT = 2.0

BORROW_ONLY_METHODS = frozenset({
    "len", "is_empty", "as_str", "as_ref", "as_slice", "as_bytes", "iter",
    "borrow", "contains", "contains_key", "starts_with", "ends_with",
    "get", "first", "last",
})
CLONES_PER_FUNCTION = 3

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    clones = sorted(
        (c for c in model.method_calls if c.name == "clone" and not c.args.strip()),
        key=lambda c: (c.line, c.column),
    )
    per_function: Counter[int] = Counter()
    issues: list[Issue] = []

    for call in clones:
        func = model.enclosing_function(call.line)
        key = func.start_line if func is not None else 0
        per_function[key] += 1

        if call.chained_next in BORROW_ONLY_METHODS:
            variant = "borrow-only"
        elif call.borrowed:
            variant = "reference"
        elif per_function[key] > CLONES_PER_FUNCTION:
            variant = "excessive"
        else:
            continue

        severity = Severity.MILD if in_test_code(model, call.line, call.in_test) else Severity.SPICY
        issues.append(
            _issue(
                model, severity, call.line, variant, call.column,
                receiver=call.receiver, next=call.chained_next,
            )
        )
    return issues
