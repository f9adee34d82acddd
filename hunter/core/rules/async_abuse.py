"""
Async Abuse Rule — Detects async sprawl and blocking calls inside async functions.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import PathCall, SourceModel


RULE_ID = "async-abuse"
CATEGORY = Category.RUST_FEATURES
WEIGHT = 3.5

MAX_ASYNC_UNITS = 10
MAX_AWAITS = 20

BLOCKING_CALLS = frozenset({"std::thread::sleep", "thread::sleep"})
BLOCKING_PREFIXES = ("std::fs::", "fs::")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def is_blocking(call: PathCall) -> bool:
    return call.path in BLOCKING_CALLS or call.path.startswith(BLOCKING_PREFIXES)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    units = [s for s in model.async_sites if s.kind in ("async_fn", "async_block")]
    if len(units) > MAX_ASYNC_UNITS:
        issues.append(
            _issue(
                model, Severity.SPICY, units[0].line, "too-many-async", units[0].column,
                count=len(units), limit=MAX_ASYNC_UNITS,
            )
        )

    awaits = [s for s in model.async_sites if s.kind == "await"]
    if len(awaits) > MAX_AWAITS:
        issues.append(
            _issue(
                model, Severity.MILD, awaits[0].line, "too-many-awaits", awaits[0].column,
                count=len(awaits), limit=MAX_AWAITS,
            )
        )

    for call in model.path_calls:
        if not is_blocking(call):
            continue
        func = model.enclosing_function(call.line)
        if func is not None and func.is_async:
            issues.append(
                _issue(
                    model, Severity.SPICY, call.line, "blocking-call", call.column,
                    call=call.path, function=func.name,
                )
            )
    return issues
