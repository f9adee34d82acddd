"""
Unwrap Abuse Rule — Detects `.unwrap()` / `.expect()` on unchecked values.

A call is considered guarded when the same receiver was tested with
`is_some` / `is_ok` / `is_none` / `is_err` earlier in the enclosing function.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, in_test_code
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import MethodCall, SourceModel


RULE_ID = "unwrap-abuse"
CATEGORY = Category.RUST_BASICS
WEIGHT = 4.0

GUARD_METHODS = frozenset({"is_some", "is_ok", "is_none", "is_err"})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def _is_guarded(model: SourceModel, call: MethodCall, guards: list[MethodCall]) -> bool:
    func = model.enclosing_function(call.line)
    for guard in guards:
        if guard.receiver != call.receiver:
            continue
        if (guard.line, guard.column) >= (call.line, call.column):
            continue
        if func is None or func.contains(guard.line):
            return True
    return False


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    guards = [c for c in model.method_calls if c.name in GUARD_METHODS]
    issues: list[Issue] = []

    for call in model.method_calls:
        if call.name not in ("unwrap", "expect"):
            continue
        if _is_guarded(model, call, guards):
            continue
        if in_test_code(model, call.line, call.in_test):
            severity = Severity.MILD
        elif call.name == "expect":
            severity = Severity.SPICY
        else:
            severity = Severity.NUCLEAR
        issues.append(
            _issue(model, severity, call.line, call.name, call.column, receiver=call.receiver)
        )
    return issues
