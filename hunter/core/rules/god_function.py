"""
God Function Rule — Detects functions that do too many things at once.

Complexity score per function:
    control-flow constructs
    + 2 × max nesting
    + side-effecting statement groups
    + 2 × parameters beyond 5
    + body lines beyond the length threshold / 10

Only functions at least half the length threshold are scored; short
functions are covered by deep-nesting instead.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import FunctionSpan, SourceModel


RULE_ID = "god-function"
CATEGORY = Category.COMPLEXITY
WEIGHT = 3.5

SPICY_SCORE = 25
NUCLEAR_SCORE = 40
PARAMETER_ALLOWANCE = 5

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def complexity_score(func: FunctionSpan, length_threshold: int) -> int:
    return (
        func.control_flow_count
        + 2 * func.max_nesting
        + func.side_effect_groups
        + 2 * max(0, func.parameter_count - PARAMETER_ALLOWANCE)
        + max(0, func.body_lines - length_threshold) // 10
    )


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    config = config or AnalysisConfig()
    issues: list[Issue] = []

    for func in model.functions:
        if func.body_lines * 2 < config.function_length_threshold:
            continue
        score = complexity_score(func, config.function_length_threshold)
        if score > NUCLEAR_SCORE:
            severity = Severity.NUCLEAR
        elif score > SPICY_SCORE:
            severity = Severity.SPICY
        elif score > config.god_function_threshold:
            severity = Severity.MILD
        else:
            continue
        issues.append(
            _issue(
                model, severity, func.start_line, "too-much",
                function=func.name, complexity=score, threshold=config.god_function_threshold,
            )
        )
    return issues
