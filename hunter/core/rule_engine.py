"""
Rule Engine — Orchestrates all deterministic anti-pattern rules.

Runs every registered rule against one Source Model. Rules are pure
functions of the model and the thresholds, so the engine is safe to share
across worker threads. A rule that raises is recorded as a RuleFailure and
the remaining rules still run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType, ModuleType
from typing import Callable, Mapping

from hunter.config import AnalysisConfig
from hunter.errors import UnknownRuleError
from hunter.models.rule_models import Category, Issue, RuleFailure
from hunter.models.source_models import SourceModel

# Import all rule modules
from hunter.core.rules import (
    abbreviation_abuse,
    async_abuse,
    box_abuse,
    channel_abuse,
    code_duplication,
    commented_code,
    complex_closure,
    dead_code,
    deep_nesting,
    dyn_trait_abuse,
    ffi_abuse,
    file_too_long,
    generic_abuse,
    god_function,
    hungarian_notation,
    import_chaos,
    iterator_abuse,
    lifetime_abuse,
    long_function,
    macro_abuse,
    magic_number,
    match_abuse,
    meaningless_naming,
    module_complexity,
    module_nesting,
    panic_abuse,
    pattern_matching_abuse,
    println_debugging,
    reference_abuse,
    single_letter_variable,
    slice_abuse,
    string_abuse,
    terrible_naming,
    todo_comment,
    trait_complexity,
    unnecessary_clone,
    unsafe_abuse,
    unwrap_abuse,
    vec_abuse,
)

logger = logging.getLogger("hunter.rules")

# Type for a rule check function
RuleCheckFn = Callable[[SourceModel, AnalysisConfig], list[Issue]]


@dataclass(frozen=True)
class RuleDefinition:
    rule_id: str
    category: Category
    weight: float
    check: RuleCheckFn

    @classmethod
    def from_module(cls, module: ModuleType) -> RuleDefinition:
        return cls(module.RULE_ID, module.CATEGORY, module.WEIGHT, module.check)


# Registry order is part of the output contract: it breaks ties when sorting issues.
_RULE_MODULES = (
    terrible_naming,
    single_letter_variable,
    meaningless_naming,
    hungarian_notation,
    abbreviation_abuse,
    deep_nesting,
    long_function,
    god_function,
    code_duplication,
    unwrap_abuse,
    unnecessary_clone,
    string_abuse,
    vec_abuse,
    iterator_abuse,
    match_abuse,
    panic_abuse,
    complex_closure,
    lifetime_abuse,
    trait_complexity,
    generic_abuse,
    unsafe_abuse,
    ffi_abuse,
    async_abuse,
    macro_abuse,
    channel_abuse,
    dyn_trait_abuse,
    magic_number,
    commented_code,
    dead_code,
    println_debugging,
    todo_comment,
    file_too_long,
    import_chaos,
    module_nesting,
    module_complexity,
    pattern_matching_abuse,
    reference_abuse,
    box_abuse,
    slice_abuse,
)

RULE_REGISTRY: Mapping[str, RuleDefinition] = MappingProxyType({
    module.RULE_ID: RuleDefinition.from_module(module) for module in _RULE_MODULES
})

RULE_ORDER: Mapping[str, int] = MappingProxyType({rule_id: i for i, rule_id in enumerate(RULE_REGISTRY)})


def issue_sort_key(issue: Issue) -> tuple[int, int, int, str]:
    return (issue.line, issue.column, RULE_ORDER.get(issue.rule_id, len(RULE_ORDER)), issue.message_key)


class RuleEngine:
    """
    Deterministic rule engine.

    Runs all registered rules against a SourceModel.
    Rules are pure functions — no I/O, no shared state, no randomness.
    """

    def __init__(self, rules: Mapping[str, RuleDefinition] | None = None) -> None:
        self.rules = rules if rules is not None else RULE_REGISTRY

    def run(
        self,
        model: SourceModel,
        config: AnalysisConfig | None = None,
    ) -> tuple[list[Issue], list[RuleFailure]]:
        """
        Run all rules against one file's model.

        Args:
            model: The file's SourceModel.
            config: Thresholds; defaults come from settings.

        Returns:
            (issues sorted by line, column, rule order and message key;
             one RuleFailure per rule that raised)
        """
        config = config or AnalysisConfig()
        issues: list[Issue] = []
        failures: list[RuleFailure] = []

        for rule_id, rule in self.rules.items():
            try:
                issues.extend(rule.check(model, config))
            except Exception as e:
                # Rule failures should not crash the engine
                logger.exception(f"Rule '{rule_id}' failed on {model.path}")
                failures.append(
                    RuleFailure(
                        rule_id=rule_id,
                        file=model.path,
                        error_type=type(e).__name__,
                        message=str(e),
                    )
                )

        issues.sort(key=issue_sort_key)
        return issues, failures

    def run_single_rule(
        self,
        rule_id: str,
        model: SourceModel,
        config: AnalysisConfig | None = None,
    ) -> list[Issue]:
        """Run a single rule against a single model; exceptions propagate."""
        if rule_id not in self.rules:
            raise UnknownRuleError(rule_id)
        issues = self.rules[rule_id].check(model, config or AnalysisConfig())
        return sorted(issues, key=issue_sort_key)
