"""
Macro Abuse Rule — Detects heavy reliance on custom macros.

Standard-library macros (`println!`, `vec!`, `assert_eq!`, …) are not counted.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "macro-abuse"
CATEGORY = Category.RUST_FEATURES
WEIGHT = 2.5

MAX_CUSTOM_INVOCATIONS = 10
MAX_DEFINITIONS = 3

STD_MACROS = frozenset({
    "println", "print", "eprintln", "eprint", "format", "format_args", "write", "writeln",
    "vec", "panic", "assert", "assert_eq", "assert_ne", "debug_assert", "debug_assert_eq",
    "debug_assert_ne", "matches", "todo", "unimplemented", "unreachable", "dbg",
    "include", "include_str", "include_bytes", "env", "option_env", "concat", "stringify",
    "line", "file", "column", "module_path", "cfg", "compile_error",
})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    custom = [m for m in model.macros if m.name not in STD_MACROS and m.name != "macro_rules"]
    for macro in custom[MAX_CUSTOM_INVOCATIONS:]:
        issues.append(
            _issue(model, Severity.MILD, macro.line, "invocation", macro.column, name=macro.name, count=len(custom))
        )

    definitions = [m for m in model.macros if m.name == "macro_rules"]
    if len(definitions) > MAX_DEFINITIONS:
        extra = definitions[MAX_DEFINITIONS]
        issues.append(
            _issue(
                model, Severity.SPICY, extra.line, "definitions", extra.column,
                count=len(definitions), limit=MAX_DEFINITIONS,
            )
        )
    return issues
