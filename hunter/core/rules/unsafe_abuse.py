"""
Unsafe Abuse Rule — Detects unsafe code that has stopped being the exception.

Every `unsafe` block is reported (escalating after the third). File-level
issues fire for too many unsafe functions, raw pointer types, or calls to
memory-reinterpreting operations such as `transmute` and `from_raw_parts`.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import PathCall, SourceModel, TypeUseKind


RULE_ID = "unsafe-abuse"
CATEGORY = Category.RUST_FEATURES
WEIGHT = 5.0

TOLERATED_BLOCKS = 3
MAX_UNSAFE_FNS = 2
MAX_RAW_POINTERS = 5
MAX_DANGEROUS_OPS = 3

DANGEROUS_OPERATIONS = frozenset({
    "ptr::write",
    "ptr::read",
    "ptr::copy",
    "ptr::copy_nonoverlapping",
    "mem::transmute",
    "transmute",
    "mem::forget",
    "mem::uninitialized",
    "from_raw_parts",
    "from_utf8_unchecked",
    "Box::from_raw",
})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def is_dangerous(call: PathCall) -> bool:
    return any(call.path == op or call.path.endswith(f"::{op}") for op in DANGEROUS_OPERATIONS)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    blocks = [s for s in model.unsafe_sites if s.kind == "block"]
    for index, block in enumerate(blocks):
        severity = Severity.SPICY if index < TOLERATED_BLOCKS else Severity.NUCLEAR
        issues.append(_issue(model, severity, block.line, "block", block.column, index=index + 1))

    unsafe_fns = [s for s in model.unsafe_sites if s.kind == "fn"]
    if len(unsafe_fns) > MAX_UNSAFE_FNS:
        issues.append(
            _issue(
                model, Severity.NUCLEAR, unsafe_fns[0].line, "unsafe-functions", unsafe_fns[0].column,
                count=len(unsafe_fns), limit=MAX_UNSAFE_FNS,
            )
        )

    pointers = [t for t in model.type_uses if t.kind == TypeUseKind.RAW_POINTER]
    if len(pointers) > MAX_RAW_POINTERS:
        issues.append(
            _issue(
                model, Severity.NUCLEAR, pointers[0].line, "raw-pointers", pointers[0].column,
                count=len(pointers), limit=MAX_RAW_POINTERS,
            )
        )

    dangerous = [c for c in model.path_calls if is_dangerous(c)]
    if len(dangerous) > MAX_DANGEROUS_OPS:
        issues.append(
            _issue(
                model, Severity.NUCLEAR, dangerous[0].line, "dangerous-operations", dangerous[0].column,
                count=len(dangerous), operations=sorted({c.path for c in dangerous}),
            )
        )
    return issues
