"""
FFI Abuse Rule — Detects files that are mostly a C boundary.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory, count_code_matches, first_code_line
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel


RULE_ID = "ffi-abuse"
CATEGORY = Category.RUST_FEATURES
WEIGHT = 4.5

MAX_EXTERN_BLOCKS = 2
MAX_EXTERN_FNS = 10
MAX_C_TOKENS = 10
MAX_REPR_C = 5

C_INTEROP = re.compile(r"\b(CString|CStr|c_char|c_void|c_int|c_long)\b|std::ffi::|libc::|std::os::raw::")
DYNAMIC_LOADING = re.compile(r"\b(libloading|dlopen|LoadLibrary\w*|GetProcAddress)\b")

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    blocks = model.extern_blocks
    if len(blocks) > MAX_EXTERN_BLOCKS:
        issues.append(
            _issue(
                model, Severity.SPICY, blocks[MAX_EXTERN_BLOCKS].line, "extern-blocks",
                count=len(blocks), limit=MAX_EXTERN_BLOCKS,
            )
        )

    extern_fns = sum(b.fn_count for b in blocks) + sum(1 for f in model.functions if f.abi)
    if extern_fns > MAX_EXTERN_FNS:
        line = blocks[0].line if blocks else next(f.start_line for f in model.functions if f.abi)
        issues.append(
            _issue(model, Severity.SPICY, line, "extern-functions", count=extern_fns, limit=MAX_EXTERN_FNS)
        )

    c_tokens = count_code_matches(model, C_INTEROP)
    if c_tokens > MAX_C_TOKENS:
        issues.append(
            _issue(
                model, Severity.NUCLEAR, first_code_line(model, C_INTEROP), "c-interop",
                count=c_tokens, limit=MAX_C_TOKENS,
            )
        )

    if count_code_matches(model, DYNAMIC_LOADING):
        issues.append(_issue(model, Severity.SPICY, first_code_line(model, DYNAMIC_LOADING), "dynamic-loading"))

    repr_c = [a for a in model.attributes if a.text.startswith("#[repr(") and re.search(r"\bC\b", a.text)]
    if len(repr_c) > MAX_REPR_C:
        issues.append(
            _issue(model, Severity.SPICY, repr_c[0].line, "repr-c", count=len(repr_c), limit=MAX_REPR_C)
        )
    return issues
