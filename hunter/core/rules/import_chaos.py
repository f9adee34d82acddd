"""
Import Chaos Rule — Detects unordered, duplicated and unused `use` declarations.

Unused detection is lexical: an imported name that never appears in the
rest of the code is reported. `pub use` re-exports, glob imports and
commonly method-only traits (`Write`, `FromStr`, `*Ext`, …) are skipped.
"""

from __future__ import annotations

import re

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import ImportStmt, SourceModel


RULE_ID = "import-chaos"
CATEGORY = Category.CODE_STRUCTURE
WEIGHT = 2.0

IMPLICIT_TRAITS = frozenset({
    "Read", "Write", "BufRead", "Seek", "FromStr", "Display", "Debug", "Iterator",
    "IntoIterator", "FromIterator", "Hash", "Hasher", "Borrow", "BorrowMut", "Deref",
    "DerefMut", "AsRef", "AsMut", "Into", "From", "TryFrom", "TryInto", "Ord",
    "PartialOrd", "Future", "Stream", "Rng", "SeedableRng", "Context",
})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def _blocks(imports: list[ImportStmt]) -> list[list[ImportStmt]]:
    """Runs of `use` declarations on adjacent lines."""
    blocks: list[list[ImportStmt]] = []
    for imp in imports:
        if blocks and imp.line == (blocks[-1][-1].end_line or blocks[-1][-1].line) + 1:
            blocks[-1].append(imp)
        else:
            blocks.append([imp])
    return blocks


def _unused_symbols(model: SourceModel, imp: ImportStmt) -> list[str]:
    end = imp.end_line or imp.line
    rest = "\n".join(
        text for number, text in enumerate(model.code_lines, start=1)
        if not imp.line <= number <= end
    )
    unused = []
    for symbol in imp.symbols:
        if symbol in IMPLICIT_TRAITS or symbol.endswith("Ext") or symbol.startswith("_"):
            continue
        if not re.search(rf"\b{re.escape(symbol)}\b", rest):
            unused.append(symbol)
    return unused


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []

    for block in _blocks(model.imports):
        paths = [imp.path for imp in block]
        if paths != sorted(paths, key=str.lower):
            issues.append(_issue(model, Severity.MILD, block[0].line, "unordered", block[0].column))
            break

    seen: set[str] = set()
    for imp in model.imports:
        if imp.path in seen:
            issues.append(_issue(model, Severity.MILD, imp.line, "duplicate", imp.column, path=imp.path))
        seen.add(imp.path)

    for imp in model.imports:
        if model.source.line(imp.line).lstrip().startswith("pub"):
            continue
        for symbol in _unused_symbols(model, imp):
            issues.append(_issue(model, Severity.MILD, imp.line, "unused", imp.column, symbol=symbol))
    return issues
