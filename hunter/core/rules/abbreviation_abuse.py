"""
Abbreviation Abuse Rule — Detects opaque abbreviations and suggests the full word.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import IdentifierKind, SourceModel


RULE_ID = "abbreviation-abuse"
CATEGORY = Category.NAMING
WEIGHT = 2.0

ABBREVIATIONS: Mapping[str, str] = MappingProxyType({
    "mgr": "manager",
    "mngr": "manager",
    "ctrl": "controller",
    "proc": "processor",
    "hdlr": "handler",
    "usr": "user",
    "pwd": "password",
    "auth": "authentication",
    "cfg": "config",
    "prefs": "preferences",
    "btn": "button",
    "lbl": "label",
    "txt": "text",
    "img": "image",
    "pic": "picture",
    "db": "database",
    "tbl": "table",
    "col": "column",
    "idx": "index",
    "cnt": "count",
    "calc": "calculate",
    "init": "initialize",
    "exec": "execute",
    "impl": "implementation",
    "util": "utility",
})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def _abbreviation(name: str) -> str | None:
    lowered = name.lower()
    if lowered in ABBREVIATIONS:
        return lowered
    head, sep, _ = lowered.partition("_")
    if sep and head in ABBREVIATIONS:
        return head
    return None


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    issues: list[Issue] = []
    for ident in model.identifiers:
        # `fn init()` and friends are established method names
        if ident.kind == IdentifierKind.FUNCTION:
            continue
        abbr = _abbreviation(ident.name)
        if abbr is None:
            continue
        issues.append(
            _issue(
                model, Severity.MILD, ident.line, "abbreviation", ident.column,
                name=ident.name, abbreviation=abbr, suggestion=ABBREVIATIONS[abbr],
            )
        )
    return issues
