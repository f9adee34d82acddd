"""
Channel Abuse Rule — Detects message-passing plumbing spread across a file.
"""

from __future__ import annotations

from hunter.config import AnalysisConfig
from hunter.core.rules.base import IssueFactory
from hunter.models.rule_models import Category, Issue, Severity
from hunter.models.source_models import SourceModel, TypeUseKind


RULE_ID = "channel-abuse"
CATEGORY = Category.RUST_FEATURES
WEIGHT = 3.0

MAX_CHANNEL_SITES = 5

CHANNEL_TYPES = frozenset({"Sender", "Receiver", "SyncSender"})
CHANNEL_CONSTRUCTORS = frozenset({"channel", "sync_channel"})

_issue = IssueFactory(RULE_ID, CATEGORY, WEIGHT)


def check(model: SourceModel, config: AnalysisConfig | None = None) -> list[Issue]:
    sites = [
        (t.line, t.column) for t in model.type_uses
        if t.kind == TypeUseKind.NAMED and t.name in CHANNEL_TYPES
    ]
    sites += [
        (c.line, c.column) for c in model.path_calls
        if c.path.split("::")[-1] in CHANNEL_CONSTRUCTORS
    ]
    sites.sort()
    return [
        _issue(model, Severity.SPICY, line, "excessive", column, count=len(sites), limit=MAX_CHANNEL_SITES)
        for line, column in sites[MAX_CHANNEL_SITES:]
    ]
