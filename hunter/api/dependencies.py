"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from hunter.core.rule_engine import RuleEngine


@lru_cache
def get_rule_engine() -> RuleEngine:
    """Shared rule engine singleton; rules are stateless."""
    return RuleEngine()
