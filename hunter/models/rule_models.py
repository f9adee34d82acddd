"""
Rule Data Models — Issues, severities, categories and the fixed scoring tables.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, Field


class Severity(str, Enum):
    NUCLEAR = "nuclear"
    SPICY = "spicy"
    MILD = "mild"


SEVERITY_MULTIPLIERS: Mapping[Severity, float] = MappingProxyType({
    Severity.NUCLEAR: 10.0,
    Severity.SPICY: 5.0,
    Severity.MILD: 2.0,
})


class Category(str, Enum):
    NAMING = "naming"
    COMPLEXITY = "complexity"
    DUPLICATION = "duplication"
    RUST_BASICS = "rust-basics"
    ADVANCED_RUST = "advanced-rust"
    RUST_FEATURES = "rust-features"
    CODE_STRUCTURE = "code-structure"


# Iteration order of this table is the category order used everywhere.
CATEGORY_WEIGHTS: Mapping[Category, float] = MappingProxyType({
    Category.NAMING: 0.25,
    Category.COMPLEXITY: 0.20,
    Category.DUPLICATION: 0.15,
    Category.RUST_BASICS: 0.15,
    Category.ADVANCED_RUST: 0.10,
    Category.RUST_FEATURES: 0.10,
    Category.CODE_STRUCTURE: 0.05,
})


class Issue(BaseModel):
    """A single anti-pattern occurrence reported by one rule."""

    rule_id: str = Field(..., description="Unique rule identifier, e.g. 'unwrap-abuse'")
    category: Category
    severity: Severity
    file: str = Field(..., description="File path where the issue was found")
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(default=1, ge=1, description="1-based column number")
    message_key: str = Field(..., description="Renderer lookup key, e.g. 'unwrap-abuse.unwrap'")
    data: dict[str, Any] = Field(
        default_factory=dict, description="Interpolation values for the message"
    )
    weight: float = Field(..., description="Base weight of the detecting rule")

    model_config = {"frozen": True}

    @property
    def score(self) -> float:
        """Per-issue score: rule weight × severity multiplier."""
        return self.weight * SEVERITY_MULTIPLIERS[self.severity]


class RuleFailure(BaseModel):
    """A rule that raised while checking one file."""

    rule_id: str
    file: str
    error_type: str
    message: str
