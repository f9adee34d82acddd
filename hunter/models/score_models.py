"""
Score Data Models — Breakdown structure for the explainable quality score.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from hunter.models.rule_models import Category


class QualityLevel(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"
    TERRIBLE = "terrible"

    @classmethod
    def from_score(cls, score: float) -> QualityLevel:
        value = int(score)
        if value <= 20:
            return cls.EXCELLENT
        if value <= 40:
            return cls.GOOD
        if value <= 60:
            return cls.AVERAGE
        if value <= 80:
            return cls.POOR
        return cls.TERRIBLE


class SeverityDistribution(BaseModel):
    nuclear: int = 0
    spicy: int = 0
    mild: int = 0


class CategoryContribution(BaseModel):
    """How one category contributes to the overall score."""

    category: Category
    issue_count: int
    raw_score: float = Field(..., description="Σ weight × severity multiplier")
    weighted_density: float = Field(..., description="Raw score units per 1000 lines")
    score: float = Field(..., ge=0, le=100)
    weight: float
    weighted_score: float


class ScoreReport(BaseModel):
    """Full explainable breakdown of the quality score (0 = clean, 100 = terrible)."""

    overall_score: float = Field(..., ge=0, le=100, description="Final score 0-100")
    category_scores: dict[Category, float] = Field(default_factory=dict)
    contributions: list[CategoryContribution] = Field(default_factory=list)
    weighted_sum: float = 0.0
    issue_density: float = Field(default=0.0, description="Issues per 1000 lines")
    avg_issues_per_file: float = 0.0
    density_penalty: float = 0.0
    file_penalty: float = 0.0
    severity_penalty: float = 0.0
    severity_distribution: SeverityDistribution = Field(default_factory=SeverityDistribution)
    quality_level: QualityLevel = QualityLevel.EXCELLENT
    formula: str = Field(
        default="score = Σ(category_score × category_weight) + penalties, clamped to [0, 100]",
        description="Literal weighted-sum expression used",
    )
    summary: str = Field(default="", description="Human-readable score summary")
