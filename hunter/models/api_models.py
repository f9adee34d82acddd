"""
Analyze Request/Response Models — API contract schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from hunter.config import AnalysisConfig
from hunter.models.result_models import ProjectResult
from hunter.models.score_models import ScoreReport


class FileInput(BaseModel):
    """A single file submitted for analysis."""

    path: str = Field(..., min_length=1, description="File path reported on every issue")
    content: str = Field(..., description="Rust source content")


class AnalyzeRequest(BaseModel):
    """Request body for POST /analyze."""

    files: list[FileInput] = Field(..., min_length=1)
    config: AnalysisConfig | None = Field(
        default=None, description="Threshold overrides; omitted fields use server settings"
    )


class AnalyzeResponse(BaseModel):
    project: ProjectResult
    score: ScoreReport
