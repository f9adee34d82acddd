"""
Analysis Result Models — per-file results and their project-wide fold.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from hunter.models.rule_models import CATEGORY_WEIGHTS, Category, Issue, RuleFailure, Severity


class FileErrorKind(str, Enum):
    FILE_UNREADABLE = "file_unreadable"
    ANALYSIS_FAILED = "analysis_failed"


class FileError(BaseModel):
    """A file that could not be analyzed at all."""

    path: str
    kind: FileErrorKind = FileErrorKind.FILE_UNREADABLE
    message: str


class AnalysisResult(BaseModel):
    """Issues found in one file."""

    path: str
    line_count: int = 0
    issues: list[Issue] = Field(default_factory=list)
    parse_errors: list[str] = Field(
        default_factory=list, description="ParseDegraded notes; analysis still ran"
    )
    rule_failures: list[RuleFailure] = Field(default_factory=list)
    duration_ms: float = Field(default=0.0, exclude=True)

    @property
    def parse_degraded(self) -> bool:
        return bool(self.parse_errors)


class ProjectResult(BaseModel):
    """All per-file results plus derived project-wide counts."""

    files: list[AnalysisResult] = Field(default_factory=list)
    errors: list[FileError] = Field(default_factory=list)
    files_analyzed: int = 0
    total_lines: int = 0
    total_issues: int = 0
    issues_by_severity: dict[Severity, int] = Field(default_factory=dict)
    issues_by_category: dict[Category, int] = Field(default_factory=dict)

    @classmethod
    def from_results(
        cls,
        results: list[AnalysisResult],
        errors: list[FileError] | None = None,
    ) -> ProjectResult:
        """Reduce per-file results into one project result, independent of input order."""
        files = sorted(results, key=lambda r: r.path)
        by_severity = {severity: 0 for severity in Severity}
        by_category = {category: 0 for category in CATEGORY_WEIGHTS}
        total_issues = 0
        for result in files:
            for issue in result.issues:
                by_severity[issue.severity] += 1
                by_category[issue.category] += 1
                total_issues += 1

        return cls(
            files=files,
            errors=sorted(errors or [], key=lambda e: e.path),
            files_analyzed=len(files),
            total_lines=sum(r.line_count for r in files),
            total_issues=total_issues,
            issues_by_severity=by_severity,
            issues_by_category=by_category,
        )

    @property
    def issues(self) -> list[Issue]:
        return [issue for result in self.files for issue in result.issues]
