"""
Quality Scoring Engine — Computes an explainable 0-100 score from issues.

0 is clean code, 100 is terrible.

    issue_score       = rule_weight × severity_multiplier
    weighted_density  = Σ issue_score / ISSUE_SCORE_UNIT / total_lines × 1000   (per category)
    category_score    = threshold curve(weighted_density)                        (0..90)
    overall           = Σ category_score × category_weight
                        + density penalty + file penalty + severity penalty,
                        clamped to [0, 100]

Every intermediate value is kept in the ScoreReport so the number can be
explained term by term.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping

from hunter.models.result_models import ProjectResult
from hunter.models.rule_models import CATEGORY_WEIGHTS, Category, Issue, Severity
from hunter.models.score_models import (
    CategoryContribution,
    QualityLevel,
    ScoreReport,
    SeverityDistribution,
)

# Score of one Spicy issue from a weight-2.0 rule: the unit a category density is counted in.
ISSUE_SCORE_UNIT = 10.0

# (excellent, good, average, poor) weighted-density breakpoints, mapped to 0 / 20 / 40 / 60.
CATEGORY_THRESHOLDS: Mapping[Category, tuple[float, float, float, float]] = MappingProxyType({
    Category.NAMING: (0.0, 2.0, 5.0, 10.0),
    Category.COMPLEXITY: (0.0, 1.0, 3.0, 6.0),
    Category.DUPLICATION: (0.0, 0.5, 2.0, 4.0),
    Category.RUST_BASICS: (0.0, 1.0, 3.0, 6.0),
    Category.ADVANCED_RUST: (0.0, 0.5, 2.0, 4.0),
    Category.RUST_FEATURES: (0.0, 0.5, 1.5, 3.0),
    Category.CODE_STRUCTURE: (0.0, 1.0, 3.0, 6.0),
})
CATEGORY_SCORE_CAP = 90.0

# (issues per 1000 lines, penalty), highest tier first. Only the top tier is
# inclusive; the others apply strictly above their bound.
DENSITY_TOP_TIER = (50.0, 25.0)
DENSITY_TIERS = ((30.0, 15.0), (20.0, 10.0), (10.0, 5.0))
# (issues per file, penalty), highest tier first, strict bounds
FILE_TIERS = ((20.0, 15.0), (10.0, 10.0), (5.0, 5.0))


def category_score(category: Category, weighted_density: float) -> float:
    """Map a category's weighted density onto its 0-90 threshold curve."""
    if weighted_density <= 0:
        return 0.0
    excellent, good, average, poor = CATEGORY_THRESHOLDS[category]
    d = weighted_density
    if d <= excellent:
        score = 0.0
    elif d <= good:
        score = (d - excellent) / (good - excellent) * 20.0
    elif d <= average:
        score = 20.0 + (d - good) / (average - good) * 20.0
    elif d <= poor:
        score = 40.0 + (d - average) / (poor - average) * 20.0
    else:
        score = min(60.0 + (d - poor) * 2.0, CATEGORY_SCORE_CAP)
    return min(max(score, 0.0), 100.0)


def weighted_category_sum(scores: Mapping[Category, float]) -> float:
    """Σ category_score × category_weight over the fixed category table."""
    return math.fsum(scores.get(category, 0.0) * weight for category, weight in CATEGORY_WEIGHTS.items())


def density_penalty(issues_per_1k_lines: float) -> float:
    top, top_penalty = DENSITY_TOP_TIER
    if issues_per_1k_lines >= top:
        return top_penalty
    for bound, penalty in DENSITY_TIERS:
        if issues_per_1k_lines > bound:
            return penalty
    return 0.0


def file_penalty(issues_per_file: float) -> float:
    for bound, penalty in FILE_TIERS:
        if issues_per_file > bound:
            return penalty
    return 0.0


def severity_penalty(distribution: SeverityDistribution) -> float:
    """Extra weight for piles of severe issues, on top of the category curves.

    Tiers are cumulative: the spicy tier counts every issue that is at least
    Spicy, and the mild tier counts every issue. Raising one issue's severity
    therefore never lowers the penalty.
    """
    penalty = 0.0
    if distribution.nuclear > 0:
        penalty += 20.0 + 5.0 * (distribution.nuclear - 1)
    at_least_spicy = distribution.spicy + distribution.nuclear
    if at_least_spicy > 5:
        penalty += 2.0 * (at_least_spicy - 5)
    at_least_mild = at_least_spicy + distribution.mild
    if at_least_mild > 20:
        penalty += 0.5 * (at_least_mild - 20)
    return penalty


def _contributions(issues: list[Issue], total_lines: int) -> list[CategoryContribution]:
    by_category: dict[Category, list[float]] = {category: [] for category in CATEGORY_WEIGHTS}
    for issue in issues:
        by_category[issue.category].append(issue.score)

    contributions: list[CategoryContribution] = []
    for category, weight in CATEGORY_WEIGHTS.items():
        raw = math.fsum(by_category[category])
        density = raw / ISSUE_SCORE_UNIT / total_lines * 1000.0 if total_lines > 0 else 0.0
        score = category_score(category, density)
        contributions.append(
            CategoryContribution(
                category=category,
                issue_count=len(by_category[category]),
                raw_score=round(raw, 4),
                weighted_density=round(density, 4),
                score=round(score, 4),
                weight=weight,
                weighted_score=round(score * weight, 4),
            )
        )
    return contributions


def _formula(contributions: list[CategoryContribution], penalties: float, overall: float) -> str:
    terms = " + ".join(f"{c.score:.2f}×{c.weight:.2f}" for c in contributions)
    return f"score = {terms} + penalties {penalties:.2f} = {overall:.2f}"


def score(project: ProjectResult) -> ScoreReport:
    """
    Compute the explainable quality score for a whole project.

    Args:
        project: Reduced analysis result for every file.

    Returns:
        ScoreReport with per-category curves, penalties and the literal
        weighted-sum expression.
    """
    issues = project.issues
    total_lines = project.total_lines

    distribution = SeverityDistribution(
        nuclear=sum(1 for i in issues if i.severity == Severity.NUCLEAR),
        spicy=sum(1 for i in issues if i.severity == Severity.SPICY),
        mild=sum(1 for i in issues if i.severity == Severity.MILD),
    )

    if not issues:
        contributions = _contributions([], total_lines)
        return ScoreReport(
            overall_score=0.0,
            category_scores={c.category: 0.0 for c in contributions},
            contributions=contributions,
            severity_distribution=distribution,
            quality_level=QualityLevel.EXCELLENT,
            formula=_formula(contributions, 0.0, 0.0),
            summary=f"No issues detected in {project.files_analyzed} files. Score is 0.",
        )

    contributions = _contributions(issues, total_lines)
    scores = {c.category: c.score for c in contributions}
    weighted_sum = weighted_category_sum(scores)

    issue_density = len(issues) * 1000.0 / total_lines if total_lines > 0 else 0.0
    per_file = len(issues) / project.files_analyzed if project.files_analyzed else 0.0
    d_penalty = density_penalty(issue_density)
    f_penalty = file_penalty(per_file)
    s_penalty = severity_penalty(distribution)
    penalties = d_penalty + f_penalty + s_penalty

    overall = round(min(max(weighted_sum + penalties, 0.0), 100.0), 2)
    level = QualityLevel.from_score(overall)

    summary_parts = []
    if distribution.nuclear:
        summary_parts.append(f"{distribution.nuclear} nuclear")
    if distribution.spicy:
        summary_parts.append(f"{distribution.spicy} spicy")
    if distribution.mild:
        summary_parts.append(f"{distribution.mild} mild")
    worst = max(contributions, key=lambda c: c.weighted_score)

    summary = (
        f"Quality score {overall:.2f}/100 ({level.value}) from {len(issues)} issues "
        f"({', '.join(summary_parts)}) across {project.files_analyzed} files. "
        f"Largest contributor: {worst.category.value} ({worst.score:.1f})."
    )

    return ScoreReport(
        overall_score=overall,
        category_scores=scores,
        contributions=contributions,
        weighted_sum=round(weighted_sum, 4),
        issue_density=round(issue_density, 4),
        avg_issues_per_file=round(per_file, 4),
        density_penalty=d_penalty,
        file_penalty=f_penalty,
        severity_penalty=s_penalty,
        severity_distribution=distribution,
        quality_level=level,
        formula=_formula(contributions, penalties, overall),
        summary=summary,
    )
