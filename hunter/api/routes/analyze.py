"""
Hunter — POST /analyze endpoint.

Accepts inline Rust files, runs every rule over them and returns the
project result together with its explainable score.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from hunter.api.dependencies import get_rule_engine
from hunter.config import settings
from hunter.core.analyzer import AnalysisWorker
from hunter.core.rule_engine import RuleEngine
from hunter.core.scorer import score
from hunter.models.api_models import AnalyzeRequest, AnalyzeResponse

logger = logging.getLogger("hunter.api")
router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_files(
    req: AnalyzeRequest,
    rule_engine: RuleEngine = Depends(get_rule_engine),
):
    """Analyze submitted Rust files and score them."""
    if len(req.files) > settings.max_request_files:
        raise HTTPException(
            status_code=413,
            detail=f"Request has {len(req.files)} files; the limit is {settings.max_request_files}",
        )

    sources: dict[str, str] = {}
    for file in req.files:
        if file.path in sources:
            raise HTTPException(status_code=422, detail=f"Duplicate file path: {file.path}")
        sources[file.path] = file.content

    logger.info(f"Analyze request: {len(sources)} files")
    worker = AnalysisWorker(config=req.config, rule_engine=rule_engine)
    project = await worker.run_sources(sources)
    report = score(project)
    logger.info(f"Analyze complete: score {report.overall_score:.2f} ({report.quality_level.value})")

    return AnalyzeResponse(project=project, score=report)
