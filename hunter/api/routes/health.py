"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter

from hunter.core.rule_engine import RULE_REGISTRY

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "1.0.0",
        "rules": len(RULE_REGISTRY),
    }
