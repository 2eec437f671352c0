"""
Trigger webhook: runs the closed-won pipeline once per inbound event.
"""

import logging
from typing import Any

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse

from dealbell.config.settings import get_settings
from dealbell.usecases.closed_won_pipeline import build_pipeline

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/webhook/trigger")
async def trigger_webhook(event: Any = Body(default=None)):
    """
    Handle a trigger event.

    The payload is opaque and may be any JSON value; it is only logged in
    development. Aborted runs answer with a 500 so the caller's own alerting
    picks them up.
    """
    pipeline = build_pipeline(get_settings())
    outcome = await pipeline.run(event)

    status_code = 500 if outcome.aborted else 200
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "dealbell"}
