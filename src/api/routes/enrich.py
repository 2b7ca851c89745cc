"""Lead enrichment endpoint."""

import time
from datetime import datetime, timezone
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from config.settings import settings
from src.api.schemas.requests import EnrichLeadsRequest
from src.api.schemas.responses import EnrichLeadsResponse, EnrichmentMetadata
from src.pipeline.orchestrator import EnrichmentOrchestrator
from src.utils.logger import get_logger

logger = get_logger("enrich_route")

router = APIRouter()

limiter = Limiter(key_func=get_remote_address)


async def get_orchestrator() -> AsyncIterator[EnrichmentOrchestrator]:
    """Provide an orchestrator for one request and release its HTTP client afterwards."""
    orchestrator = EnrichmentOrchestrator()
    try:
        yield orchestrator
    finally:
        await orchestrator.close()


@router.get("/enrich-leads")
async def enrich_leads_usage() -> JSONResponse:
    """Describe the enrichment endpoint."""
    return JSONResponse(
        content={
            "status": "healthy",
            "service": "Lead Enrichment API",
            "version": "0.1.0",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "POST": "/api/enrich-leads",
                "description": "Enrich lead information from email addresses",
            },
            "usage": {
                "method": "POST",
                "contentType": "application/json",
                "requiredFields": ["emails"],
                "optionalFields": [
                    "chatModelProvider",
                    "embeddingModelProvider",
                    "focusMode",
                    "optimizationMode",
                    "systemInstructions",
                    "singleMode",
                ],
                "maxEmails": settings.max_emails_per_batch,
                "example": {
                    "emails": ["john@company.com", "jane@startup.io"],
                    "focusMode": settings.default_focus_mode,
                    "optimizationMode": settings.default_optimization_mode,
                    "chatModelProvider": {"name": "gpt-4o-mini", "provider": "openai"},
                    "singleMode": False,
                },
            },
        },
        headers={"Cache-Control": "no-store"},
    )


@router.post("/enrich-leads", response_model=EnrichLeadsResponse)
@limiter.limit(f"{settings.requests_per_minute}/minute")
async def enrich_leads(
    request: Request,
    body: EnrichLeadsRequest,
    orchestrator: EnrichmentOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    """Enrich a batch of leads.

    Each email is processed sequentially: question session, rubric scoring and
    CRM field extraction. Responds 200 when every lead succeeded and 207 when
    some (or the batch setup) failed; per-lead errors are in the body.
    """
    started = time.monotonic()
    logger.info(
        "enrich_leads_called",
        emails=len(body.emails),
        focus_mode=body.focus_mode or settings.default_focus_mode,
        chat_model=body.chat_model_provider.name if body.chat_model_provider else "auto-detect",
        single_mode=body.single_mode,
    )

    outcome = await orchestrator.enrich_batch(body.emails, body.to_options())

    processing_ms = int((time.monotonic() - started) * 1000)
    response = EnrichLeadsResponse(
        success=outcome.success,
        results=outcome.results,
        errors=outcome.errors,
        metadata=EnrichmentMetadata(
            processing_time_ms=processing_ms,
            timestamp=datetime.now(timezone.utc),
            total_emails=len(body.emails),
            successful_enrichments=outcome.successful_count,
            failed_enrichments=outcome.failed_count,
        ),
    )

    logger.info(
        "enrich_leads_completed",
        success=outcome.success,
        results=len(outcome.results),
        errors=len(outcome.errors),
        processing_ms=processing_ms,
    )

    return JSONResponse(
        content=response.model_dump(mode="json", by_alias=True),
        status_code=status.HTTP_200_OK if outcome.success else status.HTTP_207_MULTI_STATUS,
        headers={"Cache-Control": "no-store"},
    )
