"""Response schemas for the API."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.models.lead import LeadEnrichmentOutcome


class EnrichmentMetadata(BaseModel):
    """Timing and counts attached to every enrichment response."""

    processing_time_ms: int = Field(..., serialization_alias="processingTimeMs")
    timestamp: datetime
    total_emails: int = Field(..., serialization_alias="totalEmails")
    successful_enrichments: int = Field(..., serialization_alias="successfulEnrichments")
    failed_enrichments: int = Field(..., serialization_alias="failedEnrichments")


class EnrichLeadsResponse(BaseModel):
    """Batch outcome plus metadata."""

    success: bool
    results: list[LeadEnrichmentOutcome] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    metadata: EnrichmentMetadata


class ErrorResponse(BaseModel):
    """Error body for rejected requests."""

    success: bool = False
    error: str
    message: str
