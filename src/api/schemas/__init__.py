"""API request/response schemas."""

from src.api.schemas.requests import EnrichLeadsRequest
from src.api.schemas.responses import EnrichLeadsResponse, EnrichmentMetadata, ErrorResponse

__all__ = [
    "EnrichLeadsRequest",
    "EnrichLeadsResponse",
    "EnrichmentMetadata",
    "ErrorResponse",
]
