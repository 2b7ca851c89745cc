"""Enrichment package."""

from src.enrichment.questions import (
    extract_company_info,
    format_evidence,
    generate_enrichment_questions,
)
from src.enrichment.session import EnrichmentSession, SessionTranscript

__all__ = [
    "extract_company_info",
    "generate_enrichment_questions",
    "format_evidence",
    "EnrichmentSession",
    "SessionTranscript",
]
