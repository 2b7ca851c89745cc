"""Data models package."""

from src.models.lead import (
    BatchOutcome,
    ChatTurn,
    EnrichmentOptions,
    EnrichmentResult,
    Lead,
    LeadEnrichmentOutcome,
    ModelRef,
    ModelSelection,
    ScoreReport,
)

__all__ = [
    "Lead",
    "ChatTurn",
    "EnrichmentResult",
    "EnrichmentOptions",
    "ModelRef",
    "ModelSelection",
    "ScoreReport",
    "LeadEnrichmentOutcome",
    "BatchOutcome",
]
