"""Processors package."""

from src.processors.field_extractor import FieldExtractor, parse_structured_fields
from src.processors.scorer import LeadScorer, parse_score_response

__all__ = ["LeadScorer", "parse_score_response", "FieldExtractor", "parse_structured_fields"]
