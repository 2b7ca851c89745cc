"""Utility modules."""

from src.utils.logger import get_logger, lead_context, setup_logging
from src.utils.rate_limit import Pacer

__all__ = [
    "setup_logging",
    "get_logger",
    "lead_context",
    "Pacer",
]
