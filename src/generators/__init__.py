"""Generators package."""

from src.generators.llm import LLMClient, TextGenerator

__all__ = ["LLMClient", "TextGenerator"]
