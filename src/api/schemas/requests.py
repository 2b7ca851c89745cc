"""Request schemas for the API."""

import re

from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from src.models.lead import EnrichmentOptions, ModelRef
from src.pipeline.orchestrator import normalize_emails

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class EnrichLeadsRequest(BaseModel):
    """Request body for enriching a batch of leads."""

    emails: list[str] = Field(
        ...,
        min_length=1,
        description="Email addresses to enrich; the domain identifies the company",
    )
    chat_model_provider: ModelRef | None = Field(default=None, alias="chatModelProvider")
    embedding_model_provider: ModelRef | None = Field(default=None, alias="embeddingModelProvider")
    focus_mode: str | None = Field(default=None, alias="focusMode")
    optimization_mode: str | None = Field(default=None, alias="optimizationMode")
    system_instructions: str | None = Field(default=None, alias="systemInstructions")
    single_mode: bool = Field(
        default=False,
        alias="singleMode",
        description="Accepted for compatibility; a single email runs through the batch path",
    )

    model_config = {"populate_by_name": True}

    @field_validator("emails")
    @classmethod
    def _normalize_and_validate(cls, emails: list[str]) -> list[str]:
        normalized = [e.strip().lower() for e in emails if e.strip()]
        if not normalized:
            raise ValueError("No valid emails after normalization")

        unique = list(dict.fromkeys(normalized))
        if len(unique) > settings.max_emails_per_batch:
            raise ValueError(f"Too many emails. Max allowed is {settings.max_emails_per_batch}")

        invalid = [e for e in unique if not EMAIL_PATTERN.match(e)]
        if invalid:
            raise ValueError(f"Invalid email format(s): {', '.join(invalid)}")

        return normalize_emails(unique)

    def to_options(self) -> EnrichmentOptions:
        return EnrichmentOptions(
            chat_model_provider=self.chat_model_provider,
            embedding_model_provider=self.embedding_model_provider,
            focus_mode=self.focus_mode,
            optimization_mode=self.optimization_mode,
            system_instructions=self.system_instructions,
        )
