"""Lead enrichment data models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Conversation turns exchanged with the chat backend: ("human" | "assistant", text)
ChatRole = Literal["human", "assistant"]
ChatTurn = tuple[ChatRole, str]


class Lead(BaseModel):
    """A prospective contact and the company identity derived from its email."""

    model_config = ConfigDict(frozen=True)

    email: str
    company: str
    domain: str

    @field_validator("email")
    @classmethod
    def _require_single_at_sign(cls, value: str) -> str:
        if value.count("@") != 1:
            raise ValueError(f"not an email address: {value!r}")
        return value

    @classmethod
    def from_email(cls, email: str) -> "Lead":
        """Derive company and domain from an email address.

        ``jane@acme.co.uk`` yields domain ``acme.co.uk`` and company ``acme``.
        """
        if email.count("@") != 1:
            raise ValueError(f"not an email address: {email!r}")
        domain = email.split("@")[1]
        if not domain:
            raise ValueError(f"email has no domain: {email!r}")
        return cls(email=email, company=domain.split(".", 1)[0], domain=domain)


class EnrichmentResult(BaseModel):
    """One question put to the chat backend and the answer it produced."""

    question: str
    answer: str


class ModelRef(BaseModel):
    """A model as known to the chat backend's provider catalogue."""

    name: str = Field(..., min_length=1)
    provider: str = Field(..., min_length=1)


class ModelSelection(BaseModel):
    """Chat and embedding models resolved once for a whole batch."""

    model_config = ConfigDict(frozen=True)

    chat_model: ModelRef
    embedding_model: ModelRef


class EnrichmentOptions(BaseModel):
    """Caller-tunable options for a batch run."""

    chat_model_provider: ModelRef | None = None
    embedding_model_provider: ModelRef | None = None
    focus_mode: str | None = None
    optimization_mode: str | None = None
    system_instructions: str | None = None


class ScoreReport(BaseModel):
    """Rubric score parsed from the scoring model's response."""

    score: float = Field(default=0.0, ge=0, le=90)
    reason: str = "N/A"


class LeadEnrichmentOutcome(BaseModel):
    """Everything learned about one lead; frozen once assembled."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    email: str
    company: str
    chat_id: str = Field(default="", serialization_alias="chatId")
    enrichment_data: list[EnrichmentResult] = Field(
        default_factory=list, serialization_alias="enrichmentData"
    )
    score: float | None = None
    reason: str | None = None
    structured_fields: dict[str, str | None] | None = Field(
        default=None, serialization_alias="structuredFields"
    )
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class BatchOutcome(BaseModel):
    """Aggregated result of enriching a list of emails."""

    success: bool
    results: list[LeadEnrichmentOutcome] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def successful_count(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.results) - self.successful_count
