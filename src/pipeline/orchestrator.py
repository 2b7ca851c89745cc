"""Batch lead enrichment orchestrator."""

import asyncio
from typing import Awaitable, Callable, Iterable

from config.settings import settings
from src.chat.client import ChatClient
from src.chat.errors import ConfigurationError
from src.chat.providers import resolve_providers
from src.enrichment.session import EnrichmentSession, SessionTranscript
from src.models.lead import (
    BatchOutcome,
    EnrichmentOptions,
    LeadEnrichmentOutcome,
    ModelSelection,
)
from src.processors.field_extractor import FieldExtractor
from src.processors.scorer import LeadScorer
from src.utils.logger import get_logger, lead_context
from src.utils.rate_limit import Pacer

logger = get_logger("pipeline")

NO_VALID_EMAILS_ERROR = "No valid email addresses provided"


def normalize_emails(emails: Iterable[object]) -> list[str]:
    """Trim, lowercase, drop anything without ``@`` and de-duplicate (first seen wins)."""
    seen: dict[str, None] = {}
    for email in emails:
        if not isinstance(email, str):
            continue
        normalized = email.strip().lower()
        if normalized and "@" in normalized:
            seen.setdefault(normalized, None)
    return list(seen)


def company_from_email(email: str) -> str:
    """Best-effort company name for outcomes of leads that failed early."""
    domain = email.split("@")[1] if "@" in email else ""
    return domain.split(".", 1)[0] or "unknown"


def describe_error(error: BaseException) -> str:
    return str(error) or error.__class__.__name__


class EnrichmentOrchestrator:
    """Enrich a batch of emails one lead at a time.

    For every email: run the question session, score the answers, extract CRM
    fields. Nothing runs concurrently; a pause separates consecutive leads.
    A lead that fails is reported in its outcome and the batch moves on.
    """

    def __init__(
        self,
        chat_client: ChatClient | None = None,
        scorer: LeadScorer | None = None,
        field_extractor: FieldExtractor | None = None,
        question_delay: float | None = None,
        lead_delay: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        progress_callback: Callable[[str, int, int], None] | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            chat_client: Chat backend client. Created from settings if omitted.
            scorer: Lead scorer. Created on first batch if omitted.
            field_extractor: Field extractor. Created on first batch if omitted.
            question_delay: Pause between questions. Defaults to settings.
            lead_delay: Pause between leads. Defaults to settings.
            sleep: Awaitable sleep used for pacing.
            progress_callback: Callback for progress updates (email, current, total).
        """
        self.chat_client = chat_client or ChatClient()
        self.scorer = scorer
        self.field_extractor = field_extractor
        self.question_delay = (
            question_delay if question_delay is not None else settings.question_delay_seconds
        )
        self.lead_delay = lead_delay if lead_delay is not None else settings.lead_delay_seconds
        self._sleep = sleep
        self.progress_callback = progress_callback

    def _progress(self, email: str, current: int, total: int) -> None:
        """Report progress if callback is set."""
        if self.progress_callback:
            self.progress_callback(email, current, total)

    async def _resolve_models(self, options: EnrichmentOptions) -> ModelSelection:
        catalogue = await self.chat_client.fetch_model_providers()
        return resolve_providers(
            catalogue,
            requested_chat=options.chat_model_provider,
            requested_embedding=options.embedding_model_provider,
        )

    def _ensure_processors(self) -> None:
        # LLMClient raises ValueError when its API key is missing
        try:
            if self.scorer is None:
                self.scorer = LeadScorer()
            if self.field_extractor is None:
                self.field_extractor = FieldExtractor()
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

    async def enrich_batch(
        self,
        emails: Iterable[object],
        options: EnrichmentOptions | None = None,
    ) -> BatchOutcome:
        """Enrich every valid email in ``emails``.

        Args:
            emails: Raw addresses; normalised and de-duplicated here.
            options: Model preferences and backend modes.

        Returns:
            BatchOutcome; ``success`` is False if any lead or the batch setup failed.
            Never raises.
        """
        options = options or EnrichmentOptions()
        valid_emails = normalize_emails(emails)

        if not valid_emails:
            logger.warning("no_valid_emails")
            return BatchOutcome(success=False, results=[], errors=[NO_VALID_EMAILS_ERROR])

        try:
            selection = await self._resolve_models(options)
            self._ensure_processors()
        except Exception as e:
            # ConfigurationError, TransportError or a malformed catalogue
            message = f"Configuration error: {describe_error(e)}"
            logger.error("batch_configuration_failed", error=message)
            return BatchOutcome(success=False, results=[], errors=[message])

        logger.info(
            "batch_started",
            emails=len(valid_emails),
            chat_model=selection.chat_model.name,
            chat_provider=selection.chat_model.provider,
        )

        session = EnrichmentSession(
            self.chat_client,
            selection,
            options,
            question_delay=self.question_delay,
            sleep=self._sleep,
        )
        pacer = Pacer(self.lead_delay, sleep=self._sleep)
        results: list[LeadEnrichmentOutcome] = []
        errors: list[str] = []

        for index, email in enumerate(valid_emails):
            await pacer.wait()
            self._progress(email, index + 1, len(valid_emails))

            with lead_context(email):
                outcome = await self.process_lead(email, session)

            results.append(outcome)
            if outcome.error:
                errors.append(f"Failed {email}: {outcome.error}")

        batch = BatchOutcome(success=not errors, results=results, errors=errors)
        logger.info(
            "batch_completed",
            leads=len(results),
            succeeded=batch.successful_count,
            failed=batch.failed_count,
        )
        return batch

    async def process_lead(self, email: str, session: EnrichmentSession) -> LeadEnrichmentOutcome:
        """Enrich, score and extract fields for one lead; failures land in ``error``."""
        logger.info("lead_enrichment_started")
        transcript: SessionTranscript | None = None
        report = None

        try:
            transcript = await session.run(email)
            report = await self.scorer.score(transcript.results)
            fields = await self.field_extractor.extract(transcript.company, transcript.results)
        except Exception as e:
            logger.error("lead_enrichment_failed", error=describe_error(e))
            return LeadEnrichmentOutcome(
                email=email,
                company=transcript.company if transcript else company_from_email(email),
                chat_id=transcript.chat_id if transcript else "",
                enrichment_data=transcript.results if transcript else [],
                score=report.score if report else None,
                reason=report.reason if report else None,
                structured_fields={},
                error=describe_error(e),
            )

        logger.info("lead_enrichment_completed", score=report.score, fields=len(fields))
        return LeadEnrichmentOutcome(
            email=email,
            company=transcript.company,
            chat_id=transcript.chat_id,
            enrichment_data=transcript.results,
            score=report.score,
            reason=report.reason,
            structured_fields=fields,
        )

    async def close(self) -> None:
        await self.chat_client.close()
