"""Per-lead question/answer session against the chat backend."""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

from config.settings import settings
from src.chat.client import ChatClient, new_chat_id
from src.enrichment.questions import extract_company_info, generate_enrichment_questions
from src.models.lead import ChatTurn, EnrichmentOptions, EnrichmentResult, Lead, ModelSelection
from src.utils.logger import get_logger, lead_context
from src.utils.rate_limit import Pacer

logger = get_logger("session")


def format_error_answer(error: Exception) -> str:
    """Placeholder answer recorded when a question fails."""
    message = str(error) or error.__class__.__name__
    return f"Error: {message}"


@dataclass
class SessionTranscript:
    """Result of one enrichment session."""

    lead: Lead
    chat_id: str
    results: list[EnrichmentResult] = field(default_factory=list)
    failed_questions: int = 0

    @property
    def company(self) -> str:
        return self.lead.company

    @property
    def domain(self) -> str:
        return self.lead.domain


class EnrichmentSession:
    """Ask every enrichment question about one lead, one at a time.

    Questions go out strictly in order with the full conversation so far, so
    the backend can resolve references like "the company" from earlier turns.
    A failed question never ends the session: its answer becomes an error
    placeholder, which is also added to the history.
    """

    def __init__(
        self,
        chat_client: ChatClient,
        selection: ModelSelection,
        options: EnrichmentOptions | None = None,
        question_delay: float | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the session runner.

        Args:
            chat_client: Client for the chat backend.
            selection: Models resolved for the batch.
            options: Focus/optimization modes and system instructions.
            question_delay: Pause between questions. Defaults to settings.
            sleep: Awaitable sleep used for pacing.
        """
        self.chat_client = chat_client
        self.selection = selection
        self.options = options or EnrichmentOptions()
        self.question_delay = (
            question_delay if question_delay is not None else settings.question_delay_seconds
        )
        self._sleep = sleep

    async def run(self, email: str) -> SessionTranscript:
        """Run all enrichment questions for ``email``.

        Returns:
            Transcript with one result per question, in question order.
        """
        lead = extract_company_info(email)
        transcript = SessionTranscript(lead=lead, chat_id=new_chat_id())
        questions = generate_enrichment_questions(lead.company, lead.domain)
        history: list[ChatTurn] = []
        pacer = Pacer(self.question_delay, sleep=self._sleep)

        with lead_context(email, transcript.chat_id):
            logger.info("session_started", company=lead.company, questions=len(questions))

            for index, question in enumerate(questions):
                await pacer.wait()
                try:
                    answer = await self.chat_client.send(
                        question,
                        transcript.chat_id,
                        list(history),
                        self.selection,
                        focus_mode=self.options.focus_mode,
                        optimization_mode=self.options.optimization_mode,
                        system_instructions=self.options.system_instructions,
                    )
                except Exception as e:
                    logger.warning(
                        "question_failed",
                        company=lead.company,
                        index=index,
                        error=str(e),
                    )
                    answer = format_error_answer(e)
                    transcript.failed_questions += 1

                transcript.results.append(EnrichmentResult(question=question, answer=answer))
                history.append(("human", question))
                history.append(("assistant", answer))

            logger.info(
                "session_completed",
                company=lead.company,
                answered=len(questions) - transcript.failed_questions,
                failed=transcript.failed_questions,
            )

        return transcript
