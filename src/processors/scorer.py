"""Lead scoring against the weighted 90-point rubric."""

import asyncio
import re

from config.prompts import LEAD_SCORING_PROMPT
from src.enrichment.questions import format_evidence
from src.generators.llm import LLMClient, TextGenerator
from src.models.lead import EnrichmentResult, ScoreReport
from src.utils.logger import get_logger

logger = get_logger("scorer")

MAX_SCORE = 90.0

TOTAL_SCORE_PATTERN = re.compile(r"Total Score:\s*(\d+(?:\.\d+)?)")
RUBRIC_WITH_REASON_PATTERN = re.compile(r"Revenue Score:[^\n]*(?:\n[^\n]*?)+?Reason:")


def parse_score_response(text: str | None) -> ScoreReport:
    """Decode the scoring model's rubric output.

    Best effort: the number after ``Total Score:`` becomes the score (0 when
    missing, clamped to 0..90). When ``Reason:`` appears on any line after the
    ``Revenue Score:`` line (``**Reason:**`` and ``- Reason:`` included), the
    whole response is kept as the reason, otherwise the reason is ``"N/A"``.
    Never raises.
    """
    if not text:
        return ScoreReport()

    score = 0.0
    match = TOTAL_SCORE_PATTERN.search(text)
    if match:
        try:
            score = float(match.group(1))
        except ValueError:
            score = 0.0
    score = min(max(score, 0.0), MAX_SCORE)

    reason = text.strip() if RUBRIC_WITH_REASON_PATTERN.search(text) else "N/A"
    if not match:
        logger.warning("score_parse_degraded", preview=text[:100])

    return ScoreReport(score=score, reason=reason)


class LeadScorer:
    """Score a lead from its enrichment answers with a single model call."""

    def __init__(self, llm_client: TextGenerator | None = None):
        """Initialize the scorer.

        Args:
            llm_client: Text generator for the scoring call. Defaults to LLMClient().
        """
        self.llm = llm_client or LLMClient()

    def build_prompt(self, results: list[EnrichmentResult]) -> str:
        return LEAD_SCORING_PROMPT.format(company_data=format_evidence(results))

    async def score(self, results: list[EnrichmentResult]) -> ScoreReport:
        """Score a lead.

        Args:
            results: The lead's question/answer pairs.

        Returns:
            Parsed score report. Parsing problems resolve to defaults; a failed
            model call propagates.
        """
        prompt = self.build_prompt(results)
        text = await asyncio.to_thread(self.llm.generate, prompt, max_tokens=600, temperature=0.2)
        report = parse_score_response(text)

        logger.debug("lead_scored", score=report.score)
        return report
