"""CRM field extraction from enrichment answers."""

import asyncio
import json
import re

from config.prompts import CRM_FIELD_EXTRACTION_PROMPT, CRM_FIELDS
from src.enrichment.questions import format_evidence
from src.generators.llm import LLMClient, TextGenerator
from src.models.lead import EnrichmentResult
from src.utils.logger import get_logger

logger = get_logger("field_extractor")

FIRST_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*?\}")


def _as_field_value(value) -> str | None:
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def parse_structured_fields(text: str | None) -> dict[str, str | None]:
    """Decode the first ``{...}`` object in a model response.

    Returns an empty dict when no object is present, it does not parse, or it
    is not a JSON object. Non-null values are coerced to strings. Never raises.
    """
    if not text:
        return {}

    match = FIRST_JSON_OBJECT_PATTERN.search(text)
    if not match:
        logger.warning("fields_json_missing", preview=text[:100])
        return {}

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.warning("fields_json_parse_failed", error=str(e), preview=match.group(0)[:100])
        return {}

    if not isinstance(data, dict):
        return {}

    return {str(key): _as_field_value(value) for key, value in data.items()}


class FieldExtractor:
    """Extract CRM-style fields for a company with a single model call."""

    def __init__(self, llm_client: TextGenerator | None = None):
        """Initialize the extractor.

        Args:
            llm_client: Text generator for the extraction call. Defaults to LLMClient().
        """
        self.llm = llm_client or LLMClient()

    def build_prompt(self, company: str, results: list[EnrichmentResult]) -> str:
        field_lines = ",\n".join(f'  "{name}": ...' for name in CRM_FIELDS)
        return CRM_FIELD_EXTRACTION_PROMPT.format(
            company=company,
            field_lines=field_lines,
            company_data=format_evidence(results),
        )

    async def extract(self, company: str, results: list[EnrichmentResult]) -> dict[str, str | None]:
        """Extract structured fields for ``company`` from its Q&A evidence.

        Returns:
            Field mapping, possibly empty. Malformed output resolves to ``{}``;
            a failed model call propagates.
        """
        prompt = self.build_prompt(company, results)
        text = await asyncio.to_thread(self.llm.generate, prompt, max_tokens=600, temperature=0.0)
        fields = parse_structured_fields(text)

        logger.debug("fields_extracted", company=company, fields=len(fields))
        return fields
