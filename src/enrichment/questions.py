"""Enrichment question planning."""

from config.prompts import ENRICHMENT_QUESTION_TEMPLATES
from src.models.lead import EnrichmentResult, Lead


def extract_company_info(email: str) -> Lead:
    """Derive the company identity behind an email address.

    Args:
        email: Address such as ``jane@acme.io``.

    Returns:
        Lead with ``company="acme"`` and ``domain="acme.io"``.

    Raises:
        ValueError: The address has no ``@`` or no domain part.
    """
    return Lead.from_email(email)


def generate_enrichment_questions(company: str, domain: str) -> list[str]:
    """Build the ordered enrichment questions for one company."""
    return [
        template.format(company=company, domain=domain)
        for template in ENRICHMENT_QUESTION_TEMPLATES
    ]


def format_evidence(results: list[EnrichmentResult]) -> str:
    """Render Q&A pairs as the evidence block fed to scoring and extraction."""
    return "\n".join(f"Q: {r.question}\nA: {r.answer}" for r in results)
