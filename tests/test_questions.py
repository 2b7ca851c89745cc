import pytest

from src.enrichment.questions import (
    extract_company_info,
    format_evidence,
    generate_enrichment_questions,
)
from src.models.lead import EnrichmentResult


def test_extract_company_info_uses_first_domain_label():
    lead = extract_company_info("jane.doe@acme.co.uk")

    assert lead.domain == "acme.co.uk"
    assert lead.company == "acme"
    assert lead.email == "jane.doe@acme.co.uk"


@pytest.mark.parametrize("email", ["no-at-sign.com", "jane@", "jane@acme@evil.io"])
def test_extract_company_info_rejects_unusable_addresses(email):
    with pytest.raises(ValueError):
        extract_company_info(email)


def test_questions_are_fixed_and_ordered():
    questions = generate_enrichment_questions("acme", "acme.io")

    assert len(questions) == 11
    assert questions[0].startswith("What does acme company do?")
    assert "domain acme.io" in questions[1]
    assert "along with the source name" in questions[2]
    assert "only the number of employees" in questions[3]
    assert "only the number of years" in questions[4]
    assert "bullet points" in questions[5]
    assert "Fortune 500" in questions[6]
    assert "Fortune 100" in questions[7]
    assert questions[8].startswith("Who are the clients of acme?")
    assert "industry classification" in questions[9]
    assert questions[10].endswith("Return only the link.")


def test_questions_are_a_pure_function_of_inputs():
    assert generate_enrichment_questions("acme", "acme.io") == generate_enrichment_questions(
        "acme", "acme.io"
    )
    assert generate_enrichment_questions("globex", "globex.com") != generate_enrichment_questions(
        "acme", "acme.io"
    )


def test_format_evidence_renders_question_answer_pairs():
    evidence = format_evidence(
        [
            EnrichmentResult(question="What is it?", answer="A robot maker."),
            EnrichmentResult(question="Employees?", answer="250"),
        ]
    )

    assert evidence == "Q: What is it?\nA: A robot maker.\nQ: Employees?\nA: 250"
