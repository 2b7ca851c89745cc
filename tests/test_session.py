import httpx
import pytest

from src.enrichment.questions import generate_enrichment_questions
from src.enrichment.session import EnrichmentSession
from src.models.lead import EnrichmentOptions
from tests.helpers import SELECTION, FakeChatBackend, RecordingSleep, answer, record


def _session(backend: FakeChatBackend, sleep: RecordingSleep, **kwargs) -> EnrichmentSession:
    return EnrichmentSession(
        backend.client(),
        SELECTION,
        question_delay=2.0,
        sleep=sleep,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_run_asks_every_question_in_order_with_one_chat_id():
    backend = FakeChatBackend()
    sleep = RecordingSleep()

    transcript = await _session(backend, sleep).run("jane@acme.io")

    questions = generate_enrichment_questions("acme", "acme.io")
    assert transcript.company == "acme"
    assert transcript.domain == "acme.io"
    assert [r.question for r in transcript.results] == questions
    assert [body["content"] for body in backend.chat_requests] == questions
    assert {body["chatId"] for body in backend.chat_requests} == {transcript.chat_id}
    assert len(transcript.chat_id) == 40
    assert transcript.results[0].answer == f"answer to: {questions[0]}"


@pytest.mark.asyncio
async def test_history_grows_by_two_turns_per_question():
    backend = FakeChatBackend()
    transcript = await _session(backend, RecordingSleep()).run("jane@acme.io")

    histories = [body["history"] for body in backend.chat_requests]
    assert histories[0] == []
    assert [len(h) for h in histories] == [2 * i for i in range(len(histories))]
    assert histories[2] == [
        ["human", transcript.results[0].question],
        ["assistant", transcript.results[0].answer],
        ["human", transcript.results[1].question],
        ["assistant", transcript.results[1].answer],
    ]


@pytest.mark.asyncio
async def test_failed_questions_get_placeholders_and_session_continues():
    def respond(body):
        if "Fortune 500" in body["content"]:
            return [record("error", "boom")]
        if "revenue" in body["content"]:
            return httpx.Response(500, text="internal error")
        return answer("fine")

    backend = FakeChatBackend(respond=respond)
    transcript = await _session(backend, RecordingSleep()).run("jane@acme.io")

    answers = [r.answer for r in transcript.results]
    assert len(answers) == 11
    assert transcript.failed_questions == 2
    assert answers[2].startswith("Error: Chat API 500")
    assert answers[6] == "Error: boom"
    assert answers.count("fine") == 9

    # The failure is visible to the next question's context
    history_after_failure = backend.chat_requests[7]["history"]
    assert history_after_failure[-1] == ["assistant", "Error: boom"]


@pytest.mark.asyncio
async def test_result_length_is_invariant_when_every_question_fails():
    backend = FakeChatBackend(respond=lambda body: httpx.Response(502, text="bad gateway"))

    transcript = await _session(backend, RecordingSleep()).run("jane@acme.io")

    assert len(transcript.results) == len(generate_enrichment_questions("acme", "acme.io"))
    assert all(r.answer.startswith("Error: ") for r in transcript.results)


@pytest.mark.asyncio
async def test_pauses_between_questions_only():
    sleep = RecordingSleep()

    await _session(FakeChatBackend(), sleep).run("jane@acme.io")

    assert sleep.delays == [2.0] * 10


@pytest.mark.asyncio
async def test_options_are_forwarded_to_every_request():
    backend = FakeChatBackend()
    options = EnrichmentOptions(
        focus_mode="academicSearch",
        optimization_mode="quality",
        system_instructions="Answer in English.",
    )

    await _session(backend, RecordingSleep(), options=options).run("jane@acme.io")

    assert {body["focusMode"] for body in backend.chat_requests} == {"academicSearch"}
    assert {body["optimizationMode"] for body in backend.chat_requests} == {"quality"}
    assert {body["systemInstructions"] for body in backend.chat_requests} == {"Answer in English."}


@pytest.mark.asyncio
async def test_invalid_email_raises_before_any_request():
    backend = FakeChatBackend()

    with pytest.raises(ValueError):
        await _session(backend, RecordingSleep()).run("not-an-email")

    assert backend.chat_requests == []
