import httpx
import pytest

from src.chat.client import ChatClient
from src.chat.errors import BackendStreamError, TransportError
from tests.helpers import (
    SELECTION,
    FakeChatBackend,
    answer,
    chunked_response,
    record,
)


@pytest.mark.asyncio
async def test_send_concatenates_message_fragments():
    backend = FakeChatBackend(
        respond=lambda body: chunked_response(
            [
                '{"type":"message","data":"Hel"}\n',
                '{"type":"message","data":"lo"}\n',
                '{"type":"messageEnd"}\n',
            ]
        )
    )
    client = backend.client()

    result = await client.send("What does acme do?", "chat-1", [], SELECTION)

    assert result == "Hello"


@pytest.mark.asyncio
async def test_send_handles_records_split_across_chunks():
    backend = FakeChatBackend(
        respond=lambda body: chunked_response(
            [
                '{"type":"mess',
                'age","data":"  Acme builds"}\n{"type":"message","da',
                'ta":" robots.  "}\n{"type":"messageE',
                'nd"}\n',
            ]
        )
    )
    client = backend.client()

    assert await client.send("q", "chat-1", [], SELECTION) == "Acme builds robots."


@pytest.mark.asyncio
async def test_send_ignores_anything_after_message_end():
    backend = FakeChatBackend(
        respond=lambda body: [
            record("message", "done"),
            record("messageEnd"),
            record("message", " and more"),
            record("error", "never seen"),
        ]
    )
    client = backend.client()

    assert await client.send("q", "chat-1", [], SELECTION) == "done"


@pytest.mark.asyncio
async def test_send_returns_partial_answer_when_stream_ends_early():
    backend = FakeChatBackend(
        respond=lambda body: chunked_response(
            ['{"type":"message","data":"partial "}\n', '{"type":"message","data":"answer"}\n']
        )
    )
    client = backend.client()

    assert await client.send("q", "chat-1", [], SELECTION) == "partial answer"


@pytest.mark.asyncio
async def test_send_ignores_unknown_record_types():
    backend = FakeChatBackend(
        respond=lambda body: [
            record("sources", [{"url": "https://acme.io"}]),
            record("message", "ok"),
            record("messageEnd"),
        ]
    )
    client = backend.client()

    assert await client.send("q", "chat-1", [], SELECTION) == "ok"


@pytest.mark.asyncio
async def test_error_record_raises_backend_stream_error():
    backend = FakeChatBackend(
        respond=lambda body: [record("message", "so far"), record("error", "boom")]
    )
    client = backend.client()

    with pytest.raises(BackendStreamError, match="boom"):
        await client.send("q", "chat-1", [], SELECTION)


@pytest.mark.asyncio
async def test_non_2xx_raises_transport_error_with_status_and_body():
    backend = FakeChatBackend(
        respond=lambda body: httpx.Response(503, text="upstream unavailable " + "x" * 500)
    )
    client = backend.client()

    with pytest.raises(TransportError) as excinfo:
        await client.send("q", "chat-1", [], SELECTION)

    message = str(excinfo.value)
    assert excinfo.value.status_code == 503
    assert "Chat API 503" in message
    assert "upstream unavailable" in message
    assert len(message) < 300


@pytest.mark.asyncio
async def test_network_failure_raises_transport_error():
    def fail(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ChatClient(
        "http://backend.test",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(fail)),
    )

    with pytest.raises(TransportError, match="connection refused"):
        await client.send("q", "chat-1", [], SELECTION)


@pytest.mark.asyncio
async def test_request_body_carries_session_history_and_models():
    backend = FakeChatBackend(respond=lambda body: answer("ok"))
    client = backend.client()
    history = [("human", "What does acme do?"), ("assistant", "Robots.")]

    await client.send(
        "Is acme in the Fortune 500 list?",
        "chat-42",
        history,
        SELECTION,
        focus_mode="webSearch",
        optimization_mode="balanced",
        system_instructions="Be terse.",
    )
    await client.send("second", "chat-42", history, SELECTION)

    body = backend.chat_requests[0]
    assert body["content"] == "Is acme in the Fortune 500 list?"
    assert body["chatId"] == "chat-42"
    assert body["message"]["chatId"] == "chat-42"
    assert body["message"]["content"] == body["content"]
    assert len(body["message"]["messageId"]) == 14
    assert body["files"] == []
    assert body["history"] == [["human", "What does acme do?"], ["assistant", "Robots."]]
    assert body["focusMode"] == "webSearch"
    assert body["optimizationMode"] == "balanced"
    assert body["systemInstructions"] == "Be terse."
    assert body["chatModel"] == {"name": "gpt-4o-mini", "provider": "openai"}
    assert body["embeddingModel"] == {
        "name": "xenova-bge-small-en-v1.5",
        "provider": "transformers",
    }
    assert backend.chat_requests[1]["message"]["messageId"] != body["message"]["messageId"]


@pytest.mark.asyncio
async def test_fetch_model_providers_returns_catalogue():
    backend = FakeChatBackend()
    client = backend.client()

    catalogue = await client.fetch_model_providers()

    assert "openai" in catalogue["chatModelProviders"]
    assert backend.catalogue_requests == 1


@pytest.mark.asyncio
async def test_fetch_model_providers_raises_on_http_error():
    backend = FakeChatBackend(catalogue_status=500, catalogue={"error": "down"})
    client = backend.client()

    with pytest.raises(TransportError, match="Failed to fetch models: 500"):
        await client.fetch_model_providers()
