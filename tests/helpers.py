"""Fakes shared by the enrichment tests."""

import json
from typing import Any, Callable, Iterable

import httpx

from src.chat.client import ChatClient
from src.models.lead import ModelRef, ModelSelection

BACKEND_URL = "http://backend.test"

DEFAULT_CATALOGUE = {
    "chatModelProviders": {
        "openai": {"gpt-4o-mini": {"displayName": "GPT 4 omni mini"}},
        "ollama": {"llama3": {"displayName": "Llama 3"}},
    },
    "embeddingModelProviders": {
        "transformers": {"xenova-bge-small-en-v1.5": {"displayName": "BGE Small"}},
    },
}

SELECTION = ModelSelection(
    chat_model=ModelRef(provider="openai", name="gpt-4o-mini"),
    embedding_model=ModelRef(provider="transformers", name="xenova-bge-small-en-v1.5"),
)


def record(record_type: str, data: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": record_type}
    if data is not None:
        payload["data"] = data
    return payload


def ndjson(records: Iterable[dict[str, Any]]) -> str:
    return "".join(json.dumps(r) + "\n" for r in records)


def chunked_response(chunks: Iterable[str], status_code: int = 200) -> httpx.Response:
    """Response whose body arrives in exactly the given slices."""

    async def body():
        for chunk in chunks:
            yield chunk.encode("utf-8")

    return httpx.Response(status_code, content=body())


def answer(text: str) -> list[dict[str, Any]]:
    return [record("message", text), record("messageEnd")]


class FakeChatBackend:
    """In-memory chat backend behind an httpx MockTransport.

    ``respond`` receives the decoded chat request body and returns either a
    list of stream records or a ready-made ``httpx.Response``.
    """

    def __init__(
        self,
        respond: Callable[[dict[str, Any]], Any] | None = None,
        catalogue: dict[str, Any] | None = None,
        catalogue_status: int = 200,
    ):
        self.respond = respond or (lambda body: answer(f"answer to: {body['content']}"))
        self.catalogue = DEFAULT_CATALOGUE if catalogue is None else catalogue
        self.catalogue_status = catalogue_status
        self.chat_requests: list[dict[str, Any]] = []
        self.catalogue_requests = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/models":
            self.catalogue_requests += 1
            return httpx.Response(self.catalogue_status, json=self.catalogue)

        body = json.loads(request.content)
        self.chat_requests.append(body)
        result = self.respond(body)
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, content=ndjson(result))

    @property
    def total_requests(self) -> int:
        return self.catalogue_requests + len(self.chat_requests)

    def client(self, **kwargs) -> ChatClient:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return ChatClient(BACKEND_URL, http_client=http_client, **kwargs)


class StubLLM:
    """Deterministic stand-in for LLMClient; an Exception entry is raised."""

    def __init__(self, responses: list[Any]):
        self._responses = responses
        self.prompts: list[str] = []

    def generate(self, prompt: str, max_tokens: int = 800, temperature: float = 0.2) -> str:
        idx = min(len(self.prompts), len(self._responses) - 1)
        self.prompts.append(prompt)
        response = self._responses[idx]
        if isinstance(response, Exception):
            raise response
        return response


class RecordingSleep:
    """Awaitable sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
