"""Client for the retrieval-augmented chat backend.

The backend answers ``POST /api/chat`` with a newline-delimited JSON stream:

    {"type": "message", "data": "Acme builds "}
    {"type": "message", "data": "industrial robots."}
    {"type": "messageEnd", "messageId": "..."}

``message`` fragments are concatenated, ``messageEnd`` finishes the answer and
``error`` aborts it.
"""

import secrets
from typing import Any

import httpx

from config.settings import settings
from src.chat.errors import BackendStreamError, TransportError
from src.chat.stream import NDJSONDecoder
from src.models.lead import ChatTurn, ModelSelection
from src.utils.logger import get_logger

logger = get_logger("chat_client")

# Characters of an error response body included in TransportError messages
ERROR_BODY_PREVIEW_CHARS = 200


def new_message_id() -> str:
    """Fresh identifier for one request (14 hex chars)."""
    return secrets.token_hex(7)


def new_chat_id() -> str:
    """Fresh session identifier binding one lead's questions together (40 hex chars)."""
    return secrets.token_hex(20)


class ChatClient:
    """Send questions to the chat backend and assemble streamed answers."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        max_buffer_chars: int | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the chat client.

        Args:
            base_url: Backend root URL. Defaults to settings.
            timeout: Per-request timeout in seconds. Defaults to settings.
            max_buffer_chars: Stream decoder bound. Defaults to settings.
            http_client: Pre-built client (tests inject a MockTransport here).
        """
        self.base_url = (base_url or settings.chat_backend_url).rstrip("/")
        self.max_buffer_chars = (
            max_buffer_chars if max_buffer_chars is not None else settings.stream_max_buffer_chars
        )
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.chat_timeout_seconds,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client if we created it."""
        if self._owns_http_client:
            await self._http.aclose()

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def fetch_model_providers(self) -> dict[str, Any]:
        """Fetch the backend's catalogue of chat and embedding models.

        Returns:
            ``{"chatModelProviders": {...}, "embeddingModelProviders": {...}}``
        """
        url = f"{self.base_url}/api/models"
        try:
            response = await self._http.get(url, headers={"Content-Type": "application/json"})
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to fetch models: {e}") from e

        if response.status_code >= 400:
            raise TransportError(
                f"Failed to fetch models: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(f"Model catalogue is not valid JSON: {e}") from e

    def build_payload(
        self,
        question: str,
        chat_id: str,
        history: list[ChatTurn],
        selection: ModelSelection,
        *,
        focus_mode: str | None = None,
        optimization_mode: str | None = None,
        system_instructions: str | None = None,
    ) -> dict[str, Any]:
        """Build the request body for one question."""
        return {
            "content": question,
            "message": {
                "messageId": new_message_id(),
                "chatId": chat_id,
                "content": question,
            },
            "chatId": chat_id,
            "files": [],
            "focusMode": focus_mode or settings.default_focus_mode,
            "optimizationMode": optimization_mode or settings.default_optimization_mode,
            "history": [[role, text] for role, text in history],
            "chatModel": {
                "name": selection.chat_model.name,
                "provider": selection.chat_model.provider,
            },
            "embeddingModel": {
                "name": selection.embedding_model.name,
                "provider": selection.embedding_model.provider,
            },
            "systemInstructions": system_instructions,
        }

    async def send(
        self,
        question: str,
        chat_id: str,
        history: list[ChatTurn],
        selection: ModelSelection,
        *,
        focus_mode: str | None = None,
        optimization_mode: str | None = None,
        system_instructions: str | None = None,
    ) -> str:
        """Ask one question and return the assembled answer.

        Args:
            question: Question text.
            chat_id: Session identifier shared by all of a lead's questions.
            history: Prior (role, text) turns of this session.
            selection: Chat and embedding models to use.
            focus_mode: Backend search mode. Defaults to settings.
            optimization_mode: Backend speed/quality mode. Defaults to settings.
            system_instructions: Optional extra instructions for the backend.

        Returns:
            Answer text with surrounding whitespace stripped. If the stream ends
            without ``messageEnd``, whatever text arrived is returned.

        Raises:
            TransportError: Non-2xx response or network failure.
            BackendStreamError: The stream carried an ``error`` record.
        """
        payload = self.build_payload(
            question,
            chat_id,
            history,
            selection,
            focus_mode=focus_mode,
            optimization_mode=optimization_mode,
            system_instructions=system_instructions,
        )
        url = f"{self.base_url}/api/chat"

        try:
            async with self._http.stream("POST", url, json=payload) as response:
                if response.status_code >= 400:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    tail = f" | body: {body[:ERROR_BODY_PREVIEW_CHARS]}" if body else ""
                    raise TransportError(
                        f"Chat API {response.status_code} {response.reason_phrase}{tail}",
                        status_code=response.status_code,
                    )
                return await self._read_answer(response, chat_id)
        except httpx.HTTPError as e:
            raise TransportError(f"Chat API request failed: {e}") from e

    async def _read_answer(self, response: httpx.Response, chat_id: str) -> str:
        decoder = NDJSONDecoder(max_buffer_chars=self.max_buffer_chars)
        fragments: list[str] = []

        async for chunk in response.aiter_text():
            for record in decoder.feed(chunk):
                if self._apply(record, fragments):
                    return "".join(fragments).strip()

        for record in decoder.close():
            if self._apply(record, fragments):
                return "".join(fragments).strip()

        logger.warning(
            "stream_ended_without_message_end",
            chat_id=chat_id,
            chars=sum(len(f) for f in fragments),
        )
        return "".join(fragments).strip()

    @staticmethod
    def _apply(record: dict[str, Any], fragments: list[str]) -> bool:
        """Apply one stream record; True once the answer is complete."""
        record_type = record.get("type")
        if record_type == "error":
            data = record.get("data")
            raise BackendStreamError(data if isinstance(data, str) else str(data))
        if record_type == "message":
            data = record.get("data")
            if data is not None:
                fragments.append(data if isinstance(data, str) else str(data))
            return False
        return record_type == "messageEnd"
