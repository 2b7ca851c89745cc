"""LLM client for the scoring and field-extraction calls."""

from typing import Any, Literal, NamedTuple, Protocol

from tenacity import retry, stop_after_attempt, wait_exponential

from config.settings import settings
from src.utils.logger import get_logger

logger = get_logger("llm")

Provider = Literal["openai", "anthropic", "deepseek", "gemini"]


class ProviderProfile(NamedTuple):
    settings_key: str
    env_name: str
    default_model: str
    base_url: str | None = None


# DeepSeek and Gemini are reached through their OpenAI-compatible endpoints
PROVIDERS: dict[str, ProviderProfile] = {
    "openai": ProviderProfile("openai_api_key", "OPENAI_API_KEY", "gpt-4o-mini"),
    "anthropic": ProviderProfile(
        "anthropic_api_key", "ANTHROPIC_API_KEY", "claude-3-haiku-20240307"
    ),
    "deepseek": ProviderProfile(
        "deepseek_api_key", "DEEPSEEK_API_KEY", "deepseek-chat", "https://api.deepseek.com/v1"
    ),
    "gemini": ProviderProfile(
        "gemini_api_key",
        "GEMINI_API_KEY",
        "gemini-2.5-flash",
        "https://generativelanguage.googleapis.com/v1beta/openai/",
    ),
}


class TextGenerator(Protocol):
    """Anything that turns a prompt into text (LLMClient, test stubs)."""

    def generate(self, prompt: str, max_tokens: int = ..., temperature: float = ...) -> str: ...


class LLMClient:
    """Synchronous single-prompt client over the configured LLM provider.

    Calls block; async callers run ``generate`` in a worker thread.
    """

    def __init__(self, provider: Provider | None = None, model: str | None = None):
        """Build the SDK client for ``provider``.

        Args:
            provider: One of PROVIDERS. Defaults to ``settings.llm_provider``.
            model: Model name. Defaults to ``settings.llm_model``, then the provider default.

        Raises:
            ValueError: Unknown provider or missing API key.
        """
        self.provider = provider or settings.llm_provider
        profile = PROVIDERS.get(self.provider)
        if profile is None:
            raise ValueError(f"Unknown provider: {self.provider}")

        self.model = model or settings.llm_model or profile.default_model
        self.client = self._build_client(profile)

        logger.info("llm_client_initialized", provider=self.provider, model=self.model)

    def _build_client(self, profile: ProviderProfile) -> Any:
        api_key = getattr(settings, profile.settings_key)
        if not api_key:
            raise ValueError(f"{profile.env_name} not set")

        if self.provider == "anthropic":
            from anthropic import Anthropic

            return Anthropic(api_key=api_key.get_secret_value())

        from openai import OpenAI

        return OpenAI(api_key=api_key.get_secret_value(), base_url=profile.base_url)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        reraise=True,
    )
    def generate(self, prompt: str, max_tokens: int = 800, temperature: float = 0.2) -> str:
        """Send ``prompt`` as a single user message and return the stripped reply.

        Retried up to three times with exponential backoff; the last error is re-raised.
        """
        messages = [{"role": "user", "content": prompt}]

        if self.provider == "anthropic":
            response = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=messages,
            )
            text = "".join(block.text for block in response.content if block.type == "text")
        else:
            response = self.client.chat.completions.create(
                model=self.model,
                max_tokens=max_tokens,
                temperature=temperature,
                messages=messages,
            )
            text = response.choices[0].message.content or ""

        logger.debug("llm_generated", provider=self.provider, chars=len(text))
        return text.strip()
