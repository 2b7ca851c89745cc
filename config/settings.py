"""Application settings using Pydantic Settings."""

from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Chat backend (retrieval-augmented, streaming)
    chat_backend_url: str = Field(default="http://localhost:3000")
    chat_timeout_seconds: float = Field(default=120.0)
    default_focus_mode: str = Field(default="webSearch")
    default_optimization_mode: str = Field(default="speed")
    stream_max_buffer_chars: int = Field(default=1_000_000)

    # Pacing between backend calls
    question_delay_seconds: float = Field(default=2.0, ge=0)
    lead_delay_seconds: float = Field(default=3.0, ge=0)

    # LLM API Keys (scoring and field extraction)
    openai_api_key: SecretStr | None = Field(default=None)
    anthropic_api_key: SecretStr | None = Field(default=None)
    deepseek_api_key: SecretStr | None = Field(default=None)
    gemini_api_key: SecretStr | None = Field(default=None)

    # LLM Settings
    llm_provider: Literal["openai", "anthropic", "deepseek", "gemini"] = Field(default="gemini")
    llm_model: str = Field(default="")

    # Batch limits
    max_emails_per_batch: int = Field(default=50)

    # API Settings
    api_host: str = Field(default="0.0.0.0")
    api_port: int = Field(default=8000)
    cors_origins: list[str] = Field(default=["http://localhost:3000"])
    requests_per_minute: int = Field(default=10)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: Literal["console", "json"] = Field(default="console")


settings = Settings()
