"""Model provider resolution.

The chat backend publishes its catalogue as
``{"chatModelProviders": {provider: {model: ...}}, "embeddingModelProviders": {...}}``.
``resolve_providers`` turns that catalogue plus the caller's (optional) request
into one ``ModelSelection`` for a whole batch. It holds no state and performs
no I/O, so the orchestrator fetches the catalogue, resolves once and passes the
selection down explicitly.
"""

from typing import Any, Mapping

from src.chat.errors import ConfigurationError
from src.models.lead import ModelRef, ModelSelection


def _models(catalogue: Mapping[str, Any], provider: str) -> list[str]:
    models = catalogue.get(provider) or {}
    return list(models.keys()) if isinstance(models, Mapping) else []


def _is_available(catalogue: Mapping[str, Any], ref: ModelRef) -> bool:
    return ref.name in _models(catalogue, ref.provider)


def _first_available(catalogue: Mapping[str, Any], kind: str) -> ModelRef:
    """Pick the first provider that lists at least one model, and its first model."""
    if not catalogue:
        raise ConfigurationError(f"No {kind} models available")

    for provider in catalogue:
        models = _models(catalogue, provider)
        if models:
            return ModelRef(provider=provider, name=models[0])

    raise ConfigurationError(
        f"No {kind} model providers configured. "
        "Please configure them from the settings page or config file."
    )


def resolve_model(
    catalogue: Mapping[str, Any] | None,
    requested: ModelRef | None,
    kind: str,
) -> ModelRef:
    """Return ``requested`` if the catalogue lists it, else the first available model."""
    catalogue = catalogue or {}
    if requested is not None and _is_available(catalogue, requested):
        return requested
    return _first_available(catalogue, kind)


def resolve_providers(
    available: Mapping[str, Any],
    requested_chat: ModelRef | None = None,
    requested_embedding: ModelRef | None = None,
) -> ModelSelection:
    """Resolve chat and embedding models for a batch.

    Args:
        available: Provider catalogue as returned by the chat backend.
        requested_chat: Caller's preferred chat model, if any.
        requested_embedding: Caller's preferred embedding model, if any.

    Returns:
        The resolved selection.

    Raises:
        ConfigurationError: A catalogue section is missing or lists no models.
    """
    return ModelSelection(
        chat_model=resolve_model(available.get("chatModelProviders"), requested_chat, "chat"),
        embedding_model=resolve_model(
            available.get("embeddingModelProviders"), requested_embedding, "embedding"
        ),
    )
