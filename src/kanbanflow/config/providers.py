"""Catalog of the task-extraction providers kanbanflow knows about."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProviderId(Enum):
    """Identifier of a task-extraction provider."""

    GEMINI = "gemini"
    ZHIPU = "zhipu"


@dataclass(frozen=True)
class ProviderInfo:
    """Static description of a provider.

    Parameters
    ----------
    id:
        Provider identifier.
    name:
        Human-readable name.
    default_model:
        Model used when the user has not picked one.
    endpoint:
        Default endpoint URL.  For Gemini this is the API base URL; for
        OpenAI-compatible providers it is the full chat-completions URL.
    models:
        Models offered in the settings picker.
    """

    id: ProviderId
    name: str
    default_model: str
    endpoint: str
    models: tuple[str, ...]


PROVIDERS: dict[ProviderId, ProviderInfo] = {
    ProviderId.GEMINI: ProviderInfo(
        id=ProviderId.GEMINI,
        name="Google Gemini",
        default_model="gemini-3.0-flash",
        endpoint="https://generativelanguage.googleapis.com",
        models=("gemini-3.0-flash", "gemini-3.0-pro", "gemini-2.5-flash"),
    ),
    ProviderId.ZHIPU: ProviderInfo(
        id=ProviderId.ZHIPU,
        name="Zhipu AI (GLM) - Z.ai Endpoint",
        default_model="glm-4.7",
        endpoint="https://api.z.ai/api/coding/paas/v4/chat/completions",
        models=("glm-4.6", "glm-4.7"),
    ),
}


def provider_info(provider: ProviderId | str) -> ProviderInfo:
    """Return the catalog entry for *provider*.

    Raises
    ------
    ValueError
        If *provider* is not a known provider id.
    """
    return PROVIDERS[ProviderId(provider)]


__all__ = ["ProviderId", "ProviderInfo", "PROVIDERS", "provider_info"]
