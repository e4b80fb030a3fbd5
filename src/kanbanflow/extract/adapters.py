"""Provider adapters: request building and failure classification per provider.

An adapter knows three things about its provider:

- how to phrase an extraction call as an ``HttpRequest``;
- where the model's answer lives in a successful response payload;
- how the provider reports errors, so that any failure can be mapped to
  the uniform ``ExtractionError`` taxonomy.

Classification prefers structured fields of the provider's error
envelope (status names, reason codes, numeric codes).  Substring
matching on the error message is only a fallback for envelopes that
carry no structured hint.
"""
from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping

from kanbanflow.config.providers import ProviderId, provider_info
from kanbanflow.config.settings import ProviderSettings
from kanbanflow.extract.errors import (
    ExtractionAuthError,
    ExtractionError,
    ExtractionModelError,
    ExtractionParseError,
    ExtractionTransportError,
)
from kanbanflow.extract.prompts import (
    JSON_ONLY_SYSTEM_PROMPT,
    SCHEMA_SYSTEM_PROMPT,
    TASK_LIST_SCHEMA,
)
from kanbanflow.extract.registry import ProviderRegistry
from kanbanflow.extract.transport import HttpRequest

INVALID_KEY_MESSAGE = "Invalid API Key. Please update it in Settings."
EXPIRED_TOKEN_MESSAGE = "API Token expired or incorrect. Please update your API Key in Settings."

_AUTH_HTTP_STATUSES = frozenset({401, 403})


def _error_envelope(body: str) -> Mapping[str, object] | None:
    """Return the ``error`` object of a JSON error body, if there is one."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, TypeError):
        match = re.search(r"\{.*\}", body or "", re.DOTALL)
        if not match:
            return None
        try:
            data = json.loads(match.group())
        except json.JSONDecodeError:
            return None
    if isinstance(data, list) and data and isinstance(data[0], Mapping):
        data = data[0]
    if isinstance(data, Mapping) and isinstance(data.get("error"), Mapping):
        return data["error"]  # type: ignore[return-value]
    return None


class ProviderAdapter(ABC):
    """Base class for provider adapters."""

    provider_id: ProviderId

    @abstractmethod
    def build_request(self, settings: ProviderSettings, text: str) -> HttpRequest:
        """Return the HTTP request that asks the provider to extract tasks from *text*."""

    @abstractmethod
    def extract_text(self, payload: object) -> str:
        """Return the model's answer text from a successful response payload."""

    @abstractmethod
    def classify_failure(self, status: int | None, body: str) -> ExtractionError:
        """Map a non-2xx response to an ``ExtractionError``."""

    @property
    def name(self) -> str:
        return provider_info(self.provider_id).name

    def _transport_error(self, status: int | None, body: str, message: str = "") -> ExtractionError:
        detail = message or f"API Error: {status}. Response: {body[:300]}"
        return ExtractionTransportError(detail, provider=self.provider_id.value, status=status)


provider_registry: ProviderRegistry[ProviderAdapter] = ProviderRegistry(ProviderAdapter)


# ---------------------------------------------------------------------------
# Google Gemini
# ---------------------------------------------------------------------------


@provider_registry.register(ProviderId.GEMINI.value)
class GeminiAdapter(ProviderAdapter):
    """Google Generative Language API (``models/{model}:generateContent``)."""

    provider_id = ProviderId.GEMINI

    _AUTH_REASONS = frozenset({"API_KEY_INVALID", "API_KEY_EXPIRED", "ACCESS_TOKEN_EXPIRED"})
    _AUTH_STATUSES = frozenset({"UNAUTHENTICATED", "PERMISSION_DENIED"})

    def build_request(self, settings: ProviderSettings, text: str) -> HttpRequest:
        base = settings.effective_endpoint.rstrip("/")
        url = f"{base}/v1beta/models/{settings.effective_model}:generateContent"
        return HttpRequest(
            url=url,
            headers={"x-goog-api-key": settings.api_key.strip(), "Content-Type": "application/json"},
            json_body={
                "systemInstruction": {"parts": [{"text": SCHEMA_SYSTEM_PROMPT}]},
                "contents": [{"role": "user", "parts": [{"text": text}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": TASK_LIST_SCHEMA,
                },
            },
        )

    def extract_text(self, payload: object) -> str:
        if not isinstance(payload, Mapping):
            raise ExtractionParseError(
                "Unexpected response shape from Gemini", provider=self.provider_id.value
            )
        candidates = payload.get("candidates") or []
        if not isinstance(candidates, list) or not candidates:
            return ""
        content = candidates[0].get("content") if isinstance(candidates[0], Mapping) else None
        parts = content.get("parts") if isinstance(content, Mapping) else None
        if not isinstance(parts, list):
            return ""
        return "".join(
            str(part.get("text") or "") for part in parts if isinstance(part, Mapping)
        )

    def classify_failure(self, status: int | None, body: str) -> ExtractionError:
        pid = self.provider_id.value
        envelope = _error_envelope(body)
        if envelope is not None:
            status_name = str(envelope.get("status", ""))
            details = envelope.get("details") or []
            reasons = {
                str(d.get("reason", "")) for d in details if isinstance(d, Mapping)
            } if isinstance(details, list) else set()
            message = str(envelope.get("message", ""))

            if reasons & self._AUTH_REASONS or status_name in self._AUTH_STATUSES:
                return ExtractionAuthError(INVALID_KEY_MESSAGE, provider=pid, status=status)
            if status_name == "NOT_FOUND":
                return ExtractionModelError(
                    message or "Unknown model. Please pick a supported model in Settings.",
                    provider=pid,
                    status=status,
                )
            if message:
                lowered = message.lower()
                if "api key not valid" in lowered or "api_key_invalid" in lowered:
                    return ExtractionAuthError(INVALID_KEY_MESSAGE, provider=pid, status=status)
                if status in _AUTH_HTTP_STATUSES:
                    return ExtractionAuthError(message, provider=pid, status=status)
                return self._transport_error(status, body, message)

        lowered = (body or "").lower()
        if status in _AUTH_HTTP_STATUSES or "api key not valid" in lowered:
            return ExtractionAuthError(INVALID_KEY_MESSAGE, provider=pid, status=status)
        if status == 404:
            return ExtractionModelError(
                "Unknown model. Please pick a supported model in Settings.",
                provider=pid,
                status=status,
            )
        return self._transport_error(status, body)


# ---------------------------------------------------------------------------
# Zhipu AI (OpenAI-compatible chat completions)
# ---------------------------------------------------------------------------


@provider_registry.register(ProviderId.ZHIPU.value)
class ZhipuAdapter(ProviderAdapter):
    """Zhipu GLM models behind an OpenAI-compatible ``chat/completions`` endpoint."""

    provider_id = ProviderId.ZHIPU

    # Zhipu business codes: 1000-1004 are authentication failures,
    # 1211 is "model does not exist".
    _AUTH_CODES = frozenset({"1000", "1001", "1002", "1003", "1004"})
    _UNKNOWN_MODEL_CODE = "1211"
    _AUTH_HINTS = ("invalid", "expired", "unauthorized")

    @staticmethod
    def sanitize_api_key(api_key: str) -> str:
        """Strip whitespace and non-ASCII characters that would break the header."""
        return re.sub(r"[^\x00-\x7F]", "", api_key.strip())

    def build_request(self, settings: ProviderSettings, text: str) -> HttpRequest:
        api_key = self.sanitize_api_key(settings.api_key)
        if not api_key:
            raise ExtractionAuthError(
                "Invalid API Key format. Please check your settings.",
                provider=self.provider_id.value,
            )
        return HttpRequest(
            url=settings.effective_endpoint,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            json_body={
                "model": settings.effective_model.strip().lower(),
                "messages": [
                    {"role": "system", "content": JSON_ONLY_SYSTEM_PROMPT},
                    {"role": "user", "content": text},
                ],
                "temperature": 0.1,
                "stream": False,
            },
        )

    def extract_text(self, payload: object) -> str:
        if not isinstance(payload, Mapping):
            raise ExtractionParseError(
                "Unexpected response shape from Zhipu", provider=self.provider_id.value
            )
        choices = payload.get("choices") or []
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
            return ""
        message = choices[0].get("message")
        if not isinstance(message, Mapping):
            return ""
        return str(message.get("content") or "")

    def classify_failure(self, status: int | None, body: str) -> ExtractionError:
        pid = self.provider_id.value
        envelope = _error_envelope(body)
        if envelope is not None:
            code = str(envelope.get("code", ""))
            error_type = str(envelope.get("type", ""))
            message = str(envelope.get("message", ""))
            lowered = message.lower()

            if code == self._UNKNOWN_MODEL_CODE:
                return ExtractionModelError(
                    "Unknown model. Please select glm-4.7 in Settings.", provider=pid, status=status
                )
            if code in self._AUTH_CODES or error_type == "invalid_api_key":
                return ExtractionAuthError(EXPIRED_TOKEN_MESSAGE, provider=pid, status=status)
            # No structured hint: fall back to the message text.
            if "unknown model" in lowered:
                return ExtractionModelError(
                    "Unknown model. Please select glm-4.7 in Settings.", provider=pid, status=status
                )
            if any(hint in lowered for hint in self._AUTH_HINTS):
                return ExtractionAuthError(EXPIRED_TOKEN_MESSAGE, provider=pid, status=status)
            if status in _AUTH_HTTP_STATUSES:
                return ExtractionAuthError(EXPIRED_TOKEN_MESSAGE, provider=pid, status=status)
            if message:
                return self._transport_error(status, body, message)

        if status in _AUTH_HTTP_STATUSES:
            return ExtractionAuthError(EXPIRED_TOKEN_MESSAGE, provider=pid, status=status)
        if status == 404:
            return ExtractionModelError(
                "Unknown model. Please select glm-4.7 in Settings.", provider=pid, status=status
            )
        return self._transport_error(status, body)


def get_adapter(provider: ProviderId | str) -> ProviderAdapter:
    """Return a new adapter instance for *provider*.

    Ids other than the built-in ones are looked up among installed
    ``kanbanflow.providers`` entry-points.

    Raises
    ------
    ProviderNotFoundError
        If no adapter is known for *provider*.
    """
    name = provider.value if isinstance(provider, ProviderId) else provider
    return provider_registry.get(name)()


__all__ = [
    "EXPIRED_TOKEN_MESSAGE",
    "INVALID_KEY_MESSAGE",
    "GeminiAdapter",
    "ProviderAdapter",
    "ZhipuAdapter",
    "get_adapter",
    "provider_registry",
]
