"""AI-assisted task extraction.

- :mod:`~kanbanflow.extract.adapters` — per-provider request building and
  error classification, held in a ``ProviderRegistry``.
- :mod:`~kanbanflow.extract.transport` — the HTTP seam.
- :mod:`~kanbanflow.extract.normalizer` — raw model output to ``CardDraft``.
- :mod:`~kanbanflow.extract.extractor` — ``TaskExtractor`` and smart add.
"""
from __future__ import annotations

from kanbanflow.extract.adapters import (
    GeminiAdapter,
    ProviderAdapter,
    ZhipuAdapter,
    get_adapter,
    provider_registry,
)
from kanbanflow.extract.errors import (
    ExtractionAuthError,
    ExtractionEmptyError,
    ExtractionError,
    ExtractionErrorKind,
    ExtractionModelError,
    ExtractionParseError,
    ExtractionTransportError,
)
from kanbanflow.extract.extractor import TaskExtractor
from kanbanflow.extract.normalizer import normalize_drafts, normalize_response, strip_code_fences
from kanbanflow.extract.registry import (
    ProviderNotFoundError,
    ProviderRegistry,
)
from kanbanflow.extract.transport import (
    ExtractionTransport,
    HttpRequest,
    ProviderResponse,
    RequestsTransport,
    StaticTransport,
)

__all__ = [
    "GeminiAdapter",
    "ProviderAdapter",
    "ZhipuAdapter",
    "get_adapter",
    "provider_registry",
    "ExtractionAuthError",
    "ExtractionEmptyError",
    "ExtractionError",
    "ExtractionErrorKind",
    "ExtractionModelError",
    "ExtractionParseError",
    "ExtractionTransportError",
    "TaskExtractor",
    "normalize_drafts",
    "normalize_response",
    "strip_code_fences",
    "ProviderNotFoundError",
    "ProviderRegistry",
    "ExtractionTransport",
    "HttpRequest",
    "ProviderResponse",
    "RequestsTransport",
    "StaticTransport",
]
