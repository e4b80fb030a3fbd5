"""Transport contract for extraction requests.

The extraction pipeline never talks to the network directly.  A
provider adapter describes the call as an ``HttpRequest``; an
``ExtractionTransport`` performs it and reports a ``ProviderResponse``,
which is either an HTTP answer (any status) or a transport failure.
Transports never raise for network problems.

Two transports are included:

- ``RequestsTransport`` performs real HTTP calls with ``requests``.
- ``StaticTransport`` replays canned responses and records the requests
  it received; it is used in tests and for offline runs.
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpRequest:
    """A JSON POST request built by a provider adapter."""

    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    json_body: Mapping[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderResponse:
    """Outcome of sending an ``HttpRequest``.

    Parameters
    ----------
    status:
        HTTP status code, or ``None`` when no response was received.
    body:
        Raw response body text.
    error:
        Description of the transport failure, when there was one.
    """

    status: int | None = None
    body: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Return True for a received 2xx response."""
        return self.error is None and self.status is not None and 200 <= self.status < 300

    def json(self) -> object:
        """Decode the body as JSON (raises ``json.JSONDecodeError``)."""
        return json.loads(self.body)

    @classmethod
    def from_payload(cls, payload: object, status: int = 200) -> "ProviderResponse":
        """Build a response whose body is *payload* encoded as JSON."""
        return cls(status=status, body=json.dumps(payload))

    @classmethod
    def failure(cls, error: str) -> "ProviderResponse":
        """Build a transport-failure response."""
        return cls(status=None, body="", error=error)


@runtime_checkable
class ExtractionTransport(Protocol):
    """Protocol for objects that can send an ``HttpRequest``."""

    def send(self, request: HttpRequest, timeout: float) -> ProviderResponse:
        """Send *request* and return the outcome; must not raise for I/O errors."""
        ...  # pragma: no cover


class RequestsTransport:
    """HTTP transport backed by a ``requests.Session``.

    Parameters
    ----------
    session:
        Session to use; a new one is created when omitted.
    """

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()

    def send(self, request: HttpRequest, timeout: float) -> ProviderResponse:
        try:
            response = self._session.post(
                request.url,
                headers=dict(request.headers),
                json=dict(request.json_body),
                timeout=timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Extraction request to %s failed: %s", request.url, exc)
            return ProviderResponse.failure(str(exc) or type(exc).__name__)

        if not response.ok:
            logger.warning(
                "Extraction request to %s returned HTTP %d", request.url, response.status_code
            )
        return ProviderResponse(status=response.status_code, body=response.text)

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()


class StaticTransport:
    """Deterministic transport that replays canned responses.

    Responses are returned in order; the last one is repeated once the
    list is exhausted.  Every request is recorded in ``requests``.

    Parameters
    ----------
    responses:
        ``ProviderResponse`` objects to replay.
    """

    def __init__(self, responses: Iterable[ProviderResponse]) -> None:
        self._responses = list(responses)
        if not self._responses:
            raise ValueError("StaticTransport needs at least one response")
        self.requests: list[HttpRequest] = []

    def send(self, request: HttpRequest, timeout: float) -> ProviderResponse:
        self.requests.append(request)
        index = min(len(self.requests), len(self._responses)) - 1
        return self._responses[index]

    @property
    def call_count(self) -> int:
        """Return the number of requests sent so far."""
        return len(self.requests)


__all__ = [
    "HttpRequest",
    "ProviderResponse",
    "ExtractionTransport",
    "RequestsTransport",
    "StaticTransport",
]
