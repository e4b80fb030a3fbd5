"""Uniform error taxonomy for task extraction.

Whatever the provider and whatever its wire format, a failed extraction
surfaces as exactly one ``ExtractionError`` subclass.  None of them is
fatal: the board is untouched and the user can retry.
"""
from __future__ import annotations

from enum import Enum


class ExtractionErrorKind(Enum):
    """Category of an extraction failure."""

    PARSE_ERROR = "parse_error"
    EMPTY = "empty"
    AUTH_ERROR = "auth_error"
    MODEL_ERROR = "model_error"
    TRANSPORT_ERROR = "transport_error"


class ExtractionError(Exception):
    """Base class for extraction failures.

    Parameters
    ----------
    message:
        Human-readable description, suitable for showing to the user.
    provider:
        Id of the provider involved, when known.
    status:
        HTTP status reported by the provider, when there was one.
    """

    kind: ExtractionErrorKind = ExtractionErrorKind.TRANSPORT_ERROR

    def __init__(self, message: str, provider: str = "", status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider
        self.status = status

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(message={self.message!r}, "
            f"provider={self.provider!r}, status={self.status!r})"
        )


class ExtractionParseError(ExtractionError):
    """The provider answered, but its output could not be parsed."""

    kind = ExtractionErrorKind.PARSE_ERROR


class ExtractionEmptyError(ExtractionError):
    """The provider's output parsed, but contained no usable task."""

    kind = ExtractionErrorKind.EMPTY


class ExtractionAuthError(ExtractionError):
    """The API key is missing, invalid or expired."""

    kind = ExtractionErrorKind.AUTH_ERROR


class ExtractionModelError(ExtractionError):
    """The configured model is unknown to the provider."""

    kind = ExtractionErrorKind.MODEL_ERROR


class ExtractionTransportError(ExtractionError):
    """The request failed in transit or the provider reported another error."""

    kind = ExtractionErrorKind.TRANSPORT_ERROR


__all__ = [
    "ExtractionErrorKind",
    "ExtractionError",
    "ExtractionParseError",
    "ExtractionEmptyError",
    "ExtractionAuthError",
    "ExtractionModelError",
    "ExtractionTransportError",
]
