"""Error types for the kanbanflow board engine.

Every failure raised by a core operation derives from ``KanbanError`` so
that hosting code can catch the whole family in one place.  Operations
never leave a partially-updated board behind: when one of these errors
is raised, the caller's ``BoardState`` is exactly what it was before the
call.

Extraction failures live in :mod:`kanbanflow.extract.errors` because
they describe a provider round-trip rather than a board operation.
"""
from __future__ import annotations


class KanbanError(Exception):
    """Base class for all board-engine errors."""


class ValidationError(KanbanError, ValueError):
    """Raised when an operation is refused because its input is invalid.

    Parameters
    ----------
    message:
        Human-readable description of what was rejected.
    field:
        Name of the offending field, when a single field is at fault.
    """

    def __init__(self, message: str, field: str = "") -> None:
        super().__init__(message)
        self.field = field


class InvalidMoveError(ValidationError):
    """Raised when a move intent does not match the board it targets."""


class ImportFormatError(ValidationError):
    """Raised when an import document fails shape validation.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    format_name:
        ``"json"``, ``"yaml"`` or ``"csv"``.
    """

    def __init__(self, message: str, format_name: str = "json") -> None:
        super().__init__(message)
        self.format_name = format_name

    def __str__(self) -> str:
        return f"Invalid {self.format_name} import: {self.args[0]}"


class CardNotFoundError(KanbanError, KeyError):
    """Raised when an operation targets a card id absent from the board."""

    def __init__(self, card_id: str) -> None:
        self.card_id = card_id
        super().__init__(f"Card {card_id!r} does not exist on this board.")

    def __str__(self) -> str:
        return str(self.args[0])


class ColumnNotFoundError(KanbanError, KeyError):
    """Raised when an operation targets a column id absent from the board."""

    def __init__(self, column_id: str) -> None:
        self.column_id = column_id
        super().__init__(f"Column {column_id!r} does not exist on this board.")

    def __str__(self) -> str:
        return str(self.args[0])


__all__ = [
    "KanbanError",
    "ValidationError",
    "InvalidMoveError",
    "ImportFormatError",
    "CardNotFoundError",
    "ColumnNotFoundError",
]
