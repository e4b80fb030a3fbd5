"""Entity definitions for the kanbanflow board model.

Every entity is a frozen dataclass: a ``BoardState`` value is never
modified after construction, and every engine operation returns a new
value that shares the sub-structures it did not touch.  Mappings held by
the entities (``BoardState.columns``, ``BoardState.cards`` and
``Card.moved_to``) are treated as read-only by all library code.

Two closed enumerations classify cards: ``Priority`` and ``Tag``.  Their
values are the display strings used on the wire (``"Medium"``,
``"Bug"``...), so serialised boards stay readable.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from kanbanflow.errors import ValidationError


def utc_now() -> str:
    """Return the current UTC time as an ISO-8601 string with a ``Z`` suffix.

    The millisecond precision matches the timestamps stored by earlier
    board exports, e.g. ``"2025-01-20T09:15:00.000Z"``.
    """
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Priority(Enum):
    """Urgency of a card."""

    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"

    @classmethod
    def parse(cls, value: object, default: "Priority | None" = None) -> "Priority":
        """Coerce *value* to a ``Priority``.

        Accepts members, their display values and their names (both
        case-insensitively).  Unknown values return *default*, or raise
        ``ValidationError`` when no default is given.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if wanted in (member.value.lower(), member.name.lower()):
                    return member
        if default is not None:
            return default
        raise ValidationError(f"Unknown priority {value!r}", field="priority")


class Tag(Enum):
    """Kind of work a card represents."""

    BUG = "Bug"
    FEATURE = "Feature"
    ENHANCEMENT = "Enhancement"
    LEARNING = "Learning"
    IDEA = "Idea"

    @classmethod
    def parse(cls, value: object, default: "Tag | None" = None) -> "Tag":
        """Coerce *value* to a ``Tag``; see :meth:`Priority.parse`."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if wanted in (member.value.lower(), member.name.lower()):
                    return member
        if default is not None:
            return default
        raise ValidationError(f"Unknown tag {value!r}", field="tag")


def require_title(title: object) -> str:
    """Return *title* unchanged if it is a non-blank string.

    Raises
    ------
    ValidationError
        If *title* is not a string or is empty after trimming.
    """
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Card title must not be blank", field="title")
    return title


# ---------------------------------------------------------------------------
# Cards
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CardDraft:
    """An unsaved candidate card, before id and timestamps are assigned.

    Parameters
    ----------
    title:
        Display title; must not be blank.
    description:
        Free text, may be empty.
    priority:
        Card priority.  Manual drafts default to ``Priority.NONE``.
    tag:
        Card tag.  Defaults to ``Tag.FEATURE``.
    due_date:
        Optional ISO date string; stored verbatim.
    """

    title: str
    description: str = ""
    priority: Priority = Priority.NONE
    tag: Tag = Tag.FEATURE
    due_date: str = ""

    def __post_init__(self) -> None:
        require_title(self.title)


@dataclass(frozen=True)
class Card:
    """A unit of work placed on the board.

    Parameters
    ----------
    id:
        Opaque unique identifier, immutable once assigned.
    title:
        Display title; must not be blank.
    description:
        Free text.
    priority:
        One of the ``Priority`` members.
    tag:
        One of the ``Tag`` members.
    due_date:
        ISO date string or ``""``.  No calendar validation is performed.
    created_at:
        Creation timestamp; never changed by edits.
    moved_to:
        Column id -> timestamp of the card's most recent arrival in that
        column.  Entries are added or overwritten, never removed.
    """

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.NONE
    tag: Tag = Tag.FEATURE
    due_date: str = ""
    created_at: str = ""
    moved_to: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        require_title(self.title)

    @property
    def last_moved_at(self) -> str | None:
        """Return the most recent arrival timestamp across all columns."""
        if not self.moved_to:
            return None
        return max(self.moved_to.values())

    def to_draft(self) -> CardDraft:
        """Return the editable fields of this card as a ``CardDraft``."""
        return CardDraft(
            title=self.title,
            description=self.description,
            priority=self.priority,
            tag=self.tag,
            due_date=self.due_date,
        )


# ---------------------------------------------------------------------------
# Columns and the board aggregate
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Column:
    """An ordered bucket of card ids.

    Parameters
    ----------
    id:
        Stable column identifier.
    title:
        Display label.
    card_ids:
        Card ids in on-screen order.
    """

    id: str
    title: str
    card_ids: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence but store a tuple.
        if not isinstance(self.card_ids, tuple):
            object.__setattr__(self, "card_ids", tuple(self.card_ids))

    def __len__(self) -> int:
        return len(self.card_ids)

    def with_card_ids(self, card_ids: tuple[str, ...] | list[str]) -> "Column":
        """Return a copy of this column holding *card_ids*."""
        return Column(id=self.id, title=self.title, card_ids=tuple(card_ids))


@dataclass(frozen=True)
class BoardState:
    """The aggregate root: columns, cards and column display order.

    Parameters
    ----------
    columns:
        Column id -> ``Column``.
    cards:
        Card id -> ``Card``.
    column_order:
        Left-to-right display order; a permutation of ``columns``' keys.
    """

    columns: Mapping[str, Column] = field(default_factory=dict)
    cards: Mapping[str, Card] = field(default_factory=dict)
    column_order: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.column_order, tuple):
            object.__setattr__(self, "column_order", tuple(self.column_order))

    def ordered_columns(self) -> list[Column]:
        """Return the columns in display order, skipping unknown ids."""
        return [self.columns[cid] for cid in self.column_order if cid in self.columns]

    def cards_in(self, column_id: str) -> list[Card]:
        """Return the resolved cards of *column_id* in on-screen order.

        Dangling ids are skipped.
        """
        column = self.columns[column_id]
        return [self.cards[cid] for cid in column.card_ids if cid in self.cards]

    @property
    def card_count(self) -> int:
        """Return the number of cards on the board."""
        return len(self.cards)


__all__ = [
    "utc_now",
    "require_title",
    "Priority",
    "Tag",
    "CardDraft",
    "Card",
    "Column",
    "BoardState",
]
