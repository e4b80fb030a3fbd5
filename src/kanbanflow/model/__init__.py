"""Board entity model: cards, columns, the board aggregate and its defaults."""
from __future__ import annotations

from kanbanflow.model.defaults import (
    DEFAULT_COLUMN_ID,
    DEFAULT_COLUMNS,
    default_board,
    sample_board,
)
from kanbanflow.model.entities import (
    BoardState,
    Card,
    CardDraft,
    Column,
    Priority,
    Tag,
    require_title,
    utc_now,
)

__all__ = [
    "BoardState",
    "Card",
    "CardDraft",
    "Column",
    "Priority",
    "Tag",
    "require_title",
    "utc_now",
    "DEFAULT_COLUMN_ID",
    "DEFAULT_COLUMNS",
    "default_board",
    "sample_board",
]
