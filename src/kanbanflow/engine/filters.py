"""Filter view: a read-only projection of a board narrowed by a query.

``filter_board`` keeps every column, the column order and the full card
map; only each column's ``card_ids`` shrinks to the ids whose card
matches the query.
"""
from __future__ import annotations

from dataclasses import dataclass, replace

from kanbanflow.model.entities import BoardState, Card, Priority, Tag


@dataclass(frozen=True)
class BoardQuery:
    """Search text plus optional priority and tag filters.

    Parameters
    ----------
    text:
        Case-insensitive substring searched in the title or the
        description.  Empty text matches every card.
    priority:
        When set, only cards with exactly this priority match.
    tag:
        When set, only cards with exactly this tag match.
    """

    text: str = ""
    priority: Priority | None = None
    tag: Tag | None = None

    @property
    def is_empty(self) -> bool:
        return not self.text and self.priority is None and self.tag is None

    def matches(self, card: Card) -> bool:
        """Return True if *card* satisfies every part of the query."""
        needle = self.text.lower()
        if needle and needle not in card.title.lower() and needle not in card.description.lower():
            return False
        if self.priority is not None and card.priority != self.priority:
            return False
        if self.tag is not None and card.tag != self.tag:
            return False
        return True


def filter_board(board: BoardState, query: BoardQuery) -> BoardState:
    """Return a projection of *board* whose columns only list matching cards.

    Dangling ids (no resolved card) never match.  ``board.cards`` and
    ``board.column_order`` are passed through unchanged.
    """
    columns = dict(board.columns)
    for column_id in board.column_order:
        column = board.columns[column_id]
        kept = [
            card_id
            for card_id in column.card_ids
            if card_id in board.cards and query.matches(board.cards[card_id])
        ]
        columns[column_id] = column.with_card_ids(kept)
    return replace(board, columns=columns)


__all__ = ["BoardQuery", "filter_board"]
