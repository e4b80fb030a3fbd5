"""Move engine: reorder a card within a column or transfer it between columns.

A move is described by the source column and index the card is taken
from and the destination column and index it is dropped at.  The result
is always a new ``BoardState``; the input is never modified.

Cross-column transfers stamp ``Card.moved_to[dest] = now``.  Same-column
reorders leave the history alone because the card did not change
location.

Usage
-----
::

    from kanbanflow.engine.moves import MoveIntent, apply_move, move

    board = move(board, "todo", 0, "inProgress", 0, "card-3")
    board = apply_move(board, MoveIntent("inProgress", 0, "done", 0, "card-3"))
    board = apply_move(board, None)  # cancelled drop: unchanged
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from kanbanflow.errors import ColumnNotFoundError, InvalidMoveError
from kanbanflow.model.entities import BoardState, utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoveIntent:
    """A requested relocation of one card.

    Parameters
    ----------
    source_column_id:
        Column the card is taken from.
    source_index:
        Position of the card in the source column.
    dest_column_id:
        Column the card is dropped into.
    dest_index:
        Position the card should occupy in the destination column.
    card_id:
        Id of the moved card.
    """

    source_column_id: str
    source_index: int
    dest_column_id: str
    dest_index: int
    card_id: str

    @property
    def is_identity(self) -> bool:
        """Return True if the card is dropped exactly where it was picked up."""
        return (
            self.source_column_id == self.dest_column_id
            and self.source_index == self.dest_index
        )


def move(
    board: BoardState,
    source_column_id: str,
    source_index: int,
    dest_column_id: str,
    dest_index: int,
    card_id: str,
    *,
    now: str | None = None,
) -> BoardState:
    """Return a new board with *card_id* relocated.

    Parameters
    ----------
    board:
        The current board.
    source_column_id, source_index:
        Where the card currently sits.
    dest_column_id, dest_index:
        Where the card should end up.  An index past the end of the
        destination column appends.
    card_id:
        The moved card; must sit at ``source_index``.
    now:
        Timestamp for the ``moved_to`` stamp.  Defaults to ``utc_now()``.

    Returns
    -------
    BoardState
        The input board itself for an identity move, otherwise a new board.

    Raises
    ------
    ColumnNotFoundError
        If either column does not exist.
    InvalidMoveError
        If an index is negative or ``card_id`` is not at ``source_index``.
    """
    # Identity drops must not touch anything, including movement history.
    if source_column_id == dest_column_id and source_index == dest_index:
        return board

    for column_id in (source_column_id, dest_column_id):
        if column_id not in board.columns:
            raise ColumnNotFoundError(column_id)
    if source_index < 0 or dest_index < 0:
        raise InvalidMoveError("Move indices must not be negative", field="index")

    source = board.columns[source_column_id]
    if source_index >= len(source.card_ids) or source.card_ids[source_index] != card_id:
        raise InvalidMoveError(
            f"Card {card_id!r} is not at position {source_index} of column "
            f"{source_column_id!r}",
            field="source_index",
        )

    source_ids = list(source.card_ids)
    del source_ids[source_index]

    if source_column_id == dest_column_id:
        source_ids.insert(dest_index, card_id)
        columns = dict(board.columns)
        columns[source_column_id] = source.with_card_ids(source_ids)
        return replace(board, columns=columns)

    dest = board.columns[dest_column_id]
    dest_ids = list(dest.card_ids)
    dest_ids.insert(dest_index, card_id)

    columns = dict(board.columns)
    columns[source_column_id] = source.with_card_ids(source_ids)
    columns[dest_column_id] = dest.with_card_ids(dest_ids)

    card = board.cards.get(card_id)
    if card is None:
        # Lenient path: relocate the id but there is no card to stamp.
        logger.warning(
            "Moved dangling card id %r from %r to %r without a history stamp",
            card_id,
            source_column_id,
            dest_column_id,
        )
        return replace(board, columns=columns)

    moved_to = dict(card.moved_to)
    moved_to[dest_column_id] = now if now is not None else utc_now()
    cards = dict(board.cards)
    cards[card_id] = replace(card, moved_to=moved_to)
    return replace(board, columns=columns, cards=cards)


def apply_move(
    board: BoardState,
    intent: MoveIntent | None,
    *,
    now: str | None = None,
) -> BoardState:
    """Apply a drag-gesture *intent*; ``None`` (cancelled drop) is a no-op."""
    if intent is None:
        return board
    return move(
        board,
        intent.source_column_id,
        intent.source_index,
        intent.dest_column_id,
        intent.dest_index,
        intent.card_id,
        now=now,
    )


def locate_card(board: BoardState, card_id: str) -> tuple[str, int] | None:
    """Return ``(column_id, index)`` of *card_id*, or None if it is on no column.

    Columns are searched in display order.
    """
    for column in board.ordered_columns():
        if card_id in column.card_ids:
            return column.id, column.card_ids.index(card_id)
    return None


__all__ = ["MoveIntent", "move", "apply_move", "locate_card"]
