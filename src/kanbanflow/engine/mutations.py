"""Mutation operations: create, edit, delete and bulk-insert cards.

Each operation takes a ``BoardState`` and returns a new one; inputs are
never modified and a failed operation leaves nothing half-applied.

Not-found policy
----------------
- ``update_card`` on an unknown id raises ``CardNotFoundError``: an edit
  of a card that no longer exists is a caller bug worth surfacing.
- ``delete_card`` on an unknown id is a silent no-op: the end state the
  caller asked for already holds.
- ``create_card``, ``clear_column`` and ``bulk_insert`` on an unknown
  column raise ``ColumnNotFoundError``.

Card ids
--------
New ids are ``card-<epoch-ms>`` for a single create and
``card-<epoch-ms>-<index>`` for each item of a bulk insert, where the
epoch is taken from the operation's timestamp.  If a candidate id is
already on the board, or was handed out earlier in this process (even if
that card has since been deleted), a ``-<n>`` suffix is appended until it
is unique.  Ids are therefore never reused within a session.
"""
from __future__ import annotations

import time
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime

from kanbanflow.errors import CardNotFoundError, ColumnNotFoundError, ValidationError
from kanbanflow.model.entities import BoardState, Card, CardDraft, require_title, utc_now


def _epoch_ms(stamp: str) -> int:
    """Return *stamp* as milliseconds since the epoch (current time if unparsable)."""
    try:
        return int(datetime.fromisoformat(stamp.replace("Z", "+00:00")).timestamp() * 1000)
    except ValueError:
        return time.time_ns() // 1_000_000


# Every id handed out by this process; deleted ids stay here.
_issued_ids: set[str] = set()


def _unique_id(candidate: str, taken: Mapping[str, object] | set[str]) -> str:
    card_id = candidate
    suffix = 0
    while card_id in taken or card_id in _issued_ids:
        suffix += 1
        card_id = f"{candidate}-{suffix}"
    _issued_ids.add(card_id)
    return card_id


def _card_from_draft(card_id: str, draft: CardDraft, column_id: str, now: str) -> Card:
    return Card(
        id=card_id,
        title=draft.title,
        description=draft.description,
        priority=draft.priority,
        tag=draft.tag,
        due_date=draft.due_date,
        created_at=now,
        moved_to={column_id: now},
    )


def _require_column(board: BoardState, column_id: str) -> None:
    if column_id not in board.columns:
        raise ColumnNotFoundError(column_id)


def create_card(
    board: BoardState,
    column_id: str,
    draft: CardDraft,
    *,
    now: str | None = None,
) -> BoardState:
    """Return a new board with a card built from *draft* appended to *column_id*.

    The new card gets ``created_at = now`` and ``moved_to = {column_id: now}``.

    Raises
    ------
    ValidationError
        If the draft's title is blank.
    ColumnNotFoundError
        If *column_id* does not exist.
    """
    require_title(draft.title)
    _require_column(board, column_id)
    stamp = now if now is not None else utc_now()

    card_id = _unique_id(f"card-{_epoch_ms(stamp)}", board.cards)
    card = _card_from_draft(card_id, draft, column_id, stamp)

    column = board.columns[column_id]
    columns = dict(board.columns)
    columns[column_id] = column.with_card_ids(column.card_ids + (card_id,))
    cards = dict(board.cards)
    cards[card_id] = card
    return replace(board, columns=columns, cards=cards)


def update_card(board: BoardState, card_id: str, draft: CardDraft) -> BoardState:
    """Return a new board with *card_id*'s editable fields replaced by *draft*.

    ``id``, ``created_at`` and ``moved_to`` are carried over from the
    existing card.  Column membership and order are untouched.

    Raises
    ------
    CardNotFoundError
        If *card_id* is not in ``board.cards``.
    ValidationError
        If the draft's title is blank.
    """
    existing = board.cards.get(card_id)
    if existing is None:
        raise CardNotFoundError(card_id)
    require_title(draft.title)

    cards = dict(board.cards)
    cards[card_id] = replace(
        existing,
        title=draft.title,
        description=draft.description,
        priority=draft.priority,
        tag=draft.tag,
        due_date=draft.due_date,
    )
    return replace(board, cards=cards)


def delete_card(board: BoardState, card_id: str) -> BoardState:
    """Return a new board without *card_id*.

    The id is removed from the card map and from whichever column lists
    it.  Returns *board* itself when the id is nowhere on the board.
    """
    holders = [cid for cid, column in board.columns.items() if card_id in column.card_ids]
    if card_id not in board.cards and not holders:
        return board

    columns = dict(board.columns)
    for column_id in holders:
        column = columns[column_id]
        columns[column_id] = column.with_card_ids(
            [cid for cid in column.card_ids if cid != card_id]
        )
    cards = {cid: card for cid, card in board.cards.items() if cid != card_id}
    return replace(board, columns=columns, cards=cards)


def clear_column(board: BoardState, column_id: str) -> BoardState:
    """Return a new board where *column_id* is empty and its cards are deleted.

    Returns *board* itself when the column is already empty.

    Raises
    ------
    ColumnNotFoundError
        If *column_id* does not exist.
    """
    _require_column(board, column_id)
    column = board.columns[column_id]
    if not column.card_ids:
        return board

    doomed = set(column.card_ids)
    columns = dict(board.columns)
    columns[column_id] = column.with_card_ids(())
    cards = {cid: card for cid, card in board.cards.items() if cid not in doomed}
    return replace(board, columns=columns, cards=cards)


def bulk_insert(
    board: BoardState,
    column_id: str,
    drafts: Iterable[CardDraft],
    *,
    now: str | None = None,
) -> BoardState:
    """Return a new board with one card per draft appended to *column_id*.

    All cards of the batch share a single timestamp for ``created_at`` and
    their initial ``moved_to`` entry.  Ids are ``card-<epoch-ms>-<index>``.
    The insert is all-or-nothing: every draft is checked before any card
    is added.

    Raises
    ------
    ValidationError
        If any draft has a blank title.
    ColumnNotFoundError
        If *column_id* does not exist.
    """
    batch = list(drafts)
    for position, draft in enumerate(batch):
        try:
            require_title(draft.title)
        except ValidationError as exc:
            raise ValidationError(
                f"Draft #{position + 1} rejected: {exc}", field="title"
            ) from exc
    _require_column(board, column_id)
    if not batch:
        return board

    stamp = now if now is not None else utc_now()
    base = _epoch_ms(stamp)

    cards = dict(board.cards)
    new_ids: list[str] = []
    for index, draft in enumerate(batch):
        card_id = _unique_id(f"card-{base}-{index}", cards)
        cards[card_id] = _card_from_draft(card_id, draft, column_id, stamp)
        new_ids.append(card_id)

    column = board.columns[column_id]
    columns = dict(board.columns)
    columns[column_id] = column.with_card_ids(column.card_ids + tuple(new_ids))
    return replace(board, columns=columns, cards=cards)


__all__ = [
    "create_card",
    "update_card",
    "delete_card",
    "clear_column",
    "bulk_insert",
]
