"""Convenience API for kanbanflow: a mutable handle on an immutable board.

The engine functions take a ``BoardState`` and return a new one.  That
is the right shape for hosting code that owns its state, but scripts
usually just want "the board" and a few verbs.  ``KanbanBoard`` keeps
the current ``BoardState`` and replaces it after every successful
operation.  A failed operation raises and leaves the current board as
it was.

Example
-------
::

    from kanbanflow import KanbanBoard

    board = KanbanBoard()
    card = board.add("Write release notes", column_id="todo", priority="High")
    board.move_card(card.id, "inProgress")
    board.save()
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from kanbanflow.engine.filters import BoardQuery, filter_board
from kanbanflow.engine.moves import locate_card, move
from kanbanflow.engine.mutations import (
    bulk_insert,
    clear_column,
    create_card,
    delete_card,
    update_card,
)
from kanbanflow.errors import CardNotFoundError
from kanbanflow.model.defaults import DEFAULT_COLUMN_ID, default_board
from kanbanflow.model.entities import BoardState, Card, CardDraft, Priority, Tag
from kanbanflow.storage.store import DEFAULT_BOARD_KEY

if TYPE_CHECKING:
    from kanbanflow.extract.extractor import TaskExtractor
    from kanbanflow.storage.store import BoardStore
    from kanbanflow.validator.diagnostics import Diagnostic


class KanbanBoard:
    """Stateful wrapper around a ``BoardState``.

    Parameters
    ----------
    state:
        Initial board.  When omitted, the board saved in *store* is
        loaded, or the empty four-column board is used.
    store:
        Optional ``BoardStore`` used by ``save`` and ``reload``.
    key:
        Storage key of this board.
    """

    def __init__(
        self,
        state: BoardState | None = None,
        store: "BoardStore | None" = None,
        key: str = DEFAULT_BOARD_KEY,
    ) -> None:
        self._store = store
        self._key = key
        if state is None:
            state = store.load(key) if store is not None else default_board()
        self._state = state

    @property
    def state(self) -> BoardState:
        """The current immutable board value."""
        return self._state

    # ------------------------------------------------------------------
    # Card operations
    # ------------------------------------------------------------------

    def add(
        self,
        title: str,
        column_id: str = DEFAULT_COLUMN_ID,
        description: str = "",
        priority: Priority | str = Priority.NONE,
        tag: Tag | str = Tag.FEATURE,
        due_date: str = "",
    ) -> Card:
        """Create a card at the end of *column_id* and return it."""
        draft = CardDraft(
            title=title,
            description=description,
            priority=Priority.parse(priority),
            tag=Tag.parse(tag),
            due_date=due_date,
        )
        before = set(self._state.cards)
        self._state = create_card(self._state, column_id, draft)
        (new_id,) = set(self._state.cards) - before
        return self._state.cards[new_id]

    def edit(self, card_id: str, **changes: object) -> Card:
        """Replace the given editable fields of *card_id* and return the card.

        Accepted keywords are ``title``, ``description``, ``priority``,
        ``tag`` and ``due_date``.
        """
        card = self._state.cards.get(card_id)
        if card is None:
            raise CardNotFoundError(card_id)
        unknown = set(changes) - {"title", "description", "priority", "tag", "due_date"}
        if unknown:
            raise TypeError(f"Unknown card field(s): {', '.join(sorted(unknown))}")
        current = card.to_draft()
        draft = CardDraft(
            title=changes.get("title", current.title),  # type: ignore[arg-type]
            description=changes.get("description", current.description),  # type: ignore[arg-type]
            priority=Priority.parse(changes.get("priority", current.priority)),
            tag=Tag.parse(changes.get("tag", current.tag)),
            due_date=changes.get("due_date", current.due_date),  # type: ignore[arg-type]
        )
        self._state = update_card(self._state, card_id, draft)
        return self._state.cards[card_id]

    def move_card(self, card_id: str, dest_column_id: str, index: int | None = None) -> None:
        """Move *card_id* to *index* of *dest_column_id* (appended when None)."""
        location = locate_card(self._state, card_id)
        if location is None:
            raise CardNotFoundError(card_id)
        source_column_id, source_index = location
        if index is None:
            index = len(self._state.columns[dest_column_id]) if dest_column_id in self._state.columns else 0
            if dest_column_id == source_column_id:
                index -= 1
        self._state = move(
            self._state, source_column_id, source_index, dest_column_id, index, card_id
        )

    def delete(self, card_id: str) -> None:
        self._state = delete_card(self._state, card_id)

    def clear(self, column_id: str) -> None:
        self._state = clear_column(self._state, column_id)

    def add_many(self, drafts: list[CardDraft], column_id: str = DEFAULT_COLUMN_ID) -> None:
        self._state = bulk_insert(self._state, column_id, drafts)

    def smart_add(self, extractor: "TaskExtractor", text: str, column_id: str = DEFAULT_COLUMN_ID) -> int:
        """Extract tasks from *text* with *extractor*; return how many were added."""
        before = self._state.card_count
        self._state = extractor.smart_add(self._state, text, column_id)
        return self._state.card_count - before

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search(
        self,
        text: str = "",
        priority: Priority | str | None = None,
        tag: Tag | str | None = None,
    ) -> BoardState:
        """Return the filtered projection of the current board."""
        query = BoardQuery(
            text=text,
            priority=Priority.parse(priority) if priority is not None else None,
            tag=Tag.parse(tag) if tag is not None else None,
        )
        return filter_board(self._state, query)

    def validate(self) -> list["Diagnostic"]:
        from kanbanflow.validator.validator import validate_board

        return validate_board(self._state)

    def is_valid(self) -> bool:
        """Return True if the board has no ERROR-level diagnostics."""
        return all(not d.is_error for d in self.validate())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        if self._store is None:
            raise RuntimeError("This KanbanBoard has no store to save to")
        self._store.save(self._key, self._state)

    def reload(self) -> None:
        if self._store is None:
            raise RuntimeError("This KanbanBoard has no store to reload from")
        self._state = self._store.load(self._key)

    def __len__(self) -> int:
        return self._state.card_count

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{column.id}={len(column)}" for column in self._state.ordered_columns()
        )
        return f"KanbanBoard({counts})"
