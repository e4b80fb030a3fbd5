"""Unit tests for kanbanflow.convenience — KanbanBoard."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from kanbanflow import KanbanBoard
from kanbanflow.config.settings import AppSettings, GeminiSettings
from kanbanflow.errors import CardNotFoundError, ColumnNotFoundError, ValidationError
from kanbanflow.extract import ExtractionParseError, StaticTransport, TaskExtractor
from kanbanflow.extract.transport import ProviderResponse
from kanbanflow.model.entities import BoardState, CardDraft, Priority, Tag
from kanbanflow.storage import BoardStore


@pytest.fixture()
def kb(board: BoardState) -> KanbanBoard:
    return KanbanBoard(board)


class TestConstruction:
    def test_default_is_empty_board(self) -> None:
        kb = KanbanBoard()
        assert len(kb) == 0
        assert kb.state.column_order == ("backlog", "todo", "inProgress", "done")

    def test_loads_from_store(self, tmp_path: Path, board: BoardState) -> None:
        store = BoardStore(tmp_path)
        store.save("work", board)
        assert KanbanBoard(store=store, key="work").state == board

    def test_repr_lists_column_sizes(self, kb: KanbanBoard) -> None:
        assert repr(kb) == "KanbanBoard(backlog=3, todo=2, inProgress=1, done=1)"


class TestCardOperations:
    def test_add_returns_new_card(self, kb: KanbanBoard) -> None:
        card = kb.add("Write release notes", column_id="todo", priority="high", tag="Enhancement")
        assert kb.state.columns["todo"].card_ids[-1] == card.id
        assert card.priority is Priority.HIGH
        assert card.tag is Tag.ENHANCEMENT
        assert len(kb) == 8

    def test_add_twice_gives_distinct_ids(self) -> None:
        kb = KanbanBoard()
        first = kb.add("One")
        second = kb.add("Two")
        assert first.id != second.id
        assert kb.state.columns["backlog"].card_ids == (first.id, second.id)

    def test_add_blank_title_keeps_state(self, kb: KanbanBoard) -> None:
        before = kb.state
        with pytest.raises(ValidationError):
            kb.add("   ")
        assert kb.state is before

    def test_edit(self, kb: KanbanBoard) -> None:
        card = kb.edit("card-3", title="Renamed", priority=Priority.URGENT)
        assert card.title == "Renamed"
        assert card.priority is Priority.URGENT
        assert card.tag is kb.state.cards["card-3"].tag

    def test_edit_unknown_field(self, kb: KanbanBoard) -> None:
        with pytest.raises(TypeError, match="colour"):
            kb.edit("card-3", colour="blue")

    def test_edit_missing_card(self, kb: KanbanBoard) -> None:
        with pytest.raises(CardNotFoundError):
            kb.edit("card-404", title="x")

    def test_move_appends_by_default(self, kb: KanbanBoard) -> None:
        kb.move_card("card-1", "done")
        assert kb.state.columns["done"].card_ids == ("card-6", "card-1")
        assert "done" in kb.state.cards["card-1"].moved_to

    def test_move_within_column_to_end(self, kb: KanbanBoard) -> None:
        kb.move_card("card-1", "backlog")
        assert kb.state.columns["backlog"].card_ids == ("card-2", "card-7", "card-1")

    def test_move_to_index(self, kb: KanbanBoard) -> None:
        kb.move_card("card-5", "todo", 0)
        assert kb.state.columns["todo"].card_ids == ("card-5", "card-3", "card-4")

    def test_move_missing_card(self, kb: KanbanBoard) -> None:
        with pytest.raises(CardNotFoundError):
            kb.move_card("card-404", "done")

    def test_move_to_unknown_column(self, kb: KanbanBoard) -> None:
        with pytest.raises(ColumnNotFoundError):
            kb.move_card("card-1", "archive")

    def test_delete_and_clear(self, kb: KanbanBoard) -> None:
        kb.delete("card-1")
        kb.clear("todo")
        assert "card-1" not in kb.state.cards
        assert len(kb.state.columns["todo"]) == 0
        assert len(kb) == 4

    def test_add_many(self, kb: KanbanBoard) -> None:
        kb.add_many([CardDraft("A"), CardDraft("B")], column_id="done")
        assert len(kb.state.columns["done"]) == 3


class TestSmartAdd:
    def _extractor(self, response: ProviderResponse) -> TaskExtractor:
        settings = AppSettings().with_settings(GeminiSettings(api_key="k"))
        return TaskExtractor(settings, StaticTransport([response]))

    def test_returns_number_added(self, kb: KanbanBoard) -> None:
        text = json.dumps([{"title": "A"}, {"title": "B"}, {"title": "C"}])
        response = ProviderResponse.from_payload({"candidates": [{"content": {"parts": [{"text": text}]}}]})
        assert kb.smart_add(self._extractor(response), "three things") == 3
        assert len(kb) == 10

    def test_failure_keeps_state(self, kb: KanbanBoard) -> None:
        before = kb.state
        response = ProviderResponse.from_payload({"candidates": [{"content": {"parts": [{"text": "??"}]}}]})
        with pytest.raises(ExtractionParseError):
            kb.smart_add(self._extractor(response), "something")
        assert kb.state is before


class TestQueries:
    def test_search(self, kb: KanbanBoard) -> None:
        result = kb.search(priority="High")
        visible = [cid for col in result.column_order for cid in result.columns[col].card_ids]
        assert visible
        assert all(result.cards[cid].priority is Priority.HIGH for cid in visible)
        assert result.cards == kb.state.cards
        assert len(kb) == 7

    def test_validate(self, kb: KanbanBoard) -> None:
        assert kb.is_valid()
        assert not any(d.is_error for d in kb.validate())


class TestPersistence:
    def test_save_and_reload(self, tmp_path: Path, board: BoardState) -> None:
        store = BoardStore(tmp_path)
        kb = KanbanBoard(board, store=store)
        kb.delete("card-1")
        kb.save()
        kb.add("Unsaved")
        kb.reload()
        assert len(kb) == 6
        assert "card-1" not in kb.state.cards

    def test_without_store(self, kb: KanbanBoard) -> None:
        with pytest.raises(RuntimeError):
            kb.save()
        with pytest.raises(RuntimeError):
            kb.reload()
