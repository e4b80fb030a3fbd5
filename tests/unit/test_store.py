"""Unit tests for kanbanflow.storage.store — BoardStore."""
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from kanbanflow.engine.mutations import clear_column
from kanbanflow.model.defaults import default_board
from kanbanflow.model.entities import BoardState
from kanbanflow.storage import DEFAULT_BOARD_KEY, BoardStore


@pytest.fixture()
def store(tmp_path: Path) -> BoardStore:
    return BoardStore(tmp_path / "boards")


class TestPaths:
    def test_default_directory_is_data_dir(self, isolated_home: Path) -> None:
        assert BoardStore().directory == isolated_home

    def test_path_for_default_key(self, store: BoardStore) -> None:
        assert store.path_for().name == f"{DEFAULT_BOARD_KEY}.json"

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden", "with space"])
    def test_invalid_keys(self, store: BoardStore, key: str) -> None:
        with pytest.raises(ValueError):
            store.path_for(key)

    def test_repr(self, store: BoardStore) -> None:
        assert "boards" in repr(store)


class TestLoad:
    def test_absent_gives_default_board(self, store: BoardStore) -> None:
        assert store.load() == default_board()

    def test_absent_gives_given_default(self, store: BoardStore, board: BoardState) -> None:
        assert store.load(default=board) == board

    def test_corrupt_file_logged_and_ignored(
        self, store: BoardStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.directory.mkdir(parents=True)
        store.path_for().write_text("{ not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="kanbanflow.storage.store"):
            loaded = store.load()
        assert loaded == default_board()
        assert "corrupt" in caplog.text

    def test_undecodable_file_logged_and_ignored(
        self, store: BoardStore, caplog: pytest.LogCaptureFixture
    ) -> None:
        store.directory.mkdir(parents=True)
        store.path_for().write_bytes(b'{"columns": \xff\xfe}')
        with caplog.at_level(logging.WARNING, logger="kanbanflow.storage.store"):
            loaded = store.load()
        assert loaded == default_board()
        assert "Could not read" in caplog.text

    def test_inconsistent_file_ignored(self, store: BoardStore) -> None:
        store.directory.mkdir(parents=True)
        store.path_for().write_text(
            '{"columns": {}, "cards": {}, "columnOrder": ["todo"]}', encoding="utf-8"
        )
        assert store.load() == default_board()


class TestSave:
    def test_save_then_load(self, store: BoardStore, board: BoardState) -> None:
        path = store.save(DEFAULT_BOARD_KEY, board)
        assert path == store.path_for()
        assert store.exists()
        assert store.load() == board

    def test_keys_are_independent(self, store: BoardStore, board: BoardState) -> None:
        store.save("work", board)
        store.save("home", default_board())
        assert store.load("work") == board
        assert store.load("home").card_count == 0

    def test_overwrite(self, store: BoardStore, board: BoardState) -> None:
        store.save(DEFAULT_BOARD_KEY, board)
        emptied = clear_column(board, "backlog")
        store.save(DEFAULT_BOARD_KEY, emptied)
        assert store.load() == emptied

    def test_no_temporary_files_left(self, store: BoardStore, board: BoardState) -> None:
        store.save(DEFAULT_BOARD_KEY, board)
        store.save(DEFAULT_BOARD_KEY, board)
        assert [p.name for p in store.directory.iterdir()] == [f"{DEFAULT_BOARD_KEY}.json"]

    def test_failed_write_keeps_previous_file(
        self, store: BoardStore, board: BoardState, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        store.save(DEFAULT_BOARD_KEY, board)

        def explode(src: str, dst: str) -> None:
            raise OSError("disk full")

        monkeypatch.setattr("kanbanflow.storage.store.os.replace", explode)
        with pytest.raises(OSError):
            store.save(DEFAULT_BOARD_KEY, default_board())
        assert store.load() == board
        assert len(list(store.directory.iterdir())) == 1


class TestDelete:
    def test_delete_existing(self, store: BoardStore, board: BoardState) -> None:
        store.save(DEFAULT_BOARD_KEY, board)
        assert store.delete() is True
        assert not store.exists()

    def test_delete_missing(self, store: BoardStore) -> None:
        assert store.delete("never-saved") is False
