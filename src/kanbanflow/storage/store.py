"""File-backed board persistence.

Boards are stored as structured JSON documents, one file per key, in a
single directory::

    <directory>/kanban-board-data.json

Writes go to a temporary file in the same directory which then replaces
the target, so a reader never sees a half-written board.  Loading never
raises for content problems: an unreadable, corrupt or inconsistent file
is logged and the fallback board is returned instead.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path

from kanbanflow.codec.structured import BoardSerializer
from kanbanflow.config.settings import data_dir
from kanbanflow.errors import ImportFormatError
from kanbanflow.model.defaults import default_board
from kanbanflow.model.entities import BoardState

logger = logging.getLogger(__name__)

DEFAULT_BOARD_KEY = "kanban-board-data"

_KEY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class BoardStore:
    """Load and save boards under *directory*.

    Parameters
    ----------
    directory:
        Directory holding board files.  Defaults to ``data_dir()``.  It
        is created on the first save.
    """

    def __init__(self, directory: Path | str | None = None) -> None:
        self._directory = Path(directory) if directory is not None else data_dir()
        self._serializer = BoardSerializer()

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str = DEFAULT_BOARD_KEY) -> Path:
        """Return the file path used for *key*.

        Raises
        ------
        ValueError
            If *key* is not a plain file-name stem.
        """
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid board key {key!r}")
        return self._directory / f"{key}.json"

    def exists(self, key: str = DEFAULT_BOARD_KEY) -> bool:
        return self.path_for(key).is_file()

    def load(self, key: str = DEFAULT_BOARD_KEY, default: BoardState | None = None) -> BoardState:
        """Return the board saved under *key*.

        When nothing is saved, or the saved file cannot be used, *default*
        is returned (``default_board()`` when *default* is None).
        """
        fallback = default if default is not None else default_board()
        path = self.path_for(key)
        if not path.is_file():
            logger.debug("No saved board at %s; using fallback", path)
            return fallback

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read board file %s: %s; using fallback", path, exc)
            return fallback

        try:
            return self._serializer.from_json(text)
        except ImportFormatError as exc:
            logger.warning("Ignoring corrupt board file %s: %s", path, exc)
            return fallback

    def save(self, key: str, board: BoardState) -> Path:
        """Write *board* under *key* atomically and return the path written."""
        path = self.path_for(key)
        self._directory.mkdir(parents=True, exist_ok=True)
        payload = self._serializer.to_json(board)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self._directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Saved board (%d cards) to %s", board.card_count, path)
        return path

    def delete(self, key: str = DEFAULT_BOARD_KEY) -> bool:
        """Remove the file saved under *key*; return True if one existed."""
        path = self.path_for(key)
        if not path.is_file():
            return False
        path.unlink()
        return True

    def __repr__(self) -> str:
        return f"BoardStore(directory={str(self._directory)!r})"


__all__ = ["DEFAULT_BOARD_KEY", "BoardStore"]
