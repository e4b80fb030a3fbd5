"""Structured board serialization for kanbanflow.

Provides lossless round-trip serialization of ``BoardState`` values to
and from plain dicts, JSON and YAML.  The document has exactly three
top-level fields and keeps the camelCase key names used by earlier
board exports::

    {
      "columns":     {"todo": {"id": "todo", "title": "To Do", "cardIds": [...]}},
      "cards":       {"card-1": {"id": ..., "title": ..., "description": ...,
                                 "priority": "High", "tag": "Bug",
                                 "dueDate": "", "createdAt": ..., "movedTo": {...}}},
      "columnOrder": ["todo", ...]
    }

Importing replaces the board wholesale.  Any shape problem raises
``ImportFormatError`` and nothing is returned.

Usage
-----
::

    from kanbanflow.codec.structured import BoardSerializer

    serializer = BoardSerializer()
    text = serializer.to_json(board)
    assert serializer.from_json(text) == board
"""
from __future__ import annotations

import json
from collections.abc import Mapping

import yaml

from kanbanflow.errors import ImportFormatError, ValidationError
from kanbanflow.model.entities import BoardState, Card, Column, Priority, Tag
from kanbanflow.validator import validate_board

REQUIRED_FIELDS: tuple[str, ...] = ("columns", "cards", "columnOrder")


class BoardSerializer:
    """Converts between ``BoardState`` values and plain Python dicts.

    Parameters
    ----------
    check_invariants:
        When True (the default), boards read by ``from_dict`` must also
        pass the invariant validator.
    """

    def __init__(self, check_invariants: bool = True) -> None:
        self._check_invariants = check_invariants

    # ------------------------------------------------------------------
    # Serialization (BoardState -> dict)
    # ------------------------------------------------------------------

    def to_dict(self, board: BoardState) -> dict[str, object]:
        """Serialize *board* to a JSON-compatible dict."""
        return {
            "columns": {key: self._column_to_dict(c) for key, c in board.columns.items()},
            "cards": {key: self._card_to_dict(c) for key, c in board.cards.items()},
            "columnOrder": list(board.column_order),
        }

    def _column_to_dict(self, column: Column) -> dict[str, object]:
        return {"id": column.id, "title": column.title, "cardIds": list(column.card_ids)}

    def _card_to_dict(self, card: Card) -> dict[str, object]:
        return {
            "id": card.id,
            "title": card.title,
            "description": card.description,
            "priority": card.priority.value,
            "tag": card.tag.value,
            "dueDate": card.due_date,
            "createdAt": card.created_at,
            "movedTo": dict(card.moved_to),
        }

    # ------------------------------------------------------------------
    # Deserialization (dict -> BoardState)
    # ------------------------------------------------------------------

    def from_dict(self, data: object, format_name: str = "json") -> BoardState:
        """Build a ``BoardState`` from a parsed document.

        Raises
        ------
        ImportFormatError
            If a top-level field is missing, an entry has the wrong shape,
            an enum value is unknown, a title is blank, or (with
            ``check_invariants``) the board violates an invariant.
        """
        if not isinstance(data, Mapping):
            raise ImportFormatError("document must be an object", format_name)
        missing = [name for name in REQUIRED_FIELDS if name not in data]
        if missing:
            raise ImportFormatError(
                f"missing top-level field(s): {', '.join(missing)}", format_name
            )

        raw_columns = data["columns"]
        raw_cards = data["cards"]
        raw_order = data["columnOrder"]
        if not isinstance(raw_columns, Mapping):
            raise ImportFormatError("'columns' must be an object", format_name)
        if not isinstance(raw_cards, Mapping):
            raise ImportFormatError("'cards' must be an object", format_name)
        if not isinstance(raw_order, list) or not all(isinstance(c, str) for c in raw_order):
            raise ImportFormatError("'columnOrder' must be a list of strings", format_name)

        try:
            columns = {
                str(key): self._column_from_dict(value) for key, value in raw_columns.items()
            }
            cards = {str(key): self._card_from_dict(value) for key, value in raw_cards.items()}
        except ValidationError as exc:
            raise ImportFormatError(str(exc), format_name) from exc
        except (KeyError, TypeError, AttributeError) as exc:
            raise ImportFormatError(f"malformed entry: {exc}", format_name) from exc

        board = BoardState(columns=columns, cards=cards, column_order=tuple(raw_order))
        if self._check_invariants:
            errors = [d for d in validate_board(board) if d.is_error]
            if errors:
                raise ImportFormatError(
                    "; ".join(d.message for d in errors), format_name
                )
        return board

    def _column_from_dict(self, d: Mapping[str, object]) -> Column:
        card_ids = d.get("cardIds", [])
        if not isinstance(card_ids, list) or not all(isinstance(c, str) for c in card_ids):
            raise ValidationError(f"column {d['id']!r}: 'cardIds' must be a list of strings")
        return Column(id=str(d["id"]), title=str(d.get("title", d["id"])), card_ids=tuple(card_ids))

    def _card_from_dict(self, d: Mapping[str, object]) -> Card:
        moved_to = d.get("movedTo") or {}
        if not isinstance(moved_to, Mapping):
            raise ValidationError(f"card {d['id']!r}: 'movedTo' must be an object")
        return Card(
            id=str(d["id"]),
            title=d["title"],  # type: ignore[arg-type]
            description=str(d.get("description") or ""),
            priority=Priority.parse(d.get("priority", Priority.NONE.value)),
            tag=Tag.parse(d.get("tag", Tag.FEATURE.value)),
            due_date=str(d.get("dueDate") or ""),
            created_at=str(d.get("createdAt") or ""),
            moved_to={str(k): str(v) for k, v in moved_to.items()},
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, board: BoardState, indent: int = 2) -> str:
        """Serialize *board* to a JSON string."""
        return json.dumps(self.to_dict(board), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> BoardState:
        """Deserialize a board from a JSON string."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ImportFormatError(f"not valid JSON ({exc.msg})", "json") from exc
        return self.from_dict(data, "json")

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, board: BoardState) -> str:
        """Serialize *board* to a YAML string."""
        return yaml.safe_dump(
            self.to_dict(board), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def from_yaml(self, text: str) -> BoardState:
        """Deserialize a board from a YAML string."""
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ImportFormatError(f"not valid YAML ({exc})", "yaml") from exc
        return self.from_dict(data, "yaml")


def export_json(board: BoardState) -> str:
    """Serialize *board* to the structured JSON document."""
    return BoardSerializer().to_json(board)


def import_json(text: str) -> BoardState:
    """Parse and validate a structured JSON document into a board."""
    return BoardSerializer().from_json(text)


__all__ = ["REQUIRED_FIELDS", "BoardSerializer", "export_json", "import_json"]
