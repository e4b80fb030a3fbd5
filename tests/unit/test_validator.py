"""Unit tests for kanbanflow.validator — rules KF001-KF006 and BoardValidator."""
from __future__ import annotations

from kanbanflow.model.entities import BoardState, Card, Column
from kanbanflow.validator import (
    BoardValidator,
    Diagnostic,
    DiagnosticSeverity,
    is_valid,
    validate_board,
)


def _codes(board: BoardState) -> list[str]:
    return [d.code for d in validate_board(board)]


def _board(columns: dict[str, Column], cards: dict[str, Card], order: tuple[str, ...]) -> BoardState:
    return BoardState(columns=columns, cards=cards, column_order=order)


class TestConsistentBoards:
    def test_sample_board_is_clean(self, board: BoardState) -> None:
        assert validate_board(board) == []
        assert is_valid(board)

    def test_empty_board_is_clean(self, empty_board: BoardState) -> None:
        assert is_valid(empty_board)


class TestRules:
    def test_kf001_dangling_id(self) -> None:
        board = _board({"a": Column("a", "A", ("ghost",))}, {}, ("a",))
        diagnostics = validate_board(board)
        assert [d.code for d in diagnostics] == ["KF001"]
        assert diagnostics[0].location == "columns.a"

    def test_kf002_card_in_two_columns(self) -> None:
        card = Card(id="x", title="X")
        board = _board(
            {"a": Column("a", "A", ("x",)), "b": Column("b", "B", ("x",))},
            {"x": card},
            ("a", "b"),
        )
        assert _codes(board) == ["KF002"]

    def test_kf002_duplicate_within_column(self) -> None:
        board = _board({"a": Column("a", "A", ("x", "x"))}, {"x": Card(id="x", title="X")}, ("a",))
        assert _codes(board) == ["KF002"]

    def test_kf003_missing_unknown_and_duplicate(self) -> None:
        board = _board(
            {"a": Column("a", "A"), "b": Column("b", "B")},
            {},
            ("a", "a", "zzz"),
        )
        codes = _codes(board)
        assert codes == ["KF003"] * 3

    def test_kf004_column_key_mismatch(self) -> None:
        board = _board({"a": Column("b", "B")}, {}, ("a",))
        assert _codes(board) == ["KF004"]

    def test_kf005_card_key_mismatch(self) -> None:
        board = _board({"a": Column("a", "A", ("k",))}, {"k": Card(id="other", title="X")}, ("a",))
        assert _codes(board) == ["KF005"]

    def test_kf006_blank_title(self) -> None:
        card = Card(id="x", title="X")
        object.__setattr__(card, "title", " ")
        board = _board({"a": Column("a", "A", ("x",))}, {"x": card}, ("a",))
        assert _codes(board) == ["KF006"]

    def test_findings_sorted_by_code(self) -> None:
        board = _board(
            {"a": Column("b", "B", ("ghost",))},
            {},
            ("a",),
        )
        assert _codes(board) == ["KF001", "KF004"]


class TestBoardValidator:
    def test_default_rule_count(self) -> None:
        assert BoardValidator().rule_count == 6

    def test_custom_rule(self, board: BoardState) -> None:
        def no_done_cards(b: BoardState) -> list[Diagnostic]:
            if b.columns["done"].card_ids:
                return [Diagnostic(DiagnosticSeverity.WARNING, "X001", "done is not empty", "columns.done")]
            return []

        validator = BoardValidator(rules=[])
        validator.add_rule(no_done_cards)
        diagnostics = validator.validate(board)
        assert [d.code for d in diagnostics] == ["X001"]
        assert not diagnostics[0].is_error

    def test_crashing_rule_reported_as_kf999(self, board: BoardState) -> None:
        def broken(b: BoardState) -> list[Diagnostic]:
            raise RuntimeError("boom")

        diagnostics = BoardValidator(rules=[broken]).validate(board)
        assert diagnostics[0].code == "KF999"
        assert "boom" in diagnostics[0].message

    def test_diagnostic_str(self) -> None:
        d = Diagnostic(DiagnosticSeverity.ERROR, "KF001", "bad", "columns.a")
        assert str(d) == "[KF001] ERROR at columns.a: bad"
