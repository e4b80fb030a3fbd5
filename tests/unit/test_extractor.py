"""Unit tests for kanbanflow.extract.extractor — TaskExtractor end to end over StaticTransport."""
from __future__ import annotations

import json
import logging

import pytest

from kanbanflow.config.settings import AppSettings, GeminiSettings, ZhipuSettings
from kanbanflow.config.providers import ProviderId
from kanbanflow.errors import ColumnNotFoundError, ValidationError
from kanbanflow.extract import (
    ExtractionAuthError,
    ExtractionEmptyError,
    ExtractionParseError,
    ExtractionTransportError,
    RequestsTransport,
    StaticTransport,
    TaskExtractor,
)
from kanbanflow.extract.transport import ProviderResponse
from kanbanflow.model.entities import BoardState, Priority, Tag

TASKS = [
    {"title": "Fix login bug", "description": "Users get a 500", "priority": "High", "tag": "Bug"},
    {"title": "Write onboarding docs", "priority": "Low", "tag": "Learning"},
]


def _gemini(tasks: object) -> ProviderResponse:
    text = tasks if isinstance(tasks, str) else json.dumps(tasks)
    return ProviderResponse.from_payload({"candidates": [{"content": {"parts": [{"text": text}]}}]})


def _zhipu(tasks: object) -> ProviderResponse:
    return ProviderResponse.from_payload(
        {"choices": [{"message": {"role": "assistant", "content": json.dumps(tasks)}}]}
    )


@pytest.fixture()
def gemini_settings() -> AppSettings:
    return AppSettings().with_settings(GeminiSettings(api_key="g-key"))


@pytest.fixture()
def zhipu_settings() -> AppSettings:
    return AppSettings(provider=ProviderId.ZHIPU).with_settings(ZhipuSettings(api_key="z-key"))


# ===========================================================================
# Construction
# ===========================================================================


class TestConstruction:
    def test_defaults_to_requests_transport(self, gemini_settings: AppSettings) -> None:
        extractor = TaskExtractor(gemini_settings)
        assert isinstance(extractor._transport, RequestsTransport)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_timeout_must_be_positive(self, gemini_settings: AppSettings, timeout: float) -> None:
        with pytest.raises(ValueError):
            TaskExtractor(gemini_settings, timeout=timeout)

    def test_provider_name_follows_active_provider(self, zhipu_settings: AppSettings) -> None:
        transport = StaticTransport([_zhipu(TASKS)])
        assert TaskExtractor(zhipu_settings, transport).provider_name.startswith("Zhipu AI")


# ===========================================================================
# extract
# ===========================================================================


class TestExtract:
    def test_gemini_drafts(self, gemini_settings: AppSettings) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        drafts = TaskExtractor(gemini_settings, transport).extract("Fix login. Write docs.")
        assert [(d.title, d.priority, d.tag) for d in drafts] == [
            ("Fix login bug", Priority.HIGH, Tag.BUG),
            ("Write onboarding docs", Priority.LOW, Tag.LEARNING),
        ]
        assert transport.call_count == 1

    def test_request_carries_text_and_key(self, gemini_settings: AppSettings) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        TaskExtractor(gemini_settings, transport).extract("Ship the release")
        (request,) = transport.requests
        assert request.headers["x-goog-api-key"] == "g-key"
        assert request.json_body["contents"][0]["parts"][0]["text"] == "Ship the release"  # type: ignore[index]

    def test_zhipu_drafts(self, zhipu_settings: AppSettings) -> None:
        transport = StaticTransport([_zhipu(TASKS)])
        drafts = TaskExtractor(zhipu_settings, transport).extract("two tasks")
        assert len(drafts) == 2
        assert transport.requests[0].headers["Authorization"] == "Bearer z-key"

    def test_timeout_is_forwarded(self, gemini_settings: AppSettings) -> None:
        seen: list[float] = []

        class RecordingTransport:
            def send(self, request, timeout):  # type: ignore[no-untyped-def]
                seen.append(timeout)
                return _gemini(TASKS)

        TaskExtractor(gemini_settings, RecordingTransport(), timeout=5.0).extract("x")
        assert seen == [5.0]

    @pytest.mark.parametrize("text", ["", "   \n\t"])
    def test_blank_text_sends_nothing(self, gemini_settings: AppSettings, text: str) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        with pytest.raises(ValidationError) as exc_info:
            TaskExtractor(gemini_settings, transport).extract(text)
        assert exc_info.value.field == "text"
        assert transport.call_count == 0

    def test_missing_key_sends_nothing(self) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        with pytest.raises(ExtractionAuthError, match="No API key") as exc_info:
            TaskExtractor(AppSettings(), transport).extract("Fix it")
        assert exc_info.value.provider == "gemini"
        assert transport.call_count == 0

    def test_unparsable_output(self, gemini_settings: AppSettings) -> None:
        transport = StaticTransport([_gemini("no tasks here, sorry")])
        with pytest.raises(ExtractionParseError):
            TaskExtractor(gemini_settings, transport).extract("x")

    def test_empty_output(self, gemini_settings: AppSettings) -> None:
        transport = StaticTransport([_gemini([])])
        with pytest.raises(ExtractionEmptyError):
            TaskExtractor(gemini_settings, transport).extract("x")

    def test_transport_failure(self, gemini_settings: AppSettings) -> None:
        transport = StaticTransport([ProviderResponse.failure("Connection refused")])
        with pytest.raises(ExtractionTransportError, match="Connection refused"):
            TaskExtractor(gemini_settings, transport).extract("x")

    def test_http_auth_failure(self, zhipu_settings: AppSettings) -> None:
        body = json.dumps({"error": {"code": "1001", "message": "token expired"}})
        transport = StaticTransport([ProviderResponse(status=401, body=body)])
        with pytest.raises(ExtractionAuthError):
            TaskExtractor(zhipu_settings, transport).extract("x")

    def test_logs_progress(self, gemini_settings: AppSettings, caplog: pytest.LogCaptureFixture) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        with caplog.at_level(logging.INFO, logger="kanbanflow.extract.extractor"):
            TaskExtractor(gemini_settings, transport).extract("x")
        assert "extracted 2 task(s)" in caplog.text


# ===========================================================================
# smart_add
# ===========================================================================


class TestSmartAdd:
    def test_inserts_into_backlog(
        self, gemini_settings: AppSettings, board: BoardState, now: str
    ) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        updated = TaskExtractor(gemini_settings, transport).smart_add(board, "x", now=now)
        new_ids = updated.columns["backlog"].card_ids[len(board.columns["backlog"]):]
        assert len(new_ids) == 2
        assert [updated.cards[cid].title for cid in new_ids] == ["Fix login bug", "Write onboarding docs"]
        assert all(updated.cards[cid].created_at == now for cid in new_ids)

    def test_custom_column(self, gemini_settings: AppSettings, board: BoardState) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        updated = TaskExtractor(gemini_settings, transport).smart_add(board, "x", "todo")
        assert len(updated.columns["todo"]) == len(board.columns["todo"]) + 2

    def test_failure_leaves_board_untouched(
        self, gemini_settings: AppSettings, board: BoardState
    ) -> None:
        transport = StaticTransport([ProviderResponse(status=500, body="boom")])
        extractor = TaskExtractor(gemini_settings, transport)
        with pytest.raises(ExtractionTransportError):
            extractor.smart_add(board, "x")
        assert board.card_count == 7

    def test_unknown_column_sends_nothing(self, gemini_settings: AppSettings, board: BoardState) -> None:
        transport = StaticTransport([_gemini(TASKS)])
        with pytest.raises(ColumnNotFoundError):
            TaskExtractor(gemini_settings, transport).smart_add(board, "x", "archive")
        assert transport.call_count == 0
