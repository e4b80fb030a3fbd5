"""Task extraction: free text in, card drafts out.

``TaskExtractor`` ties the pieces of the extraction pipeline together:
the active provider's settings, its adapter, a transport and the
normalizer.  It performs at most one request per call and never touches
a board unless ``smart_add`` succeeds end to end.

Example
-------
::

    from kanbanflow.config import load_settings
    from kanbanflow.extract import TaskExtractor

    extractor = TaskExtractor(load_settings())
    board = extractor.smart_add(board, "Fix the login bug, then write docs")
"""
from __future__ import annotations

import logging

from kanbanflow.config.settings import AppSettings
from kanbanflow.engine.mutations import bulk_insert
from kanbanflow.errors import ColumnNotFoundError, ValidationError
from kanbanflow.extract.adapters import ProviderAdapter, get_adapter
from kanbanflow.extract.errors import ExtractionAuthError
from kanbanflow.extract.normalizer import normalize_response
from kanbanflow.extract.transport import ExtractionTransport, RequestsTransport
from kanbanflow.model.defaults import DEFAULT_COLUMN_ID
from kanbanflow.model.entities import BoardState, CardDraft

logger = logging.getLogger(__name__)


class TaskExtractor:
    """Extract tasks from text with the active provider.

    Parameters
    ----------
    settings:
        Application settings; the active provider and its credentials are
        read from here.
    transport:
        Transport used to send requests.  Defaults to a new
        ``RequestsTransport``.
    timeout:
        Per-request timeout in seconds.
    adapter:
        Adapter override.  Defaults to the registered adapter of the
        active provider.
    """

    def __init__(
        self,
        settings: AppSettings,
        transport: ExtractionTransport | None = None,
        timeout: float = 30.0,
        adapter: ProviderAdapter | None = None,
    ) -> None:
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")
        self._settings = settings
        self._transport: ExtractionTransport = transport or RequestsTransport()
        self._timeout = timeout
        self._adapter = adapter or get_adapter(settings.provider)

    @property
    def provider_name(self) -> str:
        return self._adapter.name

    def extract(self, text: str) -> list[CardDraft]:
        """Return the drafts the provider extracts from *text*.

        Raises
        ------
        ValidationError
            If *text* is blank; no request is sent.
        ExtractionAuthError
            If the active provider has no API key; no request is sent.
        ExtractionError
            Any other extraction failure.
        """
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("Nothing to extract: input text is blank", field="text")

        provider_settings = self._settings.active
        pid = self._adapter.provider_id.value
        if not provider_settings.has_api_key:
            raise ExtractionAuthError(
                f"No API key configured for {self.provider_name}. Please add one in Settings.",
                provider=pid,
            )

        request = self._adapter.build_request(provider_settings, text)
        logger.info(
            "Extracting tasks with %s (model %s)", self.provider_name, provider_settings.effective_model
        )
        response = self._transport.send(request, self._timeout)
        drafts = normalize_response(pid, response)
        logger.info("%s extracted %d task(s)", self.provider_name, len(drafts))
        return drafts

    def smart_add(
        self,
        board: BoardState,
        text: str,
        column_id: str = DEFAULT_COLUMN_ID,
        *,
        now: str | None = None,
    ) -> BoardState:
        """Extract tasks from *text* and bulk-insert them into *column_id*.

        Any failure propagates before the board is touched, so the caller
        still holds its original *board*. An unknown *column_id* is rejected
        before the provider is called.
        """
        if column_id not in board.columns:
            raise ColumnNotFoundError(column_id)
        drafts = self.extract(text)
        return bulk_insert(board, column_id, drafts, now=now)


__all__ = ["TaskExtractor"]
