"""Turn raw provider output into validated card drafts.

Model output is untrusted: it may be wrapped in markdown code fences,
carry prose around the JSON, omit fields or use values outside the
``Priority``/``Tag`` enumerations.  ``normalize_drafts`` tolerates all of
that and either returns at least one ``CardDraft`` or raises one of the
``ExtractionError`` subclasses.
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping

from kanbanflow.config.providers import ProviderId
from kanbanflow.extract.adapters import get_adapter
from kanbanflow.extract.errors import (
    ExtractionEmptyError,
    ExtractionError,
    ExtractionParseError,
    ExtractionTransportError,
)
from kanbanflow.extract.transport import ProviderResponse
from kanbanflow.model.entities import CardDraft, Priority, Tag

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"^```[a-zA-Z0-9_-]*\s*|\s*```$")
_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```` ```json ```` fence and a trailing ```` ``` ```` fence."""
    return _FENCE_RE.sub("", text.strip()).strip()


def _parse_json(text: str, provider: str) -> object:
    cleaned = strip_code_fences(text)
    if not cleaned:
        raise ExtractionEmptyError("The AI returned an empty response.", provider=provider)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    match = _ARRAY_RE.search(cleaned)
    if match:
        try:
            return json.loads(match.group())
        except json.JSONDecodeError:
            pass
    logger.warning("Unparsable extraction output from %s: %.200r", provider or "provider", text)
    raise ExtractionParseError(
        "Failed to parse AI response. Please try again.", provider=provider
    )


def _draft_from_item(item: object) -> CardDraft | None:
    if not isinstance(item, Mapping):
        return None
    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        return None
    description = item.get("description")
    return CardDraft(
        title=title.strip(),
        description=description.strip() if isinstance(description, str) else "",
        priority=Priority.parse(item.get("priority"), default=Priority.MEDIUM),
        tag=Tag.parse(item.get("tag"), default=Tag.FEATURE),
    )


def normalize_drafts(raw: str | list[object], provider: ProviderId | str | None = None) -> list[CardDraft]:
    """Convert provider output into a non-empty list of ``CardDraft``.

    Parameters
    ----------
    raw:
        The model's answer text, or an already-parsed list of items.
    provider:
        Provider id, attached to any error raised.

    Returns
    -------
    list[CardDraft]
        Drafts in the order the items appeared.  Items that are not
        objects or lack a non-blank ``title`` are dropped; missing or
        unknown ``priority``/``tag`` default to ``Medium``/``Feature``.

    Raises
    ------
    ExtractionParseError
        If *raw* is text that contains no parsable JSON.
    ExtractionEmptyError
        If the output is empty, is not a JSON array, or no item survives.
    """
    pid = provider.value if isinstance(provider, ProviderId) else (provider or "")
    data = _parse_json(raw, pid) if isinstance(raw, str) else raw

    if not isinstance(data, list):
        raise ExtractionEmptyError("No tasks found in the AI response.", provider=pid)

    drafts = [draft for draft in map(_draft_from_item, data) if draft is not None]
    dropped = len(data) - len(drafts)
    if dropped:
        logger.info("Dropped %d extracted item(s) without a usable title", dropped)
    if not drafts:
        raise ExtractionEmptyError("No tasks found in the AI response.", provider=pid)
    return drafts


def normalize_response(provider: ProviderId | str, response: ProviderResponse) -> list[CardDraft]:
    """Map a transport result to drafts or to exactly one ``ExtractionError``.

    Raises
    ------
    ExtractionTransportError
        If the request never completed.
    ExtractionError
        For a non-2xx answer, the subclass chosen by the provider's adapter.
    ExtractionParseError, ExtractionEmptyError
        For a 2xx answer whose content is not a usable task list.
    """
    adapter = get_adapter(provider)
    pid = adapter.provider_id.value

    if response.error is not None:
        raise ExtractionTransportError(
            f"Could not reach {adapter.name}: {response.error}", provider=pid
        )
    if not response.ok:
        error: ExtractionError = adapter.classify_failure(response.status, response.body)
        logger.warning("%s extraction failed (%s): %s", adapter.name, error.kind.value, error.message)
        raise error

    try:
        payload = response.json()
    except json.JSONDecodeError:
        raise ExtractionParseError(
            f"{adapter.name} returned a response that is not JSON.", provider=pid, status=response.status
        ) from None
    return normalize_drafts(adapter.extract_text(payload), provider=pid)


__all__ = ["normalize_drafts", "normalize_response", "strip_code_fences"]
