# ABOUTME: Converts between MatchOutcome variants and their stored JSON form.
# ABOUTME: Cache values are {"outcome": {...}, "storedAtEpochMillis": int}.

import json
from dataclasses import dataclass
from typing import Any

from ireaderlink.matching.types import Found, MatchOutcome, NotFound, Uncertain


class CorruptEntryError(ValueError):
    """Raised when a stored cache value cannot be decoded."""


@dataclass(frozen=True)
class CacheEntry:
    """A cached outcome plus the time it was written, in epoch milliseconds."""

    outcome: MatchOutcome
    stored_at_ms: int


def outcome_to_dict(outcome: MatchOutcome) -> dict[str, Any]:
    """Convert an outcome to a tagged dict."""
    if isinstance(outcome, Found):
        return {"kind": "found", "url": outcome.url, "title": outcome.title}
    if isinstance(outcome, Uncertain):
        return {"kind": "uncertain", "searchUrl": outcome.search_url}
    return {"kind": "not_found"}


def dict_to_outcome(data: Any) -> MatchOutcome:
    """Rebuild an outcome from its tagged dict.

    Raises:
        CorruptEntryError: On an unknown kind or missing/non-string fields.
    """
    if not isinstance(data, dict):
        raise CorruptEntryError(f"outcome must be an object, got {type(data).__name__}")

    kind = data.get("kind")
    if kind == "not_found":
        return NotFound()
    if kind == "found":
        url, title = data.get("url"), data.get("title")
        if isinstance(url, str) and isinstance(title, str):
            return Found(url=url, title=title)
    elif kind == "uncertain":
        search_url = data.get("searchUrl")
        if isinstance(search_url, str):
            return Uncertain(search_url=search_url)
    raise CorruptEntryError(f"malformed outcome: {data!r}")


def entry_to_json(entry: CacheEntry) -> str:
    """Serialize a cache entry for the key/value store."""
    return json.dumps(
        {
            "outcome": outcome_to_dict(entry.outcome),
            "storedAtEpochMillis": entry.stored_at_ms,
        },
        ensure_ascii=False,
    )


def json_to_entry(raw: str) -> CacheEntry:
    """Deserialize a stored value back to a CacheEntry.

    Raises:
        CorruptEntryError: If the value is not valid JSON or has the wrong shape.
    """
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise CorruptEntryError(f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise CorruptEntryError("cache value must be an object")

    stored_at = data.get("storedAtEpochMillis")
    # bool is an int subclass; a true/false timestamp is still corrupt.
    if isinstance(stored_at, bool) or not isinstance(stored_at, (int, float)) or not stored_at:
        raise CorruptEntryError(f"bad timestamp: {stored_at!r}")

    return CacheEntry(outcome=dict_to_outcome(data.get("outcome")), stored_at_ms=int(stored_at))
