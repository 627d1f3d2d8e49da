"""Envelope sniffing -- locate the list of raw entries inside a payload."""

from __future__ import annotations

from typing import Any

from intelfeed.text import first_text, get_path

# Checked in order after the direct-list case
ENTRY_PATHS: tuple[str, ...] = (
    "items",
    "entries",
    "feed.items",
    "data.items",
)

FEED_TITLE_PATHS: tuple[str, ...] = (
    "feed.title",
    "title",
    "data.title",
)


def extract_entries(payload: Any) -> list[dict[str, Any]]:
    """Return the raw entry dicts carried by *payload*.

    Unrecognized shapes produce an empty list rather than an error.
    Non-dict members of the located list are dropped.
    """
    candidates: Any = None
    if isinstance(payload, list):
        candidates = payload
    elif isinstance(payload, dict):
        for path in ENTRY_PATHS:
            value = get_path(payload, path)
            if isinstance(value, list):
                candidates = value
                break

    if not candidates:
        return []
    return [entry for entry in candidates if isinstance(entry, dict)]


def extract_feed_title(payload: Any) -> str:
    """Return the feed's own title, or an empty string."""
    if not isinstance(payload, dict):
        return ""
    return first_text(payload, FEED_TITLE_PATHS)


def extract_raw_text(payload: Any) -> str | None:
    """Return the raw XML/HTML text of a proxy envelope or bare string.

    CORS proxies wrap the upstream body as ``{"contents": "<rss>..."}``.
    """
    if isinstance(payload, str):
        return payload if payload.strip() else None
    if isinstance(payload, dict):
        contents = payload.get("contents")
        if isinstance(contents, str) and contents.strip():
            return contents
    return None
