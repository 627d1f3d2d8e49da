"""Raw-format parsers -- XML feeds, HTML listings, Markdown link lists.

The XML and HTML facilities are optional at runtime. The capability
checks below return the parsing callable, or None when its library is
not importable; callers treat None as a normal fallback path.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

try:
    import feedparser

    _HAS_FEEDPARSER = True
except ImportError:
    feedparser = None  # type: ignore[assignment]
    _HAS_FEEDPARSER = False

try:
    from bs4 import BeautifulSoup

    _HAS_BS4 = True
except ImportError:
    BeautifulSoup = None  # type: ignore[assignment,misc]
    _HAS_BS4 = False


def get_feed_parser() -> Callable[..., Any] | None:
    """Return ``feedparser.parse`` if feedparser is installed."""
    if not _HAS_FEEDPARSER:
        return None
    return feedparser.parse


def get_html_parser() -> Callable[..., Any] | None:
    """Return a ``BeautifulSoup`` factory if bs4 is installed."""
    if not _HAS_BS4:
        return None
    return BeautifulSoup
