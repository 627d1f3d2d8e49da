"""RSS/Atom parsing into the intermediate FeedItem shape.

Two entry points produce the same ``FeedItem`` model:

* ``parse_feed_text`` for raw XML text (proxy-wrapped or bare), via feedparser.
* ``feed_items_from_entries`` for feeds that arrive already converted to
  JSON (rss2json and similar services).

Each field is resolved from an ordered tuple of candidate keys so the
precedence stays reviewable.
"""

from __future__ import annotations

import io
import logging
from calendar import timegm
from datetime import UTC, datetime
from typing import Any

from intelfeed.models import Enclosure, FeedItem, ParsedFeed
from intelfeed.parsers import get_feed_parser
from intelfeed.text import first_text, get_path

logger = logging.getLogger(__name__)

# feedparser maps <description> to ``summary`` and <pubDate> to ``published``
XML_DESCRIPTION_FIELDS = ("summary", "content", "subtitle")
XML_DATE_FIELDS = ("published", "updated")
XML_PARSED_DATE_FIELDS = ("published_parsed", "updated_parsed")
XML_AUTHOR_FIELDS = ("author_detail.name", "author", "dc_creator")

JSON_LINK_FIELDS = ("link", "url", "href")
JSON_DESCRIPTION_FIELDS = (
    "description",
    "content",
    "summary",
    "contentSnippet",
    "content:encoded",
)
JSON_DATE_FIELDS = ("pubDate", "updated", "published", "isoDate", "date", "pub_date")
JSON_AUTHOR_FIELDS = ("author.name", "author", "creator", "dc:creator")
JSON_GUID_FIELDS = ("guid", "guid.#text", "id")
JSON_CATEGORY_FIELDS = ("categories", "category", "tags")


def parse_feed_text(text: str | None) -> ParsedFeed | None:
    """Parse a raw RSS/Atom document.

    Returns None when feedparser is unavailable, the text is empty, or
    the document is not a feed (parse error or unknown root with no
    entries). The caller decides what to fall back to.
    """
    if not text or not text.strip():
        return None

    parse = get_feed_parser()
    if parse is None:
        logger.debug("feedparser unavailable; skipping XML parse")
        return None

    try:
        # A stream keeps feedparser from treating short strings as paths or URLs
        parsed = parse(io.BytesIO(text.strip().encode("utf-8")))
    except Exception:
        logger.warning("Feed parser raised on input", exc_info=True)
        return None

    entries = list(parsed.get("entries") or [])
    if not entries and (parsed.get("bozo") or not parsed.get("version")):
        logger.debug("Not a parseable feed: %s", parsed.get("bozo_exception"))
        return None

    feed_meta = parsed.get("feed") or {}
    items = [_xml_entry_to_item(entry) for entry in entries]
    return ParsedFeed(title=str(feed_meta.get("title") or "").strip(), items=items)


def _xml_entry_to_item(entry: Any) -> FeedItem:
    """Convert a feedparser entry into a FeedItem."""
    description = ""
    for field in XML_DESCRIPTION_FIELDS:
        value = entry.get(field)
        if isinstance(value, list):
            value = next(
                (c.get("value") for c in value if isinstance(c, dict) and c.get("value")),
                "",
            )
        if isinstance(value, str) and value.strip():
            description = value.strip()
            break

    link = str(entry.get("link") or "").strip()
    if not link:
        for candidate in entry.get("links") or []:
            href = candidate.get("href") if isinstance(candidate, dict) else None
            if href:
                link = str(href).strip()
                break

    enclosure = None
    for candidate in entry.get("enclosures") or []:
        if isinstance(candidate, dict) and candidate.get("href"):
            enclosure = Enclosure(
                url=str(candidate.get("href", "")),
                type=str(candidate.get("type", "")),
                length=str(candidate.get("length", "")),
            )
            break

    return FeedItem(
        title=str(entry.get("title") or "").strip(),
        link=link,
        description=description,
        pub_date=_xml_pub_date(entry),
        categories=_dedupe(
            tag.get("term") or tag.get("label")
            for tag in entry.get("tags") or []
            if isinstance(tag, dict)
        ),
        enclosure=enclosure,
        author=first_text(entry, XML_AUTHOR_FIELDS),
        guid=str(entry.get("id") or "").strip(),
        comments=str(entry.get("comments") or "").strip(),
        raw={k: v for k, v in dict(entry).items() if not k.endswith("_parsed")},
    )


def _xml_pub_date(entry: Any) -> str:
    """Prefer feedparser's UTC struct_time; it honours named zones like EST."""
    for field in XML_PARSED_DATE_FIELDS:
        time_struct = entry.get(field)
        if time_struct:
            try:
                return datetime.fromtimestamp(timegm(time_struct), tz=UTC).isoformat()
            except (ValueError, OverflowError, OSError):
                continue
    return first_text(entry, XML_DATE_FIELDS)


def feed_items_from_entries(entries: list[dict[str, Any]]) -> list[FeedItem]:
    """Convert structured JSON entries into FeedItems."""
    return [_json_entry_to_item(entry) for entry in entries if isinstance(entry, dict)]


def _json_entry_to_item(entry: dict[str, Any]) -> FeedItem:
    return FeedItem(
        title=first_text(entry, ("title", "title.#text", "headline", "name")),
        link=_json_link(entry),
        description=first_text(entry, JSON_DESCRIPTION_FIELDS),
        pub_date=first_text(entry, JSON_DATE_FIELDS),
        categories=_json_categories(entry),
        enclosure=_json_enclosure(entry),
        author=first_text(entry, JSON_AUTHOR_FIELDS),
        guid=first_text(entry, JSON_GUID_FIELDS),
        comments=first_text(entry, ("comments",)),
        raw=entry,
    )


def _json_link(entry: dict[str, Any]) -> str:
    """Resolve the link: a string, an ``{href}`` object, or a list of them."""
    for field in JSON_LINK_FIELDS:
        value = entry.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
        if isinstance(value, dict):
            href = value.get("href") or value.get("url")
            if isinstance(href, str) and href.strip():
                return href.strip()
        if isinstance(value, list):
            alternates = [
                v for v in value
                if isinstance(v, dict) and str(v.get("rel") or "alternate") == "alternate"
            ]
            for candidate in alternates or value:
                href = candidate.get("href") if isinstance(candidate, dict) else candidate
                if isinstance(href, str) and href.strip():
                    return href.strip()
    return ""


def _json_categories(entry: dict[str, Any]) -> list[str]:
    terms: list[Any] = []
    for field in JSON_CATEGORY_FIELDS:
        value = entry.get(field)
        if isinstance(value, str):
            terms.append(value)
        elif isinstance(value, dict):
            terms.append(value.get("term") or value.get("name") or value.get("_"))
        elif isinstance(value, list):
            for term in value:
                if isinstance(term, dict):
                    terms.append(term.get("term") or term.get("name") or term.get("_"))
                else:
                    terms.append(term)
    return _dedupe(terms)


def _json_enclosure(entry: dict[str, Any]) -> Enclosure | None:
    value = entry.get("enclosure")
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        url = first_text(value, ("link", "url", "href"))
        if url:
            return Enclosure(
                url=url,
                type=first_text(value, ("type",)),
                length=first_text(value, ("length",)),
            )
    thumbnail = get_path(entry, "thumbnail")
    if isinstance(thumbnail, str) and thumbnail.strip():
        return Enclosure(url=thumbnail.strip(), type="image")
    return None


def _dedupe(values: Any) -> list[str]:
    """Order-preserving, case-insensitive dedupe of non-empty strings."""
    seen: set[str] = set()
    result: list[str] = []
    for value in values:
        if not isinstance(value, (str, int, float)) or isinstance(value, bool):
            continue
        text = str(value).strip()
        if text and text.lower() not in seen:
            seen.add(text.lower())
            result.append(text)
    return result
