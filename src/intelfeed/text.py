"""Text extraction utilities shared by parsers and normalizers."""

from __future__ import annotations

import html
import re
import unicodedata
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from typing import Any

from dateutil import parser as date_parser

from intelfeed.models import TimestampConfidence

_TAG_RE = re.compile(r"<[^>]+>")
_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_RE = re.compile(r"[^a-z0-9]+")
_SHORT_DATE_RE = re.compile(r"^(\d{1,2})\.(\d{1,2})\.(\d{2}|\d{4})$")
_DIGITS_RE = re.compile(r"^-?\d+(\.\d+)?$")

# Epoch values above this are milliseconds
_EPOCH_MS_CUTOFF = 1e12

DEFAULT_SUMMARY_LENGTH = 500
ELLIPSIS = "..."


def strip_html(text: Any) -> str:
    """Remove markup, decode entities and collapse whitespace."""
    if not text:
        return ""
    value = _TAG_RE.sub(" ", str(text))
    value = html.unescape(value)
    # A second pass catches markup that was entity-encoded in the feed
    value = _TAG_RE.sub(" ", value)
    return _WHITESPACE_RE.sub(" ", value).strip()


def truncate(text: str, max_length: int = DEFAULT_SUMMARY_LENGTH, marker: str = ELLIPSIS) -> str:
    """Bound *text* to ``max_length`` characters, marker included.

    Text already within the bound is returned unchanged. Otherwise the
    body is cut to leave room for the whole marker, so the result never
    exceeds ``max_length`` and the marker is never split.
    """
    if len(text) <= max_length:
        return text
    body_length = max(max_length - len(marker), 0)
    return text[:body_length].rstrip() + marker


def parse_date(value: Any) -> datetime | None:
    """Parse a timestamp candidate into an aware UTC datetime.

    Accepts datetimes, epoch seconds or milliseconds (numbers or digit
    strings) and any string ``dateutil`` understands. Naive results are
    taken to be UTC. Returns None when the value cannot be parsed.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = _from_epoch(float(value))
    elif isinstance(value, str):
        candidate = value.strip()
        if not candidate:
            return None
        if _DIGITS_RE.match(candidate):
            parsed = _from_epoch(float(candidate))
        else:
            try:
                parsed = date_parser.parse(candidate)
            except (ValueError, OverflowError):
                return None
    else:
        return None

    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    try:
        return parsed.astimezone(UTC)
    except (ValueError, OverflowError):
        return None


def _from_epoch(value: float) -> datetime | None:
    if value != value:  # NaN
        return None
    if abs(value) > _EPOCH_MS_CUTOFF:
        value = value / 1000
    try:
        return datetime.fromtimestamp(value, tz=UTC)
    except (ValueError, OverflowError, OSError):
        return None


def resolve_timestamp(
    *candidates: Any, now: datetime | None = None
) -> tuple[datetime, TimestampConfidence]:
    """Return the first parseable candidate, or the current time.

    The fallback keeps records with an approximate timestamp rather than
    dropping them; the returned confidence says which path was taken.
    """
    for candidate in candidates:
        parsed = parse_date(candidate)
        if parsed is not None:
            return parsed, TimestampConfidence.EXACT
    return now or datetime.now(tz=UTC), TimestampConfidence.APPROXIMATE


def parse_short_date(token: str) -> datetime | None:
    """Parse a ``dd.mm.yy`` (or ``dd.mm.yyyy``) token."""
    match = _SHORT_DATE_RE.match(token.strip()) if token else None
    if not match:
        return None
    day, month, year = match.groups()
    fmt = "%d.%m.%y" if len(year) == 2 else "%d.%m.%Y"
    try:
        return datetime.strptime(f"{day}.{month}.{year}", fmt).replace(tzinfo=UTC)
    except ValueError:
        return None


def is_short_date(token: str) -> bool:
    return bool(token and _SHORT_DATE_RE.match(token.strip()))


def slugify(text: str, max_length: int = 80) -> str:
    """ASCII-fold and hyphenate *text* for use in ids."""
    folded = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
    slug = _SLUG_RE.sub("-", folded.lower()).strip("-")
    return slug[:max_length].rstrip("-")


def humanize_slug(text: str) -> str:
    """Turn ``ACME_CORP-EMAILS`` into ``Acme Corp Emails``.

    Mixed-case text is assumed to be human-written already and only has
    its separators replaced.
    """
    words = [w for w in re.split(r"[_\-\s]+", text.strip()) if w]
    if not words:
        return ""
    if text.upper() == text or text.lower() == text:
        return " ".join(w.capitalize() for w in words)
    return " ".join(words)


def merge_tags(*groups: Iterable[Any] | None) -> list[str]:
    """Ordered, case-folded, deduplicated union of tag groups."""
    seen: set[str] = set()
    tags: list[str] = []
    for group in groups:
        if not group:
            continue
        for tag in group:
            if tag is None or isinstance(tag, (dict, list)):
                continue
            folded = str(tag).strip().lower()
            if folded and folded not in seen:
                seen.add(folded)
                tags.append(folded)
    return tags


def get_path(mapping: Any, path: str) -> Any:
    """Follow a dotted *path* through nested dicts; None when absent."""
    current = mapping
    for part in path.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def first_text(mapping: Any, paths: Iterable[str]) -> str:
    """Return the first non-empty string among candidate *paths*.

    The candidate order is the field's documented precedence.
    """
    for path in paths:
        value = get_path(mapping, path)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def first_value(mapping: Any, paths: Iterable[str]) -> Any:
    """Return the first candidate that is present and not None or empty."""
    for path in paths:
        value = get_path(mapping, path)
        if value is not None and value != "":
            return value
    return None
