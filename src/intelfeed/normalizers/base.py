"""Record assembly shared by every normalizer."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from pydantic import ValidationError

from intelfeed.config import DEFAULT_CONFIG, IntelFeedConfig
from intelfeed.models import (
    NormalizedDataItem,
    Priority,
    TimestampConfidence,
    VerificationStatus,
)
from intelfeed.text import merge_tags, slugify, strip_html, truncate

logger = logging.getLogger(__name__)


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def as_number(value: Any) -> float | None:
    """Return *value* as a float when it is numeric (bools excluded)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def fallback_id(title: str, source: str, index: int, published_at: datetime) -> str:
    """Deterministic id for items without an upstream identifier.

    The ordinal keeps two items published in the same second apart.
    """
    slug = slugify(f"{title}-{source}", max_length=60) or "item"
    return f"{slug}-{index}-{int(published_at.timestamp())}"


class IdAllocator:
    """Hands out ids that are unique within one normalizer call."""

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def claim(self, candidate: str, index: int) -> str:
        item_id = candidate
        if item_id in self._seen:
            item_id = f"{candidate}-{index}"
        suffix = 1
        while item_id in self._seen:
            item_id = f"{candidate}-{index}-{suffix}"
            suffix += 1
        self._seen.add(item_id)
        return item_id


def build_item(
    *,
    id: str,
    title: Any,
    summary: Any,
    url: Any,
    published_at: datetime,
    source: str,
    category: str,
    tags: list[Any] | None = None,
    priority: Priority = Priority.LOW,
    trust_rating: int = 50,
    verification_status: VerificationStatus = VerificationStatus.UNVERIFIED,
    data_quality: int = 50,
    metadata: dict[str, Any] | None = None,
    timestamp_confidence: TimestampConfidence = TimestampConfidence.EXACT,
    config: IntelFeedConfig | None = None,
) -> NormalizedDataItem | None:
    """Assemble a canonical record, or None if it would break an invariant.

    Title and summary are markup-stripped here; the summary is truncated
    to the configured bound.
    """
    settings = (config or DEFAULT_CONFIG).normalizer
    clean_title = strip_html(title)
    clean_summary = strip_html(summary) or clean_title
    try:
        return NormalizedDataItem(
            id=str(id),
            title=clean_title,
            summary=truncate(clean_summary, settings.summary_max_length, settings.ellipsis),
            url=str(url or "").strip(),
            published_at=published_at,
            timestamp_confidence=timestamp_confidence,
            source=source,
            category=category,
            tags=merge_tags(tags),
            priority=priority,
            trust_rating=trust_rating,
            verification_status=verification_status,
            data_quality=data_quality,
            metadata=metadata or {},
        )
    except ValidationError as exc:
        logger.debug("Skipping malformed record %r: %s", title, exc)
        return None
