"""Generic RSS/Atom normalizer parametrized by a per-source configuration."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from intelfeed.config import IntelFeedConfig
from intelfeed.envelope import extract_entries, extract_feed_title, extract_raw_text
from intelfeed.models import (
    FeedItem,
    ItemContext,
    NormalizedDataItem,
    Priority,
    RSSNormalizerConfig,
)
from intelfeed.normalizers.base import IdAllocator, build_item, fallback_id
from intelfeed.parsers.feed import feed_items_from_entries, parse_feed_text
from intelfeed.text import humanize_slug, merge_tags, resolve_timestamp, strip_html

logger = logging.getLogger(__name__)

# Link schemes a URL hook may rewrite into something browsable
_URL_SCHEMES = ("http://", "https://", "magnet:")


def load_feed(payload: Any) -> tuple[str, list[FeedItem]]:
    """Return (feed title, items) from a raw or structured payload.

    Raw text (a proxy envelope's ``contents`` or a bare string) is tried
    as XML first; when that yields nothing the payload is treated as
    already-structured JSON.
    """
    raw_text = extract_raw_text(payload)
    if raw_text is not None:
        parsed = parse_feed_text(raw_text)
        if parsed is not None:
            return parsed.title, parsed.items

    entries = extract_entries(payload)
    if not entries:
        return "", []
    return extract_feed_title(payload), feed_items_from_entries(entries)


def resolve_link(item: FeedItem) -> str:
    """Resolve an item's URL from link, then guid when the guid is a URL."""
    for candidate in (item.link, item.guid):
        candidate = (candidate or "").strip()
        if candidate.startswith(_URL_SCHEMES):
            return candidate
    return ""


def normalize_rss_feed(
    payload: Any,
    config: RSSNormalizerConfig,
    *,
    settings: IntelFeedConfig | None = None,
) -> list[NormalizedDataItem]:
    """Turn an RSS-shaped payload into canonical records.

    Items without a resolvable link are skipped; siblings are still
    processed. The original item is kept under ``metadata["raw"]``.
    """
    feed_title, feed_items = load_feed(payload)
    if not feed_items:
        return []

    source = feed_title or config.source_fallback
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, feed_item in enumerate(feed_items):
        link = resolve_link(feed_item)
        if not link:
            logger.debug("Skipping item without link: %r", feed_item.title)
            continue

        published_at, confidence = resolve_timestamp(feed_item.pub_date)

        context = ItemContext(
            title=strip_html(feed_item.title),
            summary=strip_html(feed_item.description),
            categories=feed_item.categories,
            link=link,
            raw=feed_item.raw,
        )

        title = context.title
        if config.transform_title is not None:
            title = config.transform_title(title, context)
        if not title:
            title = _title_from_link(link)
        summary = context.summary
        if config.transform_summary is not None:
            summary = config.transform_summary(summary, context)

        context = context.model_copy(update={"title": title, "summary": summary})

        url = link
        url_tags: list[str] = []
        url_metadata: dict[str, Any] = {}
        if config.transform_url is not None:
            rewritten = config.transform_url(link, context)
            if rewritten is not None:
                url = rewritten.url
                url_tags = rewritten.tags
                url_metadata = rewritten.metadata
        if not url.startswith(("http://", "https://")):
            logger.debug("Skipping item with non-browsable link: %s", url)
            continue

        tags = merge_tags(
            config.base_tags,
            feed_item.categories,
            config.additional_tags(context) if config.additional_tags else None,
            url_tags,
        )
        priority = (
            config.priority_mapper(context) if config.priority_mapper else Priority.LOW
        )

        metadata: dict[str, Any] = {
            "author": feed_item.author or None,
            "categories": feed_item.categories,
            "guid": feed_item.guid or None,
        }
        if feed_item.enclosure is not None:
            metadata["enclosure"] = feed_item.enclosure.model_dump()
        if config.metadata_enricher is not None:
            metadata.update(config.metadata_enricher(context))
        metadata.update(url_metadata)
        metadata["raw"] = feed_item.raw

        base_id = feed_item.guid or fallback_id(title, source, index, published_at)
        if config.id_prefix:
            base_id = f"{config.id_prefix}-{base_id}"

        record = build_item(
            id=ids.claim(base_id, index),
            title=title,
            summary=summary,
            url=url,
            published_at=published_at,
            timestamp_confidence=confidence,
            source=source,
            category=config.category,
            tags=tags,
            priority=priority,
            trust_rating=config.trust_rating,
            verification_status=config.verification_status,
            data_quality=config.data_quality,
            metadata=metadata,
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


def _title_from_link(link: str) -> str:
    path = urlparse(link).path.rstrip("/")
    return humanize_slug(path.rsplit("/", 1)[-1]) if path else ""
