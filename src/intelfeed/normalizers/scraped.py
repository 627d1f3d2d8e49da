"""Investigative outlets without a feed, scraped from their listing pages.

The payload is the page as text, either bare or inside a proxy envelope.
HTML story cards are tried first; when none are found (or no HTML parser
is available) the text is read as a Markdown link list, which is what
reader proxies return for the same page.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlparse

from intelfeed.config import IntelFeedConfig
from intelfeed.envelope import extract_raw_text
from intelfeed.models import (
    CardSelectors,
    ItemContext,
    NormalizedDataItem,
    Priority,
    ScrapedSourceConfig,
    StoryCard,
    TimestampConfidence,
)
from intelfeed.normalizers import priority as p
from intelfeed.normalizers.base import IdAllocator, build_item
from intelfeed.parsers.html import scrape_story_cards
from intelfeed.parsers.markdown import parse_markdown_links
from intelfeed.text import is_short_date, merge_tags, parse_short_date, resolve_timestamp, slugify

logger = logging.getLogger(__name__)

TBIJ = ScrapedSourceConfig(
    source="The Bureau of Investigative Journalism",
    category="investigative",
    id_prefix="tbij",
    path_segment="/stories/",
    selectors=CardSelectors(
        base_url="https://www.thebureauinvestigates.com",
        card="a.tb-c-story-preview",
        title=".tb-c-story-preview__heading",
        summary=".tb-c-story-preview__body",
        meta=".tb-c-story-preview__meta-item",
        thumbnail="img",
    ),
    base_tags=["investigative", "tbij"],
    trust_rating=90,
    data_quality=85,
    priority_mapper=p.keyword_mapper(p.INVESTIGATIVE_RULES, default=Priority.MEDIUM),
)

OCCRP = ScrapedSourceConfig(
    source="Organized Crime and Corruption Reporting Project",
    category="investigative",
    id_prefix="occrp",
    path_segment="/en/investigations/",
    selectors=CardSelectors(
        base_url="https://www.occrp.org",
        card="article.story-card",
        title=".story-card__title",
        summary=".story-card__lead",
        meta=".story-card__tag, time",
        thumbnail="img",
    ),
    base_tags=["investigative", "occrp", "corruption"],
    trust_rating=88,
    data_quality=82,
    priority_mapper=p.keyword_mapper(p.INVESTIGATIVE_RULES, default=Priority.MEDIUM),
)


def load_story_cards(payload: Any, config: ScrapedSourceConfig) -> list[StoryCard]:
    """HTML cards, or the Markdown link list when the HTML yields none."""
    text = extract_raw_text(payload)
    if text is None:
        return []

    cards = scrape_story_cards(text, config.selectors)
    if cards:
        return cards

    logger.debug("No story cards for %s; trying markdown link list", config.source)
    return parse_markdown_links(text, config.path_segment, config.selectors.base_url)


def normalize_scraped_listing(
    payload: Any,
    config: ScrapedSourceConfig,
    *,
    settings: IntelFeedConfig | None = None,
) -> list[NormalizedDataItem]:
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, card in enumerate(load_story_cards(payload, config)):
        published = parse_short_date(card.date_text)
        if published is not None:
            published_at, confidence = published, TimestampConfidence.EXACT
        else:
            published_at, confidence = resolve_timestamp(None)

        # Date badges are kept in metadata but are not topics
        topics = [c for c in card.categories if not is_short_date(c)]
        context = ItemContext(
            title=card.title,
            summary=card.summary,
            categories=topics,
            link=card.url,
        )
        priority = config.priority_mapper(context) if config.priority_mapper else Priority.LOW

        path = urlparse(card.url).path
        record = build_item(
            id=ids.claim(f"{config.id_prefix}-{slugify(path) or index}", index),
            title=card.title,
            summary=card.summary,
            url=card.url,
            published_at=published_at,
            timestamp_confidence=confidence,
            source=config.source,
            category=config.category,
            tags=merge_tags(config.base_tags, topics),
            priority=priority,
            trust_rating=config.trust_rating,
            verification_status=config.verification_status,
            data_quality=config.data_quality,
            metadata={
                "categories": card.categories,
                "thumbnail": card.thumbnail or None,
                "dateText": card.date_text or None,
                "raw": {
                    "title": card.title,
                    "url": card.url,
                    "summary": card.summary,
                    "dateText": card.date_text,
                    "categories": card.categories,
                    "thumbnail": card.thumbnail,
                    "readTime": card.read_time or None,
                },
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


def normalize_tbij_investigations(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_scraped_listing(payload, TBIJ, settings=settings)


def normalize_occrp_investigations(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    return normalize_scraped_listing(payload, OCCRP, settings=settings)
