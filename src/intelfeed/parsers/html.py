"""HTML story-card scraping for sources without a feed."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urljoin

from intelfeed.models import CardSelectors, StoryCard
from intelfeed.parsers import get_html_parser
from intelfeed.text import is_short_date, strip_html

logger = logging.getLogger(__name__)


def scrape_story_cards(html: str | None, selectors: CardSelectors) -> list[StoryCard] | None:
    """Extract story cards from a listing page.

    Returns None when the HTML parser is unavailable or the document
    cannot be processed; an empty list means the page parsed but held
    no matching cards. Both cases send the caller to its fallback.
    """
    if not html or not html.strip():
        return []

    soup_factory = get_html_parser()
    if soup_factory is None:
        logger.debug("BeautifulSoup unavailable; skipping HTML scrape")
        return None

    try:
        soup = soup_factory(html, "html.parser")
        cards: list[StoryCard] = []
        seen: set[str] = set()
        for node in soup.select(selectors.card):
            card = _card_from_node(node, selectors)
            if card is None or card.url in seen:
                continue
            seen.add(card.url)
            cards.append(card)
        return cards
    except Exception:
        logger.warning("Failed to scrape story cards from %s", selectors.base_url, exc_info=True)
        return None


def _card_from_node(node: Any, selectors: CardSelectors) -> StoryCard | None:
    href = node.get("href") if node.name == "a" else None
    if not href:
        anchor = node.select_one("a[href]")
        href = anchor.get("href") if anchor is not None else None
    if not href:
        return None

    title_node = node.select_one(selectors.title)
    title = strip_html(title_node.get_text(" ")) if title_node is not None else ""
    if not title:
        return None

    summary = ""
    if selectors.summary:
        summary_node = node.select_one(selectors.summary)
        if summary_node is not None:
            summary = strip_html(summary_node.get_text(" "))

    badges: list[str] = []
    if selectors.meta:
        badges = [
            text
            for text in (strip_html(badge.get_text(" ")) for badge in node.select(selectors.meta))
            if text
        ]

    thumbnail = ""
    if selectors.thumbnail:
        image = node.select_one(selectors.thumbnail)
        if image is not None:
            thumbnail = str(image.get("src") or image.get("data-src") or "")

    return StoryCard(
        title=title,
        url=urljoin(selectors.base_url, str(href).strip()),
        summary=summary,
        date_text=next((b for b in badges if is_short_date(b)), ""),
        categories=badges,
        thumbnail=thumbnail,
    )
