"""Markdown link-list fallback parser.

Some reader proxies return a page rendered as Markdown instead of HTML.
Story links then look like::

    [![alt](thumb.jpg) 12.02.25 Category --- Title --- Teaser 7 minute read](https://site/stories/...)

The visible text is split on fixed delimiters: a leading ``dd.mm.yy``
date token, ``---`` between category/title/teaser, and a trailing
``N minute read`` token.
"""

from __future__ import annotations

import logging
import re
from urllib.parse import urljoin

from intelfeed.models import StoryCard
from intelfeed.text import is_short_date

logger = logging.getLogger(__name__)

_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)\s]+)\)")
_LINK_RE = re.compile(
    r"(?<!!)\[((?:!\[[^\]]*\]\([^)]*\)|[^\[\]])*)\]\(([^)\s]+)\)"
)
_READ_TIME_RE = re.compile(r"(\d+\s*(?:minute|min)s?\s+read)\s*$", re.IGNORECASE)
_SEGMENT_DELIMITER = "---"


def parse_markdown_links(text: str | None, path_segment: str, base_url: str) -> list[StoryCard]:
    """Extract story cards from Markdown links whose URL contains *path_segment*.

    Links are deduplicated by absolute URL, first occurrence wins.
    """
    if not text:
        return []

    try:
        cards: list[StoryCard] = []
        seen: set[str] = set()
        for match in _LINK_RE.finditer(text):
            label, target = match.group(1), match.group(2)
            url = urljoin(base_url, target.strip())
            if path_segment not in url or url in seen:
                continue
            card = _card_from_label(label, url)
            if card is None:
                continue
            seen.add(url)
            cards.append(card)
        return cards
    except Exception:
        logger.warning("Failed to parse markdown link list", exc_info=True)
        return []


def _card_from_label(label: str, url: str) -> StoryCard | None:
    thumbnail = ""
    image = _IMAGE_RE.search(label)
    if image:
        thumbnail = image.group(2)
    visible = " ".join(_IMAGE_RE.sub(" ", label).split())
    if not visible:
        return None

    read_time = ""
    read_match = _READ_TIME_RE.search(visible)
    if read_match:
        read_time = " ".join(read_match.group(1).split())
        visible = visible[: read_match.start()].strip()

    date_text = ""
    head, _, rest = visible.partition(" ")
    if is_short_date(head):
        date_text = head
        visible = rest.strip()

    parts = [p.strip() for p in visible.split(_SEGMENT_DELIMITER) if p.strip()]
    if not parts:
        return None

    categories: list[str] = [date_text] if date_text else []
    if len(parts) >= 3:
        categories.append(parts[0])
        title, teaser = parts[1], " ".join(parts[2:])
    elif len(parts) == 2:
        title, teaser = parts
    else:
        title, teaser = parts[0], ""

    return StoryCard(
        title=title,
        url=url,
        summary=f"{title}: {teaser}" if teaser else title,
        date_text=date_text,
        categories=categories,
        thumbnail=thumbnail,
        read_time=read_time,
    )
