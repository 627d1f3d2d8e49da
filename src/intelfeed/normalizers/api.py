"""Normalizers for JSON APIs with a known (but loosely honoured) shape.

Every function accepts anything and returns a list. Field lookups go
through ordered candidate tuples so the precedence of each field can be
read off the module constants.
"""

from __future__ import annotations

import logging
from typing import Any

from intelfeed.config import IntelFeedConfig
from intelfeed.envelope import extract_entries
from intelfeed.models import (
    NormalizedDataItem,
    Priority,
    TimestampConfidence,
    VerificationStatus,
)
from intelfeed.normalizers import priority as p
from intelfeed.normalizers.base import (
    IdAllocator,
    as_dict,
    as_list,
    as_number,
    build_item,
    fallback_id,
)
from intelfeed.text import first_text, first_value, get_path, resolve_timestamp, strip_html

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# NOAA weather alerts
# ---------------------------------------------------------------------------

NOAA_TITLE_FIELDS = ("headline", "event")
NOAA_URL_FIELDS = ("web", "@id")
NOAA_DATE_FIELDS = ("sent", "effective", "onset", "expires")


def normalize_noaa_alerts(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """NWS alerts API: ``{"features": [{"id", "properties": {...}}]}``."""
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, feature in enumerate(as_list(as_dict(payload).get("features"))):
        feature = as_dict(feature)
        props = as_dict(feature.get("properties"))
        parameters = as_dict(props.get("parameters"))

        headline = parameters.get("NWSheadline")
        if isinstance(headline, list):
            headline = headline[0] if headline else None
        title = first_text(props, NOAA_TITLE_FIELDS) or strip_html(headline) or "NOAA Alert"
        description = strip_html(props.get("description")) or strip_html(props.get("instruction"))
        url = first_text(props, NOAA_URL_FIELDS) or first_text(feature, ("id",))
        published_at, confidence = resolve_timestamp(*(props.get(f) for f in NOAA_DATE_FIELDS))

        severity = first_text(props, ("severity",))
        event = first_text(props, ("event",))
        base_id = first_text(feature, ("id",)) or first_text(props, ("id",))

        record = build_item(
            id=ids.claim(base_id or fallback_id(title, "noaa", index, published_at), index),
            title=title,
            summary=description,
            url=url,
            published_at=published_at,
            timestamp_confidence=confidence,
            source="NOAA Weather Service",
            category="weather-alert",
            tags=[event, severity, "weather"],
            priority=p.keyword_priority(severity, p.NOAA_SEVERITY_RULES),
            trust_rating=95,
            verification_status=VerificationStatus.OFFICIAL,
            data_quality=98,
            metadata={
                "severity": severity or None,
                "urgency": props.get("urgency"),
                "certainty": props.get("certainty"),
                "areas": props.get("areaDesc"),
                "event": event or None,
                "expires": props.get("expires"),
                "parameters": parameters,
                "raw": feature,
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# NASA astronomy picture of the day
# ---------------------------------------------------------------------------

APOD_PAGE_URL = "https://apod.nasa.gov/apod/ap{stamp}.html"


def normalize_nasa_apod(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """APOD returns a single object, or a list when ``count``/date ranges are used."""
    entries = payload if isinstance(payload, list) else [payload]
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry:
            continue
        date_text = first_text(entry, ("date",))
        published_at, confidence = resolve_timestamp(date_text)
        url = first_text(entry, ("url", "hdurl"))
        if not url and confidence is TimestampConfidence.EXACT:
            url = APOD_PAGE_URL.format(stamp=published_at.strftime("%y%m%d"))

        media_type = first_text(entry, ("media_type",)) or "image"
        explanation = first_text(entry, ("explanation",))
        title = first_text(entry, ("title",))

        record = build_item(
            id=ids.claim(f"nasa-apod-{date_text or index}", index),
            title=title,
            summary=explanation,
            url=url,
            published_at=published_at,
            timestamp_confidence=confidence,
            source="NASA APOD",
            category="space",
            tags=["astronomy", "space", "nasa", media_type],
            priority=Priority.MEDIUM,
            trust_rating=100,
            verification_status=VerificationStatus.OFFICIAL,
            data_quality=100,
            metadata={
                "mediaType": media_type,
                "hdUrl": entry.get("hdurl"),
                "copyright": strip_html(entry.get("copyright")) or None,
                "fullExplanation": explanation,
                "raw": entry,
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# GitHub security advisories
# ---------------------------------------------------------------------------

ADVISORY_ID_FIELDS = ("ghsa_id", "id", "cve_id")
ADVISORY_URL_FIELDS = ("html_url", "url", "repository_advisory_url")
ADVISORY_DATE_FIELDS = ("published_at", "github_reviewed_at", "updated_at")
ADVISORY_CVSS_FIELDS = (
    "cvss.score",
    "cvss_severities.cvss_v3.score",
    "cvss_severities.cvss_v4.score",
)


def advisory_cve(advisory: dict[str, Any]) -> str:
    """CVE id from ``cve_id`` or the first ``identifiers`` entry of type CVE."""
    cve = first_text(advisory, ("cve_id",))
    if cve:
        return cve
    for identifier in as_list(advisory.get("identifiers")):
        identifier = as_dict(identifier)
        if str(identifier.get("type", "")).upper() == "CVE" and identifier.get("value"):
            return str(identifier["value"])
    return ""


def advisory_priority(advisory: dict[str, Any]) -> Priority:
    """CVSS score when present (and non-zero), else the severity label."""
    for path in ADVISORY_CVSS_FIELDS:
        score = as_number(get_path(advisory, path))
        if score:
            return p.threshold_priority(score, p.CVSS_THRESHOLDS)
    severity = first_text(advisory, ("severity",)).lower()
    return p.keyword_priority(severity, p.ADVISORY_SEVERITY_RULES, default=Priority.MEDIUM)


def normalize_github_advisories(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    if isinstance(payload, list):
        advisories = payload
    else:
        advisories = as_list(as_dict(payload).get("security_advisories"))

    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, advisory in enumerate(advisories):
        if not isinstance(advisory, dict):
            continue
        cve = advisory_cve(advisory)
        title = first_text(advisory, ("summary", "description")) or "Security advisory"
        published_at, confidence = resolve_timestamp(
            *(advisory.get(f) for f in ADVISORY_DATE_FIELDS)
        )
        severity = first_text(advisory, ("severity",)).lower()
        base_id = first_text(advisory, ADVISORY_ID_FIELDS)

        record = build_item(
            id=ids.claim(base_id or fallback_id(title, "ghsa", index, published_at), index),
            title=title,
            summary=first_text(advisory, ("description", "summary")),
            url=first_text(advisory, ADVISORY_URL_FIELDS),
            published_at=published_at,
            timestamp_confidence=confidence,
            source="GitHub Security",
            category="security",
            tags=["security", "vulnerability", severity or "unknown", cve],
            priority=advisory_priority(advisory),
            trust_rating=90,
            verification_status=VerificationStatus.OFFICIAL,
            data_quality=95,
            metadata={
                "cveId": cve or None,
                "ghsaId": advisory.get("ghsa_id"),
                "severity": severity or None,
                "identifiers": advisory.get("identifiers"),
                "references": advisory.get("references"),
                "cvss": advisory.get("cvss") or advisory.get("cvss_severities"),
                "vulnerabilities": advisory.get("vulnerabilities"),
                "cwes": advisory.get("cwes"),
                "withdrawnAt": advisory.get("withdrawn_at"),
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# Alpha Vantage news sentiment
# ---------------------------------------------------------------------------


def normalize_alpha_vantage_news(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """``NEWS_SENTIMENT`` endpoint: ``{"feed": [...]}``.

    Priority follows the magnitude of the overall sentiment score, so
    strongly negative coverage ranks like strongly positive coverage.
    """
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, article in enumerate(as_list(as_dict(payload).get("feed"))):
        if not isinstance(article, dict):
            continue
        url = first_text(article, ("url",))
        title = first_text(article, ("title",))
        published_at, confidence = resolve_timestamp(article.get("time_published"))
        sentiment = as_number(article.get("overall_sentiment_score"))
        outlet = first_text(article, ("source",))
        section = first_text(article, ("category_within_source",))
        tickers = [
            str(entry["ticker"])
            for entry in as_list(article.get("ticker_sentiment"))
            if isinstance(entry, dict) and entry.get("ticker")
        ]

        slug = url.rstrip("/").rsplit("/", 1)[-1] if url else ""
        record = build_item(
            id=ids.claim(f"av-{slug}" if slug else fallback_id(title, "av", index, published_at), index),
            title=title,
            summary=first_text(article, ("summary",)),
            url=url,
            published_at=published_at,
            timestamp_confidence=confidence,
            source=f"{outlet} (Alpha Vantage)" if outlet else "Alpha Vantage",
            category="financial",
            tags=["finance", "news", section if section.lower() != "n/a" else None],
            priority=p.threshold_priority(
                abs(sentiment) if sentiment is not None else None, p.SENTIMENT_THRESHOLDS
            ),
            trust_rating=80,
            verification_status=VerificationStatus.VERIFIED,
            data_quality=85,
            metadata={
                "bannerImage": article.get("banner_image"),
                "sentimentScore": sentiment,
                "sentimentLabel": article.get("overall_sentiment_label"),
                "tickerSentiment": article.get("ticker_sentiment"),
                "tickers": tickers,
                "sourceCategory": section or None,
                "authors": article.get("authors"),
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# Reddit listings
# ---------------------------------------------------------------------------

REDDIT_BASE_URL = "https://reddit.com"
DISCUSSION_PLACEHOLDER = "Click to view discussion"


def normalize_reddit_posts(
    payload: Any,
    *,
    subreddit: str = "",
    settings: IntelFeedConfig | None = None,
) -> list[NormalizedDataItem]:
    """Listing JSON: ``{"data": {"children": [{"data": {...}}]}}``.

    The subreddit is read per post; *subreddit* only fills in when a post
    does not name one.
    """
    children = as_list(get_path(payload, "data.children"))
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, child in enumerate(children):
        post = as_dict(as_dict(child).get("data"))
        if not post:
            continue
        post_id = first_text(post, ("id",))
        sub = first_text(post, ("subreddit",)) or subreddit or "reddit"
        title = first_text(post, ("title",))
        published_at, confidence = resolve_timestamp(post.get("created_utc"))
        score = as_number(post.get("score"))

        link = first_text(post, ("url", "permalink"))
        if link and not link.startswith(("http://", "https://")):
            link = REDDIT_BASE_URL + (link if link.startswith("/") else f"/{link}")

        record = build_item(
            id=ids.claim(
                f"reddit-{post_id}" if post_id else fallback_id(title, sub, index, published_at),
                index,
            ),
            title=title,
            summary=strip_html(post.get("selftext")) or DISCUSSION_PLACEHOLDER,
            url=link,
            published_at=published_at,
            timestamp_confidence=confidence,
            source=f"Reddit r/{sub}",
            category="social",
            tags=["reddit", "discussion", sub, post.get("link_flair_text")],
            priority=p.threshold_priority(score, p.SOCIAL_SCORE_THRESHOLDS),
            trust_rating=60,
            verification_status=VerificationStatus.UNVERIFIED,
            data_quality=75,
            metadata={
                "author": post.get("author"),
                "score": score,
                "numComments": post.get("num_comments"),
                "ups": post.get("ups"),
                "downs": post.get("downs"),
                "subreddit": sub,
                "redditPostId": post_id or None,
                "commentsUrl": f"{REDDIT_BASE_URL}/r/{sub}/comments/{post_id}/" if post_id else None,
                "originalUrl": post.get("url"),
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# USGS earthquakes
# ---------------------------------------------------------------------------

USGS_EVENT_URL = "https://earthquake.usgs.gov/earthquakes/eventpage/{id}"


def _coordinate(coords: list[Any], position: int) -> float | None:
    return as_number(coords[position]) if len(coords) > position else None


def normalize_usgs_earthquakes(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """GeoJSON summary feed; coordinates are ``[lon, lat, depth_km]``."""
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, quake in enumerate(as_list(as_dict(payload).get("features"))):
        quake = as_dict(quake)
        props = as_dict(quake.get("properties"))
        coords = as_list(as_dict(quake.get("geometry")).get("coordinates"))
        if not props:
            continue

        magnitude = as_number(props.get("mag"))
        place = first_text(props, ("place",)) or "Unknown location"
        quake_id = first_text(quake, ("id",)) or first_text(props, ("code",))
        published_at, confidence = resolve_timestamp(props.get("time"))

        if magnitude is not None:
            title = first_text(props, ("title",)) or f"M{magnitude:g} Earthquake - {place}"
            summary = f"Magnitude {magnitude:g} earthquake {place}"
        else:
            title = first_text(props, ("title",)) or f"Earthquake - {place}"
            summary = f"Earthquake {place}"
        url = first_text(props, ("url",)) or (USGS_EVENT_URL.format(id=quake_id) if quake_id else "")

        tags = ["earthquake", "geology", "hazard"]
        if props.get("tsunami") == 1:
            tags.append("tsunami")

        record = build_item(
            id=ids.claim(quake_id or fallback_id(place, "usgs", index, published_at), index),
            title=title,
            summary=summary,
            url=url,
            published_at=published_at,
            timestamp_confidence=confidence,
            source="USGS Earthquake Hazards",
            category="seismic",
            tags=tags,
            priority=p.threshold_priority(magnitude, p.MAGNITUDE_THRESHOLDS),
            trust_rating=98,
            verification_status=VerificationStatus.OFFICIAL,
            data_quality=100,
            metadata={
                "magnitude": magnitude,
                "location": place,
                "depth": _coordinate(coords, 2),
                "latitude": _coordinate(coords, 1),
                "longitude": _coordinate(coords, 0),
                "magType": props.get("magType"),
                "significance": props.get("sig"),
                "felt": props.get("felt"),
                "alert": props.get("alert"),
                "tsunami": props.get("tsunami"),
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# CoinGecko
# ---------------------------------------------------------------------------

COINGECKO_URL = "https://www.coingecko.com"
COINGECKO_COIN_URL = COINGECKO_URL + "/en/coins/{id}"


def normalize_coingecko(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """Handles ``/search/trending``, ``/coins/markets`` and ``/global`` responses."""
    if isinstance(payload, dict) and isinstance(payload.get("coins"), list):
        coins = [as_dict(entry.get("item")) or entry for entry in payload["coins"] if isinstance(entry, dict)]
        return _coingecko_coins(coins, "trending", settings)
    if isinstance(payload, list):
        return _coingecko_coins([c for c in payload if isinstance(c, dict)], "markets", settings)
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return _coingecko_global(payload["data"], settings)
    return []


def _coingecko_coins(
    coins: list[dict[str, Any]], kind: str, settings: IntelFeedConfig | None
) -> list[NormalizedDataItem]:
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, coin in enumerate(coins):
        coin_id = first_text(coin, ("id",))
        name = first_text(coin, ("name", "symbol")) or "Crypto Asset"
        published_at, confidence = resolve_timestamp(coin.get("last_updated"))

        if kind == "trending":
            summary = f"Trending: {name}"
            rank = first_text(coin, ("market_cap_rank",))
            if rank:
                summary += f" (market cap rank {rank})"
        else:
            price = first_text(coin, ("current_price",))
            summary = f"{name} price: ${price}" if price else name
            change = as_number(coin.get("price_change_percentage_24h"))
            if change is not None:
                summary += f" ({change:+.2f}% 24h)"

        record = build_item(
            id=ids.claim(f"cg-{coin_id}" if coin_id else f"cg-{kind}-{index}", index),
            title=name,
            summary=summary,
            url=COINGECKO_COIN_URL.format(id=coin_id) if coin_id else COINGECKO_URL,
            published_at=published_at,
            timestamp_confidence=confidence,
            source="CoinGecko",
            category="financial",
            tags=["crypto", kind, first_text(coin, ("symbol",))],
            priority=Priority.MEDIUM,
            trust_rating=80,
            verification_status=VerificationStatus.VERIFIED,
            data_quality=85,
            metadata=dict(coin),
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


def _coingecko_global(
    data: dict[str, Any], settings: IntelFeedConfig | None
) -> list[NormalizedDataItem]:
    published_at, confidence = resolve_timestamp(data.get("updated_at"))
    active = first_text(data, ("active_cryptocurrencies",)) or "unknown"
    record = build_item(
        id=f"cg-global-{int(published_at.timestamp())}",
        title="Crypto Market Overview",
        summary=f"Active Cryptocurrencies: {active}",
        url=COINGECKO_URL,
        published_at=published_at,
        timestamp_confidence=confidence,
        source="CoinGecko",
        category="financial",
        tags=["crypto", "global"],
        priority=Priority.MEDIUM,
        trust_rating=80,
        verification_status=VerificationStatus.VERIFIED,
        data_quality=85,
        metadata=dict(data),
        config=settings,
    )
    return [record] if record is not None else []


# ---------------------------------------------------------------------------
# Hacker News
# ---------------------------------------------------------------------------

HN_ITEM_URL = "https://news.ycombinator.com/item?id={id}"


def normalize_hacker_news(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """Firebase item JSON, a single item or a list of items."""
    entries = payload if isinstance(payload, list) else [payload]
    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry:
            continue
        item_id = first_text(entry, ("id",))
        item_type = first_text(entry, ("type",)) or "story"
        title = first_text(entry, ("title",)) or (
            "Ask HN" if item_type == "ask" else "Hacker News Discussion"
        )
        published_at, confidence = resolve_timestamp(entry.get("time"))
        score = as_number(entry.get("score"))

        tags = ["hackernews"]
        lowered = title.lower()
        if lowered.startswith("ask hn"):
            tags.append("ask-hn")
        if lowered.startswith("show hn"):
            tags.append("show-hn")
        if item_type == "job":
            tags.append("jobs")

        record = build_item(
            id=ids.claim(f"hn-{item_id or 'unknown'}", index),
            title=title,
            summary=strip_html(entry.get("text")) or DISCUSSION_PLACEHOLDER,
            url=first_text(entry, ("url",)) or (HN_ITEM_URL.format(id=item_id) if item_id else ""),
            published_at=published_at,
            timestamp_confidence=confidence,
            source="Hacker News",
            category="jobs" if item_type == "job" else "technology",
            tags=tags,
            priority=p.threshold_priority(score or 0, p.SOCIAL_SCORE_THRESHOLDS),
            trust_rating=75,
            verification_status=VerificationStatus.UNVERIFIED,
            data_quality=85,
            metadata={
                "by": entry.get("by"),
                "score": score,
                "descendants": entry.get("descendants"),
                "type": item_type,
                "kids": entry.get("kids"),
                "discussionUrl": HN_ITEM_URL.format(id=item_id) if item_id else None,
            },
            config=settings,
        )
        if record is not None:
            results.append(record)

    return results


# ---------------------------------------------------------------------------
# Launch Library 2
# ---------------------------------------------------------------------------

def _launch_url(launch: dict[str, Any]) -> str:
    for key in ("info_urls", "infoURLs", "vid_urls", "vidURLs"):
        for entry in as_list(launch.get(key)):
            if isinstance(entry, str) and entry.startswith("http"):
                return entry
            url = first_text(entry, ("url",))
            if url.startswith("http"):
                return url
    return first_text(launch, ("url",))


def normalize_launch_library(
    payload: Any, *, settings: IntelFeedConfig | None = None
) -> list[NormalizedDataItem]:
    """Launch Library 2 ``/launch/upcoming`` style ``{"results": [...]}``."""
    results_list = as_list(as_dict(payload).get("results"))
    if not results_list and isinstance(payload, list):
        results_list = payload

    ids = IdAllocator()
    records: list[NormalizedDataItem] = []

    for index, launch in enumerate(results_list):
        if not isinstance(launch, dict):
            continue
        name = first_text(launch, ("name",))
        status = first_text(launch, ("status.name",))
        status_abbrev = first_text(launch, ("status.abbrev",))
        provider = first_text(launch, ("launch_service_provider.name",))
        vehicle = first_text(launch, ("rocket.configuration.full_name", "rocket.configuration.name"))
        pad = first_text(launch, ("pad.name",))
        location = first_text(launch, ("pad.location.name",))
        mission = as_dict(launch.get("mission"))
        published_at, confidence = resolve_timestamp(
            launch.get("net"), launch.get("window_start"), launch.get("last_updated")
        )

        summary = first_text(mission, ("description",))
        if not summary:
            parts = [f"{vehicle} launch" if vehicle else "Launch"]
            if location:
                parts.append(f"from {location}")
            if status:
                parts.append(f"({status})")
            summary = " ".join(parts)

        record = build_item(
            id=ids.claim(
                f"ll2-{first_text(launch, ('id',))}"
                if first_text(launch, ("id",))
                else fallback_id(name, "ll2", index, published_at),
                index,
            ),
            title=name,
            summary=summary,
            url=_launch_url(launch),
            published_at=published_at,
            timestamp_confidence=confidence,
            source="Launch Library 2",
            category="space-operations",
            tags=["launch", "space", provider, status_abbrev, first_text(mission, ("type",))],
            priority=p.keyword_priority(f"{status} {status_abbrev}", p.LAUNCH_STATUS_RULES),
            trust_rating=90,
            verification_status=VerificationStatus.VERIFIED,
            data_quality=92,
            metadata={
                "vehicle": vehicle or None,
                "launchSite": location or None,
                "pad": pad or None,
                "provider": provider or None,
                "status": status or None,
                "windowStart": launch.get("window_start"),
                "windowEnd": launch.get("window_end"),
                "missionName": mission.get("name"),
                "orbit": get_path(mission, "orbit.name"),
                "image": launch.get("image"),
                "webcastLive": launch.get("webcast_live"),
            },
            config=settings,
        )
        if record is not None:
            records.append(record)

    return records


# ---------------------------------------------------------------------------
# Generic records
# ---------------------------------------------------------------------------

GENERIC_TITLE_FIELDS = ("title", "name", "headline")
GENERIC_SUMMARY_FIELDS = ("summary", "description", "content", "text")
GENERIC_URL_FIELDS = ("url", "link", "href")
GENERIC_DATE_FIELDS = ("publishedAt", "published_at", "pubDate", "published", "created", "timestamp", "date")


def normalize_generic(
    payload: Any,
    *,
    source: str = "Generic Feed",
    category: str = "general",
    settings: IntelFeedConfig | None = None,
) -> list[NormalizedDataItem]:
    """Best-effort mapping for any list or object of loosely shaped records."""
    entries = extract_entries(payload)
    if not entries and isinstance(payload, dict):
        entries = [payload]

    ids = IdAllocator()
    results: list[NormalizedDataItem] = []

    for index, entry in enumerate(entries):
        title = first_text(entry, GENERIC_TITLE_FIELDS) or "Untitled"
        published_at, confidence = resolve_timestamp(first_value(entry, GENERIC_DATE_FIELDS))
        upstream_tags = entry.get("tags")
        base_id = first_text(entry, ("id", "guid"))

        record = build_item(
            id=ids.claim(base_id or fallback_id(title, source, index, published_at), index),
            title=title,
            summary=first_text(entry, GENERIC_SUMMARY_FIELDS) or "No description available",
            url=first_text(entry, GENERIC_URL_FIELDS),
            published_at=published_at,
            timestamp_confidence=confidence,
            source=source,
            category=category,
            tags=upstream_tags if isinstance(upstream_tags, list) and upstream_tags else [category],
            priority=Priority.MEDIUM,
            trust_rating=50,
            verification_status=VerificationStatus.UNVERIFIED,
            data_quality=60,
            metadata={"raw": entry},
            config=settings,
        )
        if record is not None:
            results.append(record)

    logger.debug("Generic normalizer kept %d of %d records", len(results), len(entries))
    return results
