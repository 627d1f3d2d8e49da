"""Normalizer registry -- the single entry point for raw payloads.

Each plugin pairs a permissive schema with its normalize function and
optional enrich/classify steps. Schema validation is advisory: a payload
that deviates from its nominal shape is logged and still normalized.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from intelfeed import classifier, enrichers
from intelfeed import normalizers as n
from intelfeed.config import IntelFeedConfig
from intelfeed.models import NormalizedDataItem, ValidationResult

logger = logging.getLogger(__name__)

Items = list[NormalizedDataItem]

# ---------------------------------------------------------------------------
# Loose schemas: every field optional, unknown keys allowed
# ---------------------------------------------------------------------------


class _Loose(BaseModel):
    model_config = ConfigDict(extra="allow")


class GeoJSONFeature(_Loose):
    id: str | None = None
    properties: dict[str, Any] | None = None
    geometry: dict[str, Any] | None = None


class GeoJSONCollection(_Loose):
    features: list[GeoJSONFeature] | None = None


class GitHubAdvisoryEnvelope(_Loose):
    security_advisories: list[dict[str, Any]]


class RedditChild(_Loose):
    data: dict[str, Any]


class RedditListingData(_Loose):
    children: list[RedditChild]


class RedditListing(_Loose):
    data: RedditListingData


class HackerNewsItem(_Loose):
    id: int | None = None
    title: str | None = None
    url: str | None = None
    time: int | None = None
    score: int | None = None
    by: str | None = None


class CoinGeckoEnvelope(_Loose):
    coins: list[dict[str, Any]] | None = None
    data: dict[str, Any] | None = None


class ApodEntry(_Loose):
    date: str | None = None
    title: str | None = None
    explanation: str | None = None
    url: str | None = None
    media_type: str | None = None


class AlphaVantageFeed(_Loose):
    feed: list[dict[str, Any]]


class LaunchLibraryPage(_Loose):
    results: list[dict[str, Any]]


class DsnStatus(_Loose):
    time: int | float | str | None = None
    dishes: dict[str, dict[str, Any]] | list[dict[str, Any]]


class FeedEnvelope(_Loose):
    items: list[Any] | None = None
    entries: list[Any] | None = None
    feed: dict[str, Any] | None = None
    data: dict[str, Any] | None = None
    contents: str | None = None


class ProxyEnvelope(_Loose):
    contents: str


NOAA_SCHEMA = TypeAdapter(GeoJSONCollection)
USGS_SCHEMA = TypeAdapter(GeoJSONCollection)
GITHUB_SCHEMA = TypeAdapter(list[dict[str, Any]] | GitHubAdvisoryEnvelope)
REDDIT_SCHEMA = TypeAdapter(RedditListing)
HN_SCHEMA = TypeAdapter(HackerNewsItem | list[HackerNewsItem])
COINGECKO_SCHEMA = TypeAdapter(list[dict[str, Any]] | CoinGeckoEnvelope)
APOD_SCHEMA = TypeAdapter(ApodEntry | list[ApodEntry])
ALPHA_VANTAGE_SCHEMA = TypeAdapter(AlphaVantageFeed)
LAUNCH_LIBRARY_SCHEMA = TypeAdapter(LaunchLibraryPage)
DSN_SCHEMA = TypeAdapter(DsnStatus)
FEED_SCHEMA = TypeAdapter(str | list[dict[str, Any]] | FeedEnvelope)
SCRAPED_SCHEMA = TypeAdapter(str | ProxyEnvelope)


def schema_errors(exc: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
        for error in exc.errors()
    ]


# ---------------------------------------------------------------------------
# Plugins
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NormalizerPlugin:
    """A registered source: schema, normalize step and optional post-steps."""

    id: str
    normalize: Callable[..., Items]
    schema: TypeAdapter[Any] | None = None
    enrich: Callable[[Items], Items] | None = None
    classify: Callable[..., Items] | None = classifier.apply
    description: str = ""

    def validate(self, payload: Any) -> ValidationResult:
        if self.schema is None:
            return ValidationResult(ok=True)
        try:
            self.schema.validate_python(payload)
        except ValidationError as exc:
            return ValidationResult(ok=False, errors=schema_errors(exc))
        return ValidationResult(ok=True)


class NormalizerRegistry:
    """Plugins keyed by their stable identifier, in registration order."""

    def __init__(self, plugins: Iterable[NormalizerPlugin] = ()) -> None:
        self._plugins: dict[str, NormalizerPlugin] = {}
        for plugin in plugins:
            self.register(plugin)

    def register(self, plugin: NormalizerPlugin) -> None:
        if plugin.id in self._plugins:
            logger.debug("Replacing normalizer plugin %s", plugin.id)
        self._plugins[plugin.id] = plugin

    def get(self, plugin_id: str) -> NormalizerPlugin | None:
        return self._plugins.get(plugin_id)

    def ids(self) -> list[str]:
        return list(self._plugins)

    def __contains__(self, plugin_id: object) -> bool:
        return plugin_id in self._plugins

    def __iter__(self) -> Iterator[NormalizerPlugin]:
        return iter(self._plugins.values())

    def __len__(self) -> int:
        return len(self._plugins)


def _rss(plugin_id: str, normalize: Callable[..., Items], description: str) -> NormalizerPlugin:
    return NormalizerPlugin(
        id=plugin_id, normalize=normalize, schema=FEED_SCHEMA, description=description
    )


def default_plugins() -> list[NormalizerPlugin]:
    return [
        NormalizerPlugin(
            id="noaa-alerts",
            normalize=n.normalize_noaa_alerts,
            schema=NOAA_SCHEMA,
            enrich=enrichers.enrich_noaa_alerts,
            description="NWS weather alerts (GeoJSON)",
        ),
        NormalizerPlugin(
            id="nasa-apod",
            normalize=n.normalize_nasa_apod,
            schema=APOD_SCHEMA,
            description="NASA astronomy picture of the day",
        ),
        NormalizerPlugin(
            id="github-advisories",
            normalize=n.normalize_github_advisories,
            schema=GITHUB_SCHEMA,
            enrich=enrichers.enrich_github_advisories,
            description="GitHub security advisories",
        ),
        NormalizerPlugin(
            id="alpha-vantage-news",
            normalize=n.normalize_alpha_vantage_news,
            schema=ALPHA_VANTAGE_SCHEMA,
            description="Alpha Vantage news sentiment",
        ),
        NormalizerPlugin(
            id="reddit-posts",
            normalize=n.normalize_reddit_posts,
            schema=REDDIT_SCHEMA,
            description="Reddit listing JSON",
        ),
        NormalizerPlugin(
            id="usgs-earthquakes",
            normalize=n.normalize_usgs_earthquakes,
            schema=USGS_SCHEMA,
            enrich=enrichers.enrich_usgs_earthquakes,
            description="USGS earthquake summary (GeoJSON)",
        ),
        NormalizerPlugin(
            id="coingecko",
            normalize=n.normalize_coingecko,
            schema=COINGECKO_SCHEMA,
            description="CoinGecko trending, markets and global data",
        ),
        NormalizerPlugin(
            id="hacker-news",
            normalize=n.normalize_hacker_news,
            schema=HN_SCHEMA,
            description="Hacker News items",
        ),
        NormalizerPlugin(
            id="launch-library",
            normalize=n.normalize_launch_library,
            schema=LAUNCH_LIBRARY_SCHEMA,
            description="Launch Library 2 launches",
        ),
        NormalizerPlugin(
            id="nasa-dsn",
            normalize=n.normalize_dsn_status,
            schema=DSN_SCHEMA,
            description="NASA Deep Space Network status",
        ),
        NormalizerPlugin(
            id="tbij",
            normalize=n.normalize_tbij_investigations,
            schema=SCRAPED_SCHEMA,
            description="The Bureau of Investigative Journalism (scraped)",
        ),
        NormalizerPlugin(
            id="occrp",
            normalize=n.normalize_occrp_investigations,
            schema=SCRAPED_SCHEMA,
            description="OCCRP investigations (scraped)",
        ),
        _rss("space-launch-rss", n.normalize_space_launch_rss, "Launch schedule feeds"),
        _rss("space-agency-rss", n.normalize_space_agency_rss, "Space agency news feeds"),
        _rss("defense-news-rss", n.normalize_defense_news_rss, "Defense news feeds"),
        _rss("geopolitical-rss", n.normalize_geopolitical_rss, "Geopolitics feeds"),
        _rss("investigative-rss", n.normalize_investigative_rss, "Investigative journalism feeds"),
        _rss("cyber-security-rss", n.normalize_cyber_security_rss, "Cyber security feeds"),
        _rss("climate-resilience-rss", n.normalize_climate_resilience_rss, "Climate feeds"),
        _rss("ai-governance-rss", n.normalize_ai_governance_rss, "AI governance feeds"),
        _rss("privacy-advocacy-rss", n.normalize_privacy_advocacy_rss, "Privacy advocacy feeds"),
        _rss(
            "financial-transparency-rss",
            n.normalize_financial_transparency_rss,
            "Money-in-politics feeds",
        ),
        _rss("leak-archive-rss", n.normalize_leak_archive_rss, "Leak archive feeds"),
        NormalizerPlugin(
            id="generic",
            normalize=n.normalize_generic,
            description="Loosely shaped records of any source",
        ),
    ]


registry = NormalizerRegistry(default_plugins())


def run_plugin(
    plugin_id: str,
    payload: Any,
    *,
    enrich: bool = True,
    classify: bool = True,
    settings: IntelFeedConfig | None = None,
    plugins: NormalizerRegistry | None = None,
) -> list[NormalizedDataItem]:
    """Validate, normalize, enrich and classify *payload* with one plugin.

    Args:
        plugin_id: Registered plugin identifier.
        payload: Raw payload as returned by the fetch layer.
        enrich: Run the plugin's enrich step when it has one.
        classify: Run the plugin's classify step when it has one.
        settings: Configuration; defaults apply when omitted.
        plugins: Registry to look the plugin up in (module registry by default).

    Returns:
        Normalized records. Failures inside the plugin yield an empty list.

    Raises:
        ValueError: If the plugin id is unknown.
    """
    plugin = (plugins if plugins is not None else registry).get(plugin_id)
    if plugin is None:
        raise ValueError(f"Unknown normalizer plugin: {plugin_id!r}")

    result = plugin.validate(payload)
    if not result.ok:
        logger.warning(
            "Payload for %s deviates from its schema: %s", plugin_id, "; ".join(result.errors[:5])
        )

    try:
        items = plugin.normalize(payload, settings=settings)
        if enrich and plugin.enrich is not None:
            items = plugin.enrich(items)
        if classify and plugin.classify is not None:
            items = plugin.classify(items, settings=settings)
    except Exception:
        logger.warning("Normalizer plugin %s failed", plugin_id, exc_info=True)
        return []

    logger.info("Plugin %s produced %d records", plugin_id, len(items))
    return items
