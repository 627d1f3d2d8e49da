"""Post-normalization tag enrichers.

Each enricher is a pure ``list -> list`` function. Records are frozen, so
enrichment always returns new records built with ``model_copy``.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from intelfeed.models import NormalizedDataItem
from intelfeed.normalizers.base import as_number
from intelfeed.text import merge_tags

Enricher = Callable[[list[NormalizedDataItem]], list[NormalizedDataItem]]


def add_tags(
    items: list[NormalizedDataItem],
    extra: Callable[[NormalizedDataItem], Iterable[str] | None],
) -> list[NormalizedDataItem]:
    """Return copies of *items* with the tags produced by *extra* appended."""
    enriched: list[NormalizedDataItem] = []
    for item in items:
        tags = merge_tags(item.tags, extra(item))
        enriched.append(item if tags == item.tags else item.model_copy(update={"tags": tags}))
    return enriched


def _noaa_tags(item: NormalizedDataItem) -> list[str]:
    tags: list[str] = []
    severity = item.metadata.get("severity")
    if severity:
        tags.append(f"severity:{str(severity).lower()}")
    event = item.metadata.get("event")
    if event:
        tags.append(f"event:{str(event).lower()}")
    return tags


def _usgs_tags(item: NormalizedDataItem) -> list[str]:
    tags: list[str] = []
    magnitude = as_number(item.metadata.get("magnitude"))
    if magnitude is not None:
        tags.append(f"m:{magnitude:.1f}")
    place = item.metadata.get("location")
    if place:
        tags.append(f"place:{str(place).lower()}")
    return tags


def _advisory_tags(item: NormalizedDataItem) -> list[str]:
    return ["cve"] if item.metadata.get("cveId") else []


def enrich_noaa_alerts(items: list[NormalizedDataItem]) -> list[NormalizedDataItem]:
    """``severity:<level>`` and ``event:<name>`` tags."""
    return add_tags(items, _noaa_tags)


def enrich_usgs_earthquakes(items: list[NormalizedDataItem]) -> list[NormalizedDataItem]:
    """``m:<magnitude>`` (one decimal) and ``place:<location>`` tags."""
    return add_tags(items, _usgs_tags)


def enrich_github_advisories(items: list[NormalizedDataItem]) -> list[NormalizedDataItem]:
    return add_tags(items, _advisory_tags)
