"""Tests for post-normalization tag enrichers."""

from datetime import UTC, datetime

from intelfeed.enrichers import (
    add_tags,
    enrich_github_advisories,
    enrich_noaa_alerts,
    enrich_usgs_earthquakes,
)
from intelfeed.models import NormalizedDataItem


def _item(tags=None, **metadata) -> NormalizedDataItem:
    return NormalizedDataItem(
        id="one",
        title="Title",
        summary="Summary",
        url="https://x.test/1",
        published_at=datetime(2024, 1, 2, tzinfo=UTC),
        source="Test",
        category="test",
        tags=tags or ["base"],
        metadata=metadata,
    )


class TestAddTags:
    def test_appends_without_duplicates(self):
        [item] = add_tags([_item()], lambda i: ["Base", "new"])
        assert item.tags == ["base", "new"]

    def test_unchanged_item_returned_as_is(self):
        original = _item()
        [item] = add_tags([original], lambda i: None)
        assert item is original

    def test_does_not_mutate_input(self):
        original = _item()
        add_tags([original], lambda i: ["extra"])
        assert original.tags == ["base"]


class TestSourceEnrichers:
    def test_noaa(self):
        [item] = enrich_noaa_alerts([_item(severity="Severe", event="Flood Warning")])
        assert item.tags == ["base", "severity:severe", "event:flood warning"]

    def test_noaa_without_metadata(self):
        [item] = enrich_noaa_alerts([_item()])
        assert item.tags == ["base"]

    def test_usgs(self):
        [item] = enrich_usgs_earthquakes([_item(magnitude=6.5, location="10 km S of Town")])
        assert item.tags == ["base", "m:6.5", "place:10 km s of town"]

    def test_usgs_rounds_magnitude(self):
        [item] = enrich_usgs_earthquakes([_item(magnitude=4)])
        assert "m:4.0" in item.tags

    def test_github(self):
        [item] = enrich_github_advisories([_item(cveId="CVE-2024-1111")])
        assert "cve" in item.tags
        [plain] = enrich_github_advisories([_item(cveId=None)])
        assert "cve" not in plain.tags
