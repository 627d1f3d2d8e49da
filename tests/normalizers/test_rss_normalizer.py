"""Tests for the generic RSS normalizer and its hooks."""

from datetime import UTC, datetime

from intelfeed.config import IntelFeedConfig, NormalizerSectionConfig
from intelfeed.models import (
    Priority,
    RSSNormalizerConfig,
    TimestampConfidence,
    UrlTransform,
    VerificationStatus,
)
from intelfeed.normalizers.rss import load_feed, normalize_rss_feed

CONFIG = RSSNormalizerConfig(
    source_fallback="Fallback Source",
    category="test",
    id_prefix="t",
    base_tags=["base"],
    trust_rating=77,
    verification_status=VerificationStatus.VERIFIED,
    data_quality=66,
)

PROXY_XML = (
    "<rss><channel><title>T</title><item><title>Hello</title>"
    "<link>https://x.test/1</link></item></channel></rss>"
)


def _items(*entries):
    return {"items": list(entries)}


# ── Payload loading ──────────────────────────────────────────────────


class TestLoadFeed:
    def test_proxy_envelope_xml(self):
        title, items = load_feed({"contents": PROXY_XML})
        assert title == "T"
        assert [item.title for item in items] == ["Hello"]

    def test_json_envelope(self):
        title, items = load_feed({"feed": {"title": "JSON T"}, "items": [{"title": "A"}]})
        assert title == "JSON T"
        assert items[0].title == "A"

    def test_unrecognized(self):
        assert load_feed({"unexpected": True}) == ("", [])
        assert load_feed(None) == ("", [])


# ── Normalization ────────────────────────────────────────────────────


class TestNormalizeRssFeed:
    def test_proxy_xml_scenario(self):
        items = normalize_rss_feed({"contents": PROXY_XML}, CONFIG)
        assert len(items) == 1
        item = items[0]
        assert item.title == "Hello"
        assert item.url == "https://x.test/1"
        assert item.source == "T"
        assert item.category == "test"
        assert item.trust_rating == 77
        assert item.data_quality == 66
        assert item.verification_status is VerificationStatus.VERIFIED
        assert item.summary == "Hello"
        assert item.timestamp_confidence is TimestampConfidence.APPROXIMATE

    def test_source_fallback(self):
        items = normalize_rss_feed(_items({"title": "A", "link": "https://x.test/a"}), CONFIG)
        assert items[0].source == "Fallback Source"

    def test_items_without_link_skipped(self):
        items = normalize_rss_feed(
            _items(
                {"title": "No link"},
                {"title": "Has link", "link": "https://x.test/ok"},
                {"title": "Guid link", "guid": "https://x.test/guid"},
            ),
            CONFIG,
        )
        assert [item.title for item in items] == ["Has link", "Guid link"]
        assert items[1].url == "https://x.test/guid"

    def test_non_browsable_link_skipped(self):
        items = normalize_rss_feed(
            _items({"title": "Magnet", "link": "magnet:?xt=urn:btih:abc"}), CONFIG
        )
        assert items == []

    def test_summary_stripped_and_truncated(self):
        body = "<p>" + "a" * 600 + "</p>"
        item = normalize_rss_feed(
            _items({"title": "Long", "link": "https://x.test/l", "description": body}), CONFIG
        )[0]
        assert len(item.summary) == 500
        assert item.summary.endswith("...")
        assert "<p>" not in item.summary

    def test_custom_summary_length(self):
        settings = IntelFeedConfig(normalizer=NormalizerSectionConfig(summary_max_length=20))
        item = normalize_rss_feed(
            _items({"title": "T", "link": "https://x.test/s", "description": "word " * 20}),
            CONFIG,
            settings=settings,
        )[0]
        assert len(item.summary) <= 20
        assert item.summary.endswith("...")

    def test_guid_id_with_prefix(self):
        item = normalize_rss_feed(
            _items({"title": "A", "link": "https://x.test/a", "guid": "g-1"}), CONFIG
        )[0]
        assert item.id == "t-g-1"

    def test_duplicate_guids_get_unique_ids(self):
        items = normalize_rss_feed(
            _items(
                {"title": "A", "link": "https://x.test/a", "guid": "same"},
                {"title": "B", "link": "https://x.test/b", "guid": "same"},
            ),
            CONFIG,
        )
        ids = [item.id for item in items]
        assert ids[0] == "t-same"
        assert len(set(ids)) == 2

    def test_fallback_ids_distinct_for_same_second(self):
        items = normalize_rss_feed(
            _items(
                {"title": "Same", "link": "https://x.test/1", "pubDate": "2024-01-02T00:00:00Z"},
                {"title": "Same", "link": "https://x.test/2", "pubDate": "2024-01-02T00:00:00Z"},
            ),
            CONFIG,
        )
        assert len({item.id for item in items}) == 2

    def test_exact_timestamp(self):
        item = normalize_rss_feed(
            _items(
                {
                    "title": "A",
                    "link": "https://x.test/a",
                    "pubDate": "Tue, 02 Jan 2024 03:04:05 GMT",
                }
            ),
            CONFIG,
        )[0]
        assert item.published_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert item.timestamp_confidence is TimestampConfidence.EXACT

    def test_tags_merge_base_and_categories(self):
        item = normalize_rss_feed(
            _items({"title": "A", "link": "https://x.test/a", "categories": ["World", "BASE"]}),
            CONFIG,
        )[0]
        assert item.tags == ["base", "world"]

    def test_metadata_carries_raw_entry(self):
        entry = {"title": "A", "link": "https://x.test/a", "author": "Writer", "x": 1}
        item = normalize_rss_feed(_items(entry), CONFIG)[0]
        assert item.metadata["raw"] == entry
        assert item.metadata["author"] == "Writer"

    def test_title_from_link_when_missing(self):
        item = normalize_rss_feed(
            _items({"title": "", "link": "https://x.test/news/some-story-slug/"}), CONFIG
        )[0]
        assert item.title == "Some Story Slug"

    def test_default_priority_low(self):
        item = normalize_rss_feed(_items({"title": "A", "link": "https://x.test/a"}), CONFIG)[0]
        assert item.priority is Priority.LOW

    def test_unrecognized_payload(self):
        assert normalize_rss_feed({"unexpected": True}, CONFIG) == []
        assert normalize_rss_feed("", CONFIG) == []
        assert normalize_rss_feed(None, CONFIG) == []


# ── Hooks ────────────────────────────────────────────────────────────


class TestHooks:
    def test_all_hooks_applied(self):
        config = CONFIG.model_copy(
            update={
                "priority_mapper": lambda ctx: (
                    Priority.HIGH if "urgent" in ctx.text.lower() else Priority.LOW
                ),
                "additional_tags": lambda ctx: ["hooked"],
                "metadata_enricher": lambda ctx: {"length": len(ctx.title)},
                "transform_title": lambda title, ctx: title.upper(),
                "transform_summary": lambda summary, ctx: f"[{summary}]",
            }
        )
        item = normalize_rss_feed(
            _items({"title": "urgent item", "link": "https://x.test/u", "description": "body"}),
            config,
        )[0]
        assert item.priority is Priority.HIGH
        assert "hooked" in item.tags
        assert item.title == "URGENT ITEM"
        assert item.summary == "[body]"
        assert item.metadata["length"] == len("URGENT ITEM")

    def test_url_transform(self):
        def rewrite(link, ctx):
            return UrlTransform(
                url="https://mirror.test/a", tags=["mirrored"], metadata={"original": link}
            )

        config = CONFIG.model_copy(update={"transform_url": rewrite})
        item = normalize_rss_feed(_items({"title": "A", "link": "https://x.test/a"}), config)[0]
        assert item.url == "https://mirror.test/a"
        assert "mirrored" in item.tags
        assert item.metadata["original"] == "https://x.test/a"

    def test_url_transform_to_non_browsable_skipped(self):
        config = CONFIG.model_copy(
            update={"transform_url": lambda link, ctx: UrlTransform(url="ftp://x.test/a")}
        )
        assert normalize_rss_feed(_items({"title": "A", "link": "https://x.test/a"}), config) == []
