"""Cross-plugin properties: every plugin is total and honours the record invariants."""

from functools import partial

import pytest

from intelfeed import normalizers
from intelfeed.models import NormalizedDataItem, RSSNormalizerConfig
from intelfeed.registry import registry, run_plugin

OUT_OF_RANGE_DATE = "0001-01-01T00:00:00+01:00"

ODD_PAYLOADS = [
    None,
    {},
    [],
    "",
    "   ",
    42,
    3.5,
    True,
    {"unexpected": True},
    {"items": "not a list"},
    {"features": [None, 1, "x"]},
    {"contents": 7},
    [None, [], "x"],
    "<rss><channel><item><title>No link</title></item></channel></rss>",
    "not a feed at all",
    {"items": [{"title": "x", "link": "https://a.test/1", "pubDate": OUT_OF_RANGE_DATE}]},
    [{"title": "x", "url": "https://a.test/1", "date": OUT_OF_RANGE_DATE}],
    {"features": [{"id": "q", "properties": {"time": OUT_OF_RANGE_DATE, "sent": OUT_OF_RANGE_DATE}}]},
]

SAMPLE_PAYLOADS = {
    "noaa-alerts": {
        "features": [
            {
                "id": "https://api.weather.gov/alerts/1",
                "properties": {"headline": "Flood Watch", "severity": "Moderate", "event": "Flood"},
            }
        ]
    },
    "usgs-earthquakes": {
        "features": [{"id": "q1", "properties": {"mag": 5.1, "place": "Here", "time": 1704164645000}}]
    },
    "reddit-posts": {
        "data": {"children": [{"data": {"id": "a", "title": "Post", "permalink": "/r/x/comments/a/"}}]}
    },
    "hacker-news": [{"id": 1, "title": "HN"}, {"id": 1, "title": "HN again"}],
    "generic": [{"title": "G", "url": "https://x.test/g", "id": "dup"}, {"title": "G2", "url": "https://x.test/g2", "id": "dup"}],
    "investigative-rss": {
        "items": [
            {"title": "Report", "link": "https://x.test/r", "guid": "same"},
            {"title": "Report", "link": "https://x.test/r2", "guid": "same"},
        ]
    },
    "nasa-dsn": {"dishes": {"14": {"sigs": [{"dir": "down", "active": True, "band": "X"}]}}},
}


@pytest.mark.parametrize("plugin_id", registry.ids())
@pytest.mark.parametrize("payload", ODD_PAYLOADS, ids=repr)
def test_plugins_are_total(plugin_id, payload):
    items = run_plugin(plugin_id, payload)
    assert isinstance(items, list)
    for item in items:
        assert isinstance(item, NormalizedDataItem)


def _entry_points():
    for name in normalizers.__all__:
        func = getattr(normalizers, name)
        if name == "normalize_rss_feed":
            func = partial(func, config=RSSNormalizerConfig(source_fallback="Feed", category="news"))
        yield pytest.param(func, id=name)


@pytest.mark.parametrize("normalize", list(_entry_points()))
@pytest.mark.parametrize("payload", ODD_PAYLOADS, ids=repr)
def test_normalizers_never_raise(normalize, payload):
    items = normalize(payload)
    assert isinstance(items, list)
    assert all(isinstance(item, NormalizedDataItem) for item in items)


@pytest.mark.parametrize(
    ("plugin_id", "payload"),
    [
        (
            "investigative-rss",
            {
                "items": [
                    {"title": "Good", "link": "https://x.test/1", "pubDate": "2024-01-02"},
                    {"title": "Odd", "link": "https://x.test/2", "pubDate": OUT_OF_RANGE_DATE},
                ]
            },
        ),
        (
            "generic",
            [
                {"title": "Good", "url": "https://x.test/1", "date": "2024-01-02"},
                {"title": "Odd", "url": "https://x.test/2", "date": OUT_OF_RANGE_DATE},
            ],
        ),
    ],
)
def test_bad_date_does_not_drop_siblings(plugin_id, payload):
    items = run_plugin(plugin_id, payload)
    assert [item.url for item in items] == ["https://x.test/1", "https://x.test/2"]


@pytest.mark.parametrize("plugin_id", sorted(SAMPLE_PAYLOADS))
def test_record_invariants(plugin_id):
    items = run_plugin(plugin_id, SAMPLE_PAYLOADS[plugin_id])
    assert items
    assert len({item.id for item in items}) == len(items)
    for item in items:
        assert item.id and item.title and item.url and item.source
        assert len(item.summary) <= 500
        assert item.published_at.tzinfo is not None
        assert item.published_at.utcoffset().total_seconds() == 0
        assert 0 <= item.trust_rating <= 100
        assert 0 <= item.data_quality <= 100
        assert item.tags == [t.lower() for t in item.tags]
        assert len(set(item.tags)) == len(item.tags)
