"""Tests for RSS/Atom text parsing and rss2json-style entry conversion."""

from unittest.mock import patch

from intelfeed.parsers.feed import feed_items_from_entries, parse_feed_text

RSS_SAMPLE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">
  <channel>
    <title>Feed T</title>
    <link>https://x.test/</link>
    <item>
      <title>One</title>
      <link>https://x.test/1</link>
      <description>&lt;p&gt;Body text&lt;/p&gt;</description>
      <pubDate>Tue, 02 Jan 2024 03:04:05 GMT</pubDate>
      <category>Alpha</category>
      <category>alpha</category>
      <category>Beta</category>
      <dc:creator>Jane Reporter</dc:creator>
      <guid isPermaLink="false">urn:one</guid>
      <comments>https://x.test/1#comments</comments>
      <enclosure url="https://x.test/a.mp3" type="audio/mpeg" length="123"/>
    </item>
    <item>
      <title>Two</title>
      <link>https://x.test/2</link>
    </item>
  </channel>
</rss>
"""

ATOM_SAMPLE = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom T</title>
  <entry>
    <title>A1</title>
    <link rel="alternate" href="https://x.test/a1"/>
    <id>tag:x.test,2024:a1</id>
    <updated>2024-01-02T03:04:05Z</updated>
    <summary>Atom summary</summary>
    <author><name>Ann Author</name></author>
    <category term="Space"/>
  </entry>
</feed>
"""


class TestParseFeedText:
    def test_rss_channel_and_items(self):
        parsed = parse_feed_text(RSS_SAMPLE)
        assert parsed is not None
        assert parsed.title == "Feed T"
        assert [item.title for item in parsed.items] == ["One", "Two"]

    def test_rss_item_fields(self):
        item = parse_feed_text(RSS_SAMPLE).items[0]
        assert item.link == "https://x.test/1"
        assert "Body text" in item.description
        assert item.pub_date == "2024-01-02T03:04:05+00:00"
        assert item.categories == ["Alpha", "Beta"]
        assert item.author == "Jane Reporter"
        assert item.guid == "urn:one"
        assert item.comments == "https://x.test/1#comments"
        assert item.enclosure is not None
        assert item.enclosure.url == "https://x.test/a.mp3"
        assert item.enclosure.type == "audio/mpeg"

    def test_raw_excludes_parsed_structs(self):
        item = parse_feed_text(RSS_SAMPLE).items[0]
        assert "title" in item.raw
        assert not any(key.endswith("_parsed") for key in item.raw)

    def test_atom_entry(self):
        parsed = parse_feed_text(ATOM_SAMPLE)
        assert parsed is not None
        assert parsed.title == "Atom T"
        item = parsed.items[0]
        assert item.link == "https://x.test/a1"
        assert item.description == "Atom summary"
        assert item.pub_date == "2024-01-02T03:04:05+00:00"
        assert item.author == "Ann Author"
        assert item.categories == ["Space"]
        assert item.guid == "tag:x.test,2024:a1"

    def test_description_preferred_over_encoded_content(self):
        parsed = parse_feed_text(
            '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">'
            "<channel><title>T</title><item><title>Both</title>"
            "<link>https://x.test/b</link>"
            "<description>Short teaser</description>"
            "<content:encoded><![CDATA[<p>Full body</p>]]></content:encoded>"
            "</item></channel></rss>"
        )
        assert parsed.items[0].description == "Short teaser"

    def test_named_zone_converted_to_utc(self):
        parsed = parse_feed_text(
            '<rss version="2.0"><channel><title>T</title><item><title>Zoned</title>'
            "<link>https://x.test/z</link>"
            "<pubDate>Mon, 01 Jan 2024 10:00:00 EST</pubDate></item></channel></rss>"
        )
        assert parsed.items[0].pub_date == "2024-01-01T15:00:00+00:00"

    def test_unparsed_date_kept_as_text(self):
        parsed = parse_feed_text(
            '<rss version="2.0"><channel><title>T</title><item><title>Odd</title>'
            "<link>https://x.test/o</link>"
            "<pubDate>sometime last week</pubDate></item></channel></rss>"
        )
        assert parsed.items[0].pub_date == "sometime last week"

    def test_minimal_proxy_document(self):
        parsed = parse_feed_text(
            "<rss><channel><title>T</title><item><title>Hello</title>"
            "<link>https://x.test/1</link></item></channel></rss>"
        )
        assert parsed is not None
        assert parsed.title == "T"
        assert parsed.items[0].title == "Hello"
        assert parsed.items[0].link == "https://x.test/1"

    def test_not_a_feed(self):
        assert parse_feed_text("just some words") is None

    def test_empty(self):
        assert parse_feed_text("") is None
        assert parse_feed_text(None) is None

    def test_parser_unavailable(self):
        with patch("intelfeed.parsers.feed.get_feed_parser", return_value=None):
            assert parse_feed_text(RSS_SAMPLE) is None

    def test_parser_exception_returns_none(self):
        def explode(_stream):
            raise RuntimeError("boom")

        with patch("intelfeed.parsers.feed.get_feed_parser", return_value=explode):
            assert parse_feed_text(RSS_SAMPLE) is None


class TestFeedItemsFromEntries:
    def test_rss2json_entry(self):
        items = feed_items_from_entries(
            [
                {
                    "title": "Story",
                    "link": "https://x.test/story",
                    "guid": "g-1",
                    "pubDate": "2024-01-02 03:04:05",
                    "description": "<p>Desc</p>",
                    "author": "Writer",
                    "categories": ["World", {"term": "Politics"}, "world"],
                    "enclosure": {"link": "https://x.test/img.jpg", "type": "image/jpeg"},
                }
            ]
        )
        item = items[0]
        assert item.title == "Story"
        assert item.link == "https://x.test/story"
        assert item.guid == "g-1"
        assert item.pub_date == "2024-01-02 03:04:05"
        assert item.description == "<p>Desc</p>"
        assert item.author == "Writer"
        assert item.categories == ["World", "Politics"]
        assert item.enclosure.url == "https://x.test/img.jpg"

    def test_link_object_and_nested_author(self):
        item = feed_items_from_entries(
            [{"title": "T", "link": {"href": "https://x.test/h"}, "author": {"name": "Nested"}}]
        )[0]
        assert item.link == "https://x.test/h"
        assert item.author == "Nested"

    def test_link_list_prefers_alternate(self):
        item = feed_items_from_entries(
            [
                {
                    "title": "T",
                    "links": [],
                    "link": [
                        {"rel": "enclosure", "href": "https://x.test/file.mp3"},
                        {"rel": "alternate", "href": "https://x.test/page"},
                    ],
                }
            ]
        )[0]
        assert item.link == "https://x.test/page"

    def test_url_field_and_thumbnail(self):
        item = feed_items_from_entries(
            [{"title": "T", "url": "https://x.test/u", "thumbnail": "https://x.test/t.png"}]
        )[0]
        assert item.link == "https://x.test/u"
        assert item.enclosure.url == "https://x.test/t.png"
        assert item.enclosure.type == "image"

    def test_content_fallbacks(self):
        item = feed_items_from_entries(
            [{"title": "T", "contentSnippet": "Snippet", "isoDate": "2024-01-02T00:00:00Z"}]
        )[0]
        assert item.description == "Snippet"
        assert item.pub_date == "2024-01-02T00:00:00Z"

    def test_raw_is_original_entry(self):
        entry = {"title": "T", "link": "https://x.test", "extra": 1}
        assert feed_items_from_entries([entry])[0].raw == entry
