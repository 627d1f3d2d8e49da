"""Tests for the Markdown link-list fallback parser."""

from intelfeed.parsers.markdown import parse_markdown_links

BASE = "https://www.thebureauinvestigates.com"

SAMPLE = """
[![Investigations](https://cdn.example.com/cover.jpg) 12.02.25 Global Health --- Lab oversight failure --- Investigators reveal oversight breakdown 7 minute read](https://www.thebureauinvestigates.com/stories/2025-02-12/markdown-followup)
"""


class TestParseMarkdownLinks:
    def test_image_wrapped_link(self):
        cards = parse_markdown_links(SAMPLE, "/stories/", BASE)
        assert len(cards) == 1
        card = cards[0]
        assert card.url == f"{BASE}/stories/2025-02-12/markdown-followup"
        assert card.thumbnail == "https://cdn.example.com/cover.jpg"
        assert card.date_text == "12.02.25"
        assert card.categories == ["12.02.25", "Global Health"]
        assert card.title == "Lab oversight failure"
        assert card.summary == "Lab oversight failure: Investigators reveal oversight breakdown"
        assert card.read_time == "7 minute read"

    def test_requires_path_segment(self):
        text = "[About us](https://www.thebureauinvestigates.com/about) [Story](/stories/x)"
        cards = parse_markdown_links(text, "/stories/", BASE)
        assert [c.url for c in cards] == [f"{BASE}/stories/x"]

    def test_dedupes_by_url(self):
        text = "[First](/stories/x)\n[Again](/stories/x)"
        cards = parse_markdown_links(text, "/stories/", BASE)
        assert [c.title for c in cards] == ["First"]

    def test_title_and_teaser_only(self):
        cards = parse_markdown_links("[Headline --- Teaser text](/stories/y)", "/stories/", BASE)
        assert cards[0].title == "Headline"
        assert cards[0].summary == "Headline: Teaser text"
        assert cards[0].categories == []

    def test_plain_title(self):
        cards = parse_markdown_links("[Just a title](/stories/z)", "/stories/", BASE)
        assert cards[0].title == "Just a title"
        assert cards[0].summary == "Just a title"
        assert cards[0].date_text == ""

    def test_bare_images_are_not_links(self):
        assert parse_markdown_links("![cover](/stories/img.jpg)", "/stories/", BASE) == []

    def test_image_only_label_skipped(self):
        text = "[![cover](https://cdn.example.com/c.jpg)](/stories/only-image)"
        assert parse_markdown_links(text, "/stories/", BASE) == []

    def test_empty(self):
        assert parse_markdown_links("", "/stories/", BASE) == []
        assert parse_markdown_links(None, "/stories/", BASE) == []
