"""Unit tests for RSS serialization."""

from datetime import UTC, date, datetime, timedelta, timezone

import feedparser
import pytest

from src.errors import ConfigurationError
from src.models import FeedDescriptor, FeedItem
from src.rss import RssWriter


def make_descriptor(items=None, custom_data="<language>en-us</language>"):
    return FeedDescriptor(
        title="Bün Colak’s Blog",
        description="Development tips and personal opinions.",
        site="https://example.com",
        items=items
        if items is not None
        else [
            FeedItem(link="/posts/a", title="A", pub_date=datetime(2023, 1, 1)),
            FeedItem(link="/posts/b", title="B", pub_date=datetime(2023, 2, 1)),
        ],
        custom_data=custom_data,
    )


class TestRssWriterUnit:
    """Unit tests for RssWriter."""

    def test_channel_fields(self):
        parsed = feedparser.parse(RssWriter().serialize(make_descriptor()))

        assert not parsed.bozo
        assert parsed.version == "rss20"
        assert parsed.feed.title == "Bün Colak’s Blog"
        assert parsed.feed.description == "Development tips and personal opinions."
        assert parsed.feed.link == "https://example.com"

    def test_items_keep_descriptor_order_and_resolve_links(self):
        parsed = feedparser.parse(RssWriter().serialize(make_descriptor()))

        assert [entry.title for entry in parsed.entries] == ["A", "B"]
        assert [entry.link for entry in parsed.entries] == [
            "https://example.com/posts/a",
            "https://example.com/posts/b",
        ]
        assert parsed.entries[0].id == "https://example.com/posts/a"
        assert tuple(parsed.entries[0].published_parsed[:3]) == (2023, 1, 1)
        assert tuple(parsed.entries[1].published_parsed[:3]) == (2023, 2, 1)

    def test_custom_data_is_injected_into_channel(self):
        xml = RssWriter().serialize(make_descriptor())
        parsed = feedparser.parse(xml)

        assert parsed.feed.language == "en-us"
        assert xml.index(b"<language>") < xml.index(b"<item>")

    def test_multiple_custom_elements(self):
        xml = RssWriter().serialize(
            make_descriptor(
                custom_data="<language>en-us</language><copyright>Bun</copyright>"
            )
        )
        parsed = feedparser.parse(xml)

        assert parsed.feed.language == "en-us"
        assert parsed.feed.rights == "Bun"

    def test_empty_custom_data(self):
        parsed = feedparser.parse(RssWriter().serialize(make_descriptor(custom_data="")))

        assert "language" not in parsed.feed

    @pytest.mark.parametrize(
        "custom_data",
        [
            "en-us<language>x</language>",
            "<language>en-us</language>stray",
            "<language>en-us</language> text <ttl>60</ttl>",
        ],
    )
    def test_text_outside_custom_elements_raises(self, custom_data):
        with pytest.raises(ConfigurationError, match="only elements"):
            RssWriter().serialize(make_descriptor(custom_data=custom_data))

    def test_invalid_custom_data_raises(self):
        with pytest.raises(ConfigurationError):
            RssWriter().serialize(make_descriptor(custom_data="<language>en-us"))

    def test_empty_feed(self):
        xml = RssWriter().serialize(make_descriptor(items=[]))
        parsed = feedparser.parse(xml)

        assert parsed.entries == []
        assert parsed.feed.title == "Bün Colak’s Blog"

    def test_output_has_no_clock_dependency(self):
        writer = RssWriter()

        first = writer.serialize(make_descriptor())
        second = writer.serialize(make_descriptor())

        assert first == second
        assert b"lastBuildDate" not in first

    def test_missing_channel_description_raises(self):
        descriptor = FeedDescriptor(
            title="Blog", description="", site="https://example.com", items=[]
        )

        with pytest.raises(ConfigurationError):
            RssWriter().serialize(descriptor)

    def test_write_creates_parent_directories(self, tmp_path):
        output = tmp_path / "dist" / "rss.xml"

        result = RssWriter().write(make_descriptor(), output)

        assert result == output
        assert feedparser.parse(output.read_bytes()).entries[0].title == "A"

    def test_failed_serialization_writes_nothing(self, tmp_path):
        output = tmp_path / "rss.xml"

        with pytest.raises(ConfigurationError):
            RssWriter().write(make_descriptor(custom_data="<broken"), output)

        assert not output.exists()


class TestRssWriterHelpers:
    """Unit tests for link and date normalization."""

    @pytest.mark.parametrize(
        "link, site, expected",
        [
            ("/posts/a", "https://example.com", "https://example.com/posts/a"),
            ("/posts/a", "https://example.com/", "https://example.com/posts/a"),
            ("posts/a", "https://example.com/blog", "https://example.com/blog/posts/a"),
            ("https://other.org/x", "https://example.com", "https://other.org/x"),
        ],
    )
    def test_resolve_link(self, link, site, expected):
        assert RssWriter.resolve_link(link, site) == expected

    def test_naive_datetime_is_utc(self):
        assert RssWriter.normalize_date(datetime(2023, 1, 1, 12)) == datetime(
            2023, 1, 1, 12, tzinfo=UTC
        )

    def test_plain_date_is_midnight_utc(self):
        assert RssWriter.normalize_date(date(2023, 1, 1)) == datetime(
            2023, 1, 1, tzinfo=UTC
        )

    def test_aware_datetime_is_unchanged(self):
        value = datetime(2023, 1, 1, 9, tzinfo=timezone(timedelta(hours=3)))

        assert RssWriter.normalize_date(value) is value
