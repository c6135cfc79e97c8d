"""RSS serialization module for the blog feed builder."""

from datetime import UTC, date, datetime, time
from pathlib import Path
from urllib.parse import urljoin

from feedgen.feed import FeedGenerator
from lxml import etree

from .errors import ConfigurationError
from .logging_config import create_execution_logger
from .models import FeedDescriptor, FeedItem


class RssWriter:
    """Serializes a FeedDescriptor into an RSS 2.0 document."""

    def __init__(self, execution_id: str | None = None):
        """Initialize RssWriter.

        Args:
            execution_id: Execution ID for logging context
        """
        self.logger = create_execution_logger("rss_writer", execution_id)

    @staticmethod
    def resolve_link(link: str, site: str) -> str:
        """Resolve an item link against the site URL.

        Absolute links are returned unchanged.
        """
        base = site if site.endswith("/") else f"{site}/"
        return urljoin(base, link)

    @staticmethod
    def normalize_date(value: date) -> datetime:
        """Return a timezone-aware datetime; naive values are taken as UTC."""
        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min)
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value

    def _generator(self, descriptor: FeedDescriptor) -> FeedGenerator:
        fg = FeedGenerator()
        fg.title(descriptor.title)
        fg.link(href=descriptor.site, rel="alternate")
        fg.description(descriptor.description)

        for item in descriptor.items:
            self._add_entry(fg, item, descriptor.site)

        return fg

    def _add_entry(self, fg: FeedGenerator, item: FeedItem, site: str) -> None:
        link = self.resolve_link(item.link, site)
        # feedgen prepends by default, which would reverse the item order
        fe = fg.add_entry(order="append")
        fe.title(item.title)
        fe.link(href=link)
        fe.guid(link, permalink=True)
        fe.pubDate(self.normalize_date(item.pub_date))

    def _inject_custom_data(self, channel: etree._Element, custom_data: str) -> None:
        if not custom_data or not custom_data.strip():
            return

        try:
            fragment = etree.fromstring(
                f"<custom>{custom_data}</custom>".encode("utf-8"),
                etree.XMLParser(remove_blank_text=True),
            )
        except etree.XMLSyntaxError as e:
            self.logger.error(f"Invalid custom feed XML: {e}", custom_data=custom_data)
            raise ConfigurationError(f"Invalid custom feed XML: {e}") from e

        stray_text = [fragment.text] + [element.tail for element in fragment]
        if any(text and text.strip() for text in stray_text):
            self.logger.error(
                "Custom feed XML contains text outside elements",
                custom_data=custom_data,
            )
            raise ConfigurationError(
                f"Custom feed XML must contain only elements: {custom_data!r}"
            )

        first_item = channel.find("item")
        position = channel.index(first_item) if first_item is not None else len(channel)
        for offset, element in enumerate(list(fragment)):
            channel.insert(position + offset, element)

    def serialize(self, descriptor: FeedDescriptor) -> bytes:
        """Render the descriptor as RSS 2.0 XML.

        Args:
            descriptor: Feed descriptor to serialize

        Returns:
            UTF-8 encoded XML document

        Raises:
            ConfigurationError: If channel metadata or custom XML is invalid
        """
        self.logger.info(
            "Serializing feed",
            items_count=len(descriptor.items),
            site=descriptor.site,
        )

        try:
            raw = self._generator(descriptor).rss_str(pretty=False)
        except ValueError as e:
            self.logger.error(f"Feed generation failed: {e}", error=str(e))
            raise ConfigurationError(f"Feed generation failed: {e}") from e

        root = etree.fromstring(raw, etree.XMLParser(remove_blank_text=True))
        channel = root.find("channel")

        # Output must depend only on the descriptor, not on the clock
        for element in channel.findall("lastBuildDate"):
            channel.remove(element)

        self._inject_custom_data(channel, descriptor.custom_data)

        return etree.tostring(
            root, pretty_print=True, xml_declaration=True, encoding="UTF-8"
        )

    def write(self, descriptor: FeedDescriptor, output_path: Path | str) -> Path:
        """Serialize the descriptor and write it to output_path.

        Nothing is written if serialization fails.
        """
        output_path = Path(output_path)
        content = self.serialize(descriptor)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(content)

        self.logger.info(
            "Feed written",
            output_path=str(output_path),
            content_length=len(content),
        )
        return output_path
