"""Feed construction: project content documents into a feed descriptor."""

from collections.abc import Sequence
from datetime import date

from .config import FeedConfig
from .errors import ConfigurationError, MissingFieldError
from .logging_config import create_execution_logger
from .models import ContentDocument, FeedDescriptor, FeedItem


class FeedBuilder:
    """Builds a FeedDescriptor from an already materialized document sequence."""

    def __init__(
        self, feed_config: FeedConfig | None = None, execution_id: str | None = None
    ):
        """Initialize FeedBuilder with channel metadata.

        Args:
            feed_config: Channel title, description and custom XML
            execution_id: Execution ID for logging context
        """
        self.feed_config = feed_config or FeedConfig()
        self.logger = create_execution_logger("feed_builder", execution_id)

    def build_feed(
        self, documents: Sequence[ContentDocument], site_url: str | None
    ) -> FeedDescriptor:
        """Project documents into a feed descriptor.

        Items keep the order of ``documents``; no sorting is applied.

        Args:
            documents: Content documents, possibly empty
            site_url: Deployed site URL used as the channel link

        Returns:
            FeedDescriptor with one item per document

        Raises:
            ConfigurationError: If site_url is absent or blank
            MissingFieldError: If a document lacks a title or release date
        """
        if not site_url or not site_url.strip():
            self.logger.error("Site URL is not configured")
            raise ConfigurationError("Site URL is required to build the feed")

        self.logger.log_execution_start(document_count=len(documents))

        items = []
        for document in documents:
            try:
                items.append(self.to_item(document))
            except MissingFieldError as e:
                self.logger.error(
                    str(e), document_url=document.url, missing_field=e.field
                )
                raise
            self.logger.log_document(document.url, document.title)

        descriptor = FeedDescriptor(
            title=self.feed_config.title,
            description=self.feed_config.description,
            site=site_url,
            items=items,
            custom_data=self.feed_config.custom_data,
        )

        self.logger.log_execution_end(success=True, items_count=len(items))
        return descriptor

    @staticmethod
    def to_item(document: ContentDocument) -> FeedItem:
        """Project a single document; fails on a blank title or missing date."""
        if not isinstance(document.title, str) or not document.title.strip():
            raise MissingFieldError(document.url, "title")

        if document.release_date is None:
            raise MissingFieldError(document.url, "releaseDate")
        # datetime is a subclass of date
        if not isinstance(document.release_date, date):
            raise MissingFieldError(
                document.url, "releaseDate", "is not a parseable date"
            )

        return FeedItem(
            link=document.url,
            title=document.title,
            pub_date=document.release_date,
        )


def build_feed(
    documents: Sequence[ContentDocument],
    site_url: str | None,
    feed_config: FeedConfig | None = None,
) -> FeedDescriptor:
    """Build a feed descriptor with the given (or default) channel metadata."""
    return FeedBuilder(feed_config).build_feed(documents, site_url)
