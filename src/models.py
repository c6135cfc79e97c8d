"""Data models for the blog feed builder."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class ContentDocument:
    """Represents one published article."""

    url: str
    title: str | None
    release_date: datetime | None
    frontmatter: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FeedItem:
    """Projection of a ContentDocument into a feed entry."""

    link: str
    title: str
    pub_date: datetime


@dataclass(frozen=True)
class FeedDescriptor:
    """Everything a feed serializer needs to emit the syndication document."""

    title: str
    description: str
    site: str
    items: list[FeedItem]
    custom_data: str = ""  # raw XML injected into <channel>
