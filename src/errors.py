"""Error taxonomy for the blog feed builder."""

from pathlib import Path


class FeedBuildError(Exception):
    """Base class for errors that abort a feed build."""


class MissingFieldError(FeedBuildError):
    """A content document lacks a required front-matter field."""

    def __init__(self, document_url: str, field: str, reason: str = "is missing"):
        self.document_url = document_url
        self.field = field
        super().__init__(f"Document {document_url!r}: field '{field}' {reason}")


class ConfigurationError(FeedBuildError):
    """Site or feed configuration is absent or invalid."""


class ContentError(FeedBuildError):
    """A content file could not be read or its front matter is invalid."""

    def __init__(self, path: Path | str, message: str):
        self.path = Path(path)
        super().__init__(f"{self.path}: {message}")
