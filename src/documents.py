"""Content discovery: read Markdown posts and their YAML front matter."""

from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import yaml
from dateutil import parser as date_parser

from .errors import ConfigurationError, ContentError, MissingFieldError
from .logging_config import create_execution_logger
from .models import ContentDocument

FRONT_MATTER_DELIMITER = "---"

# Two distinct fill-in values; a complete date parses identically under both
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def parse_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a document into its YAML front matter and body.

    Returns an empty mapping when the text does not open with a ``---`` line
    or the block is never closed.

    Raises:
        yaml.YAMLError: If the front matter block is not valid YAML
    """
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text

    for index in range(1, len(lines)):
        if lines[index].strip() == FRONT_MATTER_DELIMITER:
            data = yaml.safe_load("\n".join(lines[1:index])) or {}
            if not isinstance(data, dict):
                raise yaml.YAMLError("front matter must be a mapping")
            return data, "\n".join(lines[index + 1 :])

    return {}, text


def parse_release_date(value: Any, document_url: str) -> datetime | None:
    """Normalize a front-matter releaseDate into a datetime.

    Raises:
        MissingFieldError: If the value is present but cannot be parsed, or
            leaves out the year, month or day
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        try:
            first, second = (
                date_parser.parse(value, default=default) for default in _PARSE_DEFAULTS
            )
        except (ValueError, OverflowError) as e:
            raise MissingFieldError(
                document_url, "releaseDate", f"is not a parseable date ({value!r})"
            ) from e
        if first != second:
            raise MissingFieldError(
                document_url, "releaseDate", f"is not a complete date ({value!r})"
            )
        return first
    raise MissingFieldError(
        document_url, "releaseDate", f"is not a parseable date ({value!r})"
    )


class DocumentLoader:
    """Discovers the Markdown documents published in a content directory."""

    def __init__(
        self,
        content_dir: Path | str,
        base_path: str = "/",
        execution_id: str | None = None,
    ):
        """Initialize DocumentLoader.

        Args:
            content_dir: Directory scanned (non-recursively) for *.md files
            base_path: URL prefix prepended to each file stem
            execution_id: Execution ID for logging context
        """
        self.content_dir = Path(content_dir)
        self.base_path = base_path if base_path.endswith("/") else f"{base_path}/"
        self.logger = create_execution_logger("document_loader", execution_id)

    def document_url(self, path: Path) -> str:
        return f"{self.base_path}{path.stem}"

    def load(self) -> list[ContentDocument]:
        """Load every document in the content directory, ordered by file name.

        Raises:
            ConfigurationError: If the content directory does not exist
            ContentError: If a file cannot be read or has invalid front matter
            MissingFieldError: If a releaseDate cannot be parsed
        """
        if not self.content_dir.is_dir():
            self.logger.error(
                f"Content directory not found: {self.content_dir}",
                content_dir=str(self.content_dir),
            )
            raise ConfigurationError(
                f"Content directory not found: {self.content_dir}"
            )

        paths = sorted(self.content_dir.glob("*.md"))
        self.logger.info(
            f"Discovered {len(paths)} documents",
            content_dir=str(self.content_dir),
            documents_count=len(paths),
        )
        return [self.load_document(path) for path in paths]

    def load_document(self, path: Path) -> ContentDocument:
        """Read one Markdown file into a ContentDocument."""
        url = self.document_url(path)

        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Failed to read {path}: {e}", document_url=url)
            raise ContentError(path, f"cannot be read ({e})") from e

        try:
            frontmatter, _ = parse_front_matter(text)
        except yaml.YAMLError as e:
            self.logger.error(
                f"Invalid front matter in {path}: {e}", document_url=url
            )
            raise ContentError(path, f"invalid front matter ({e})") from e

        title = frontmatter.get("title")
        if title is not None:
            title = str(title)

        return ContentDocument(
            url=url,
            title=title,
            release_date=parse_release_date(frontmatter.get("releaseDate"), url),
            frontmatter=frontmatter,
        )
