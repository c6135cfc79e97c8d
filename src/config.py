"""Configuration management for the blog feed builder."""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from .errors import ConfigurationError
from .logging_config import create_execution_logger


@dataclass
class SiteConfig:
    """Static site metadata."""

    website: str = "https://buncolak.com/"
    author: str = "Bun Colak"
    desc: str = "Personal Blog"
    title: str = "Bun Colak's Personal Blog"
    og_image: str = "astropaper-og.jpg"
    light_and_dark_mode: bool = True
    post_per_page: int = 10
    scheduled_post_margin: int = 15 * 60 * 1000  # milliseconds


@dataclass
class LocaleConfig:
    """Locale settings; lang_tag holds BCP 47 language tags."""

    lang: str = "en"
    lang_tag: list[str] = field(default_factory=lambda: ["en-EN"])


@dataclass
class FeedConfig:
    """Metadata written into the RSS channel."""

    title: str = "Bün Colak’s Blog"
    description: str = (
        "Personal website for Bün Colak. Development tips and personal opinions."
    )
    custom_data: str = "<language>en-us</language>"


def _coerce(section: str, key: str, value: Any, default: Any) -> Any:
    """Check a site.json value against the type of the field default.

    A bare string is accepted where a list of strings is expected.

    Raises:
        ConfigurationError: If the value has the wrong type
    """
    if isinstance(default, list):
        if isinstance(value, str):
            value = [value]
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            return value
        raise ConfigurationError(
            f"'{section}.{key}' must be a string or a list of strings, got {value!r}"
        )

    # bool is a subclass of int
    if isinstance(value, bool) != isinstance(default, bool) or not isinstance(
        value, type(default)
    ):
        raise ConfigurationError(
            f"'{section}.{key}' must be of type {type(default).__name__}, got {value!r}"
        )
    return value


class Config:
    """Main configuration manager."""

    # Default site config file path
    SITE_CONFIG_FILE = "site.json"

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.site_url = os.getenv("SITE_URL", "")
        self.content_dir = os.getenv("CONTENT_DIR", "src/pages")
        self.content_base_path = os.getenv("CONTENT_BASE_PATH", "/")
        self.feed_output = os.getenv("FEED_OUTPUT", "dist/rss.xml")
        self.site_config_file = os.getenv("SITE_CONFIG_FILE", self.SITE_CONFIG_FILE)
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        self.logger = create_execution_logger("config")

    def get_site_url(self) -> str:
        """Get the deployed site URL.

        Raises:
            ConfigurationError: If SITE_URL is unset or blank
        """
        site_url = self.site_url.strip() if self.site_url else ""
        if not site_url:
            raise ConfigurationError("SITE_URL is not set; cannot build feed links")
        return site_url

    def _load_site_file(self) -> dict[str, Any]:
        site_file = Path(self.site_config_file)
        if not site_file.exists():
            self.logger.debug(f"No site config file at {site_file}; using defaults")
            return {}

        try:
            with open(site_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"Invalid JSON in site config file {site_file}: {e}")
            raise ConfigurationError(f"Invalid JSON in site config file: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"Cannot read site config file {site_file}: {e}")
            raise ConfigurationError(
                f"Cannot read site config file {site_file}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Site config file {site_file} must contain a JSON object"
            )
        return data

    def _overlay(self, instance: Any, section: str, values: dict[str, Any]) -> Any:
        """Copy known keys from a site.json section onto a config dataclass."""
        known = {f.name: getattr(instance, f.name) for f in fields(instance)}
        for key, value in values.items():
            if key not in known:
                self.logger.warning(
                    f"Ignoring unknown key '{section}.{key}' in site config"
                )
                continue
            setattr(instance, key, _coerce(section, key, value, known[key]))
        return instance

    def _section(self, name: str) -> dict[str, Any]:
        section = self._load_site_file().get(name, {})
        if not isinstance(section, dict):
            raise ConfigurationError(f"Section '{name}' in site config must be an object")
        return section

    def get_site_config(self) -> SiteConfig:
        """Get site metadata."""
        return self._overlay(SiteConfig(), "site", self._section("site"))

    def get_locale_config(self) -> LocaleConfig:
        """Get locale settings."""
        return self._overlay(LocaleConfig(), "locale", self._section("locale"))

    def get_feed_config(self) -> FeedConfig:
        """Get feed channel metadata.

        When the feed section does not set custom_data but a locale section is
        present, the <language> element is derived from the locale.
        """
        feed_section = self._section("feed")
        feed_config = self._overlay(FeedConfig(), "feed", feed_section)

        if "custom_data" not in feed_section and self._section("locale"):
            feed_config.custom_data = language_element(self.get_locale_config())

        return feed_config


def language_element(locale: LocaleConfig) -> str:
    """Render the RSS <language> element for a locale."""
    tag = locale.lang_tag[0] if locale.lang_tag else ""
    language = (tag or locale.lang or "en").lower()
    return f"<language>{language}</language>"
