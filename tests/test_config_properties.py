"""Property-based tests for configuration management."""

import os
import string
from unittest.mock import patch

import pytest
from hypothesis import given
from hypothesis import strategies as st

from src.config import Config, LocaleConfig, language_element
from src.errors import ConfigurationError

lang_text = st.text(alphabet=string.ascii_letters + "-", min_size=1, max_size=12)

url_text = st.text(
    alphabet=st.characters(whitelist_categories=["Ll", "Lu", "Nd"]),
    min_size=1,
    max_size=30,
)


class TestConfigProperties:
    """Property-based tests for Config class."""

    @given(url_text)
    def test_configured_site_url_is_used(self, host):
        """For any configured SITE_URL, the feed uses exactly that URL."""
        site_url = f"https://{host}.com"
        with patch.dict(os.environ, {"SITE_URL": site_url}):
            config = Config()

        assert config.get_site_url() == site_url

    @given(st.text(alphabet=" \t\n", max_size=10))
    def test_blank_site_url_is_rejected(self, blank):
        """For any blank SITE_URL, the build fails with a configuration error."""
        with patch.dict(os.environ, {"SITE_URL": blank}):
            config = Config()

        with pytest.raises(ConfigurationError):
            config.get_site_url()

    @given(lang_text, st.lists(lang_text, max_size=3))
    def test_language_element_is_lowercase(self, lang, lang_tag):
        """The rendered <language> element is always lowercase and well formed."""
        element = language_element(LocaleConfig(lang=lang, lang_tag=lang_tag))

        assert element == element.lower()
        assert element.startswith("<language>")
        assert element.endswith("</language>")
