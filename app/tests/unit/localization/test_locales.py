"""Tests for localization.locales."""

import pytest

from localization import locales


@pytest.mark.unit
class TestLocaleNames:
    """Tests for locale name helpers."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("de_at", "de-AT"),
            ("EN-us", "en-US"),
            ("zh_hant_tw", "zh-Hant-TW"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, name, expected):
        """normalize() applies BCP 47 casing."""
        assert locales.normalize(name) == expected

    def test_language_code(self):
        """language_code() returns the language part."""
        assert locales.language_code("de_AT") == "de"
        assert locales.language_code(None) == ""

    def test_basic_locale_from_region(self):
        """A regional locale maps to the language's default region."""
        assert locales.basic_locale("de-CH") == "de-DE"

    def test_basic_locale_from_language(self):
        """A bare language maps to its default region."""
        assert locales.basic_locale("de") == "de-DE"

    def test_basic_locale_same_as_input(self):
        """None when the basic locale is the locale itself."""
        assert locales.basic_locale("de-DE") is None

    def test_basic_locale_unknown(self):
        """None for an empty or unknown language."""
        assert locales.basic_locale("") is None
        assert locales.basic_locale("qqq") is None

    def test_is_known(self):
        """is_known() checks Babel's data."""
        assert locales.is_known("de-AT")
        assert not locales.is_known("xx-Invalid-Locale-1")

    def test_to_babel(self):
        """to_babel() converts names and falls back to en-US."""
        assert str(locales.to_babel("de-AT")) == "de_AT"
        assert str(locales.to_babel(None)) == "en_US"
        assert str(locales.to_babel("xx-Invalid-Locale-1")) == "en_US"
