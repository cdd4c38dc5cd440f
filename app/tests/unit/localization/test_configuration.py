"""Tests for localization.configuration."""

import pytest

from localization.configuration import (
    WILDCARD,
    LoadConfiguration,
    build_translation_map,
    configuration_from_values,
    translation_map_key,
)
from localization.exceptions import ParserError
from localization.models import TextProcessingMode
from tests.factories.localization import make_configuration


@pytest.mark.unit
class TestTranslationMap:
    """Tests for the locale to file map."""

    @pytest.mark.parametrize("name", ["*", "default", "Other", " DEFAULT "])
    def test_wildcard_aliases(self, name):
        """'*', 'default' and 'other' are stored as the wildcard."""
        assert translation_map_key(name) == WILDCARD

    def test_locale_keys_upper_cased(self):
        """Locale keys are upper-cased with '_' read as '-'."""
        assert translation_map_key("de_at") == "DE-AT"

    def test_duplicate_locale(self):
        """A locale listed twice is rejected."""
        with pytest.raises(ParserError):
            build_translation_map([("de", "a.ini"), ("DE", "b.ini")])

    def test_duplicate_wildcard(self):
        """Two wildcard aliases collide."""
        with pytest.raises(ParserError):
            build_translation_map([("*", "a.ini"), ("other", "b.ini")])


@pytest.mark.unit
class TestLoadConfiguration:
    """Tests for LoadConfiguration."""

    def test_file_for_locale_order(self):
        """Exact locale wins over language, language over the wildcard."""
        config = make_configuration(
            translations={"DE-AT": "at.ini", "DE": "de.ini", WILDCARD: "any.ini"}
        )
        assert config.file_for_locale("de-AT") == "at.ini"
        assert config.file_for_locale("de_CH") == "de.ini"
        assert config.file_for_locale("fr-FR") == "any.ini"

    def test_file_for_locale_without_map(self):
        """No map means no explicit file."""
        assert make_configuration().file_for_locale("de-DE") is None

    def test_translations_read_only(self):
        """The translations map cannot be modified."""
        config = make_configuration(translations={"DE": "de.ini"})
        with pytest.raises(TypeError):
            config.translations["FR"] = "fr.ini"

    def test_default_extension(self):
        """The default file extension is lower-cased."""
        assert make_configuration(default_file="Strings.TOML").default_extension == ".toml"

    def test_with_directory(self):
        """with_directory() returns a copy with the hint set."""
        config = make_configuration()
        located = config.with_directory("/srv/locales")
        assert located.directory == "/srv/locales"
        assert config.directory is None

    def test_validate_missing_default_file(self):
        """A configuration without a default file is invalid."""
        with pytest.raises(ParserError, match="default_file"):
            LoadConfiguration(default_file="").validate()

    def test_validate_unknown_locale(self):
        """An unknown default locale is invalid."""
        with pytest.raises(ParserError, match="Unknown locale"):
            make_configuration(default_locale="xx-Invalid-Locale-1").validate()


@pytest.mark.unit
class TestConfigurationFromValues:
    """Tests for configuration_from_values."""

    def test_builds_configuration(self):
        """Parsed values become a validated configuration."""
        config = configuration_from_values(
            {
                "default_file": " strings.arb ",
                "default_locale": "en-US",
                "text_processing_mode": "ArbNoEscaping",
            },
            {"DE": "strings_de.arb"},
            source="strings.arbcfg",
        )
        assert config.default_file == "strings.arb"
        assert config.default_locale == "en-US"
        assert config.text_processing_mode is TextProcessingMode.ARB_NO_ESCAPING
        assert config.translations == {"DE": "strings_de.arb"}
        assert config.source == "strings.arbcfg"

    def test_unknown_mode(self):
        """An unknown text processing mode is rejected."""
        with pytest.raises(ParserError):
            configuration_from_values({"default_file": "a.ini", "text_processing_mode": "bogus"}, {})
