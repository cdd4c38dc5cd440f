"""Tests for localization.factory."""

import pytest

from core.config import LocalizationSettings
from localization.exceptions import ParserConfigError, ParserError, ParserLoadError
from localization.factory import create_registry, create_resolver, load_configuration
from localization.models import TextProcessingMode
from localization.resolver import TranslationResolver
from localization.sources import MappingSource
from tests.factories.localization import make_configuration


def make_settings(**values) -> LocalizationSettings:
    return LocalizationSettings(_env_file=None, **values)


@pytest.mark.unit
class TestCreateRegistry:
    """Tests for create_registry."""

    def test_settings_applied(self):
        """Parser options come from the settings."""
        registry = create_registry(
            make_settings(
                LOCALIZATION_RECOGNIZE_FILE_REFS=True,
                LOCALIZATION_TREAT_EMPTY_VALUES_AS_ABSENT=True,
                LOCALIZATION_DESCRIPTION_CAPTION="Notes",
            )
        )
        assert registry.options.recognize_references is True
        assert registry.options.treat_empty_values_as_absent is True
        assert registry.options.description_caption == "Notes"
        assert registry.options.comments_caption == "Comments"

    def test_column_matcher(self):
        """A column matcher is passed to the parser options."""

        def matcher(caption, locale):
            return False

        assert create_registry(make_settings(), matcher).options.column_matcher is matcher


@pytest.mark.unit
class TestLoadConfiguration:
    """Tests for load_configuration."""

    def test_absolute_path(self, translations_dir, registry):
        """Configuration files are parsed by extension."""
        config = load_configuration(translations_dir / "strings.cfg", registry, make_settings())
        assert config.default_file == "strings.ini"
        assert config.directory == str(translations_dir)

    def test_files_location(self, translations_dir, registry):
        """Relative paths are looked up in the files location."""
        settings = make_settings(LOCALIZATION_FILES_LOCATION=str(translations_dir))
        assert load_configuration("strings.cfg", registry, settings).default_locale == "en-US"

    def test_unknown_extension(self, tmp_path, registry):
        """Configuration extensions need a parser."""
        with pytest.raises(ParserLoadError, match="'.yaml'"):
            load_configuration(tmp_path / "strings.yaml", registry, make_settings())

    def test_invalid_configuration(self, tmp_path, registry):
        """Invalid configurations raise a configuration error."""
        path = tmp_path / "strings.jsoncfg"
        path.write_text('{"default_locale": "en-US"}', encoding="utf-8")
        with pytest.raises(ParserConfigError):
            load_configuration(path, registry, make_settings())


@pytest.mark.unit
class TestCreateResolver:
    """Tests for create_resolver."""

    def test_from_configuration_file(self, translations_dir):
        """Files next to the configuration are found."""
        resolver = create_resolver(str(translations_dir / "strings.cfg"), make_settings())
        assert isinstance(resolver, TranslationResolver)
        assert resolver.expand("greeting", "de-AT") == "Servus"
        assert resolver.expand("farewell", "de-CH") == "Auf Wiedersehen"
        assert resolver.expand("only_default", "fr-FR") == "Default only"

    def test_default_mode_from_settings(self, translations_dir):
        """The settings' default mode is applied."""
        resolver = create_resolver(
            translations_dir / "strings.cfg", make_settings(LOCALIZATION_DEFAULT_MODE="Arb")
        )
        assert resolver.default_mode is TextProcessingMode.ARB

    def test_invalid_default_mode(self, translations_dir):
        """Unknown mode names are rejected."""
        with pytest.raises(ParserError, match="Unknown text processing mode"):
            create_resolver(translations_dir / "strings.cfg", make_settings(LOCALIZATION_DEFAULT_MODE="yaml"))

    def test_in_memory_configuration(self):
        """A configuration object and an in-memory source can be used directly."""
        content = '[menu]\nopen = "Open {item}"\n'
        resolver = create_resolver(
            make_configuration(default_file="strings.toml", text_processing_mode=TextProcessingMode.ARB),
            make_settings(),
            source=MappingSource({"strings.toml": content}),
        )
        assert resolver.expand("menu.open", None, {"item": "file"}) == "Open file"

    def test_references_from_settings(self, tmp_path):
        """File references are enabled through the settings."""
        (tmp_path / "strings.cfg").write_text("default_file=strings.ini\n", encoding="utf-8")
        (tmp_path / "strings.ini").write_text("terms=@terms.txt\n", encoding="utf-8")
        (tmp_path / "terms.txt").write_text("Be nice", encoding="utf-8")

        resolver = create_resolver(tmp_path / "strings.cfg", make_settings(LOCALIZATION_RECOGNIZE_FILE_REFS=True))
        assert resolver.expand("terms") == "Be nice"
