"""Tests for localization.parsers.registry."""

import pytest

from localization.parsers.arb import ArbParser
from localization.parsers.base import ParserOptions
from localization.parsers.ini import IniParser
from localization.parsers.registry import ParserRegistry
from localization.parsers.toml import TomlParser


@pytest.mark.unit
class TestParserRegistry:
    """Tests for ParserRegistry."""

    def test_default_extensions(self, registry):
        """All built-in formats are registered."""
        assert registry.extensions() == [".ini", ".toml", ".json", ".arb", ".csv", ".tsv", ".resx"]
        assert registry.config_extensions() == [".cfg", ".tomlcfg", ".jsoncfg", ".arbcfg", ".resxcfg"]

    def test_lookup_ignores_case(self, registry):
        """Extensions are matched case-insensitively."""
        assert isinstance(registry.parser_for(".TOML"), TomlParser)
        assert isinstance(registry.config_parser_for(".Cfg"), IniParser)

    def test_unknown_extensions(self, registry):
        """Unknown or empty extensions have no parser."""
        assert registry.parser_for(".po") is None
        assert registry.parser_for("") is None
        assert registry.parser_for(None) is None
        assert registry.config_parser_for(".csv") is None

    def test_options_shared(self):
        """Keyword options reach every default parser."""
        registry = ParserRegistry.default(recognize_references=True, description_caption="Notes")
        assert registry.options.recognize_references is True
        assert registry.parser_for(".csv").options.description_caption == "Notes"
        assert registry.parser_for(".ini").options is registry.options

    def test_explicit_options_win(self):
        """An options object replaces the keyword arguments."""
        options = ParserOptions(treat_empty_values_as_absent=True)
        registry = ParserRegistry.default(options, recognize_references=True)
        assert registry.options is options
        assert registry.options.recognize_references is False

    def test_register_replaces(self, registry):
        """A later parser wins for a shared extension."""

        class ArbAsJson(ArbParser):
            extensions = (".json",)
            config_extensions = ()

        replacement = ArbAsJson()
        registry.register(replacement)
        assert registry.parser_for(".json") is replacement
        assert isinstance(registry.parser_for(".arb"), ArbParser)

    def test_empty_registry(self):
        """A plain registry starts empty."""
        assert ParserRegistry().extensions() == []
