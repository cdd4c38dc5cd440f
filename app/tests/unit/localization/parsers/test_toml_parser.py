"""Tests for localization.parsers.toml."""

import pytest

from localization.exceptions import TextParseError
from localization.models import TextProcessingMode
from localization.parsers.toml import TomlParser, fold_line_continuations

CONTENT = '''# Main translations
title = "Main \\"menu\\""
[logs.server]
started = "Started\\tnow"  # trailing comment
literal = 'C:\\path'
multi = """
Line one
Line two"""
raw = \'\'\'
Keep \\n as is\'\'\'
'''


@pytest.mark.unit
class TestTomlTranslation:
    """Tests for TomlParser.parse_translation."""

    def test_basic_strings_decoded(self):
        """Basic strings are unescaped; the raw form is kept."""
        translation = TomlParser().parse_translation(CONTENT)
        entry = translation.get("title")
        assert entry.text == 'Main "menu"'
        assert entry.escaped_text == 'Main \\"menu\\"'
        assert translation.get("logs.server.started").text == "Started\tnow"

    def test_literal_strings_verbatim(self):
        """Literal strings keep backslashes."""
        translation = TomlParser().parse_translation(CONTENT)
        assert translation.get("logs.server.literal").text == "C:\\path"
        assert translation.get("logs.server.raw").text == "Keep \\n as is"

    def test_multiline_drops_first_newline(self):
        """A newline right after the opening delimiter is dropped."""
        translation = TomlParser().parse_translation(CONTENT)
        assert translation.get("logs.server.multi").text == "Line one\nLine two"

    def test_line_continuation(self):
        """A trailing backslash joins lines and drops leading blanks."""
        translation = TomlParser().parse_translation('msg = """\nThe quick \\\n    brown fox"""\n')
        assert translation.get("msg").text == "The quick brown fox"

    def test_fold_line_continuations_keeps_escaped_backslash(self):
        """An escaped backslash is not a continuation."""
        assert fold_line_continuations("a\\\\\nb") == "a\\\\\nb"

    def test_dotted_and_quoted_keys(self):
        """Dotted keys extend the group; quoted keys may contain blanks."""
        translation = TomlParser().parse_translation('[s]\na.b = "x"\n"my key" = "y"\n')
        assert translation.get("s.a.b").text == "x"
        assert translation.get("s.my key").text == "y"

    def test_arb_mode_drops_escaped_form(self):
        """Only backslash-escaping dialects keep the escaped text."""
        entry = TomlParser().parse_translation(
            'hello = "Hi {name}"', mode=TextProcessingMode.ARB
        ).get("hello")
        assert entry.escaped_text is None
        assert entry.contains_placeholders is True


@pytest.mark.unit
class TestTomlErrors:
    """Tests for TomlParser structural errors."""

    def test_unquoted_value(self):
        """Values must be strings."""
        with pytest.raises(TextParseError, match="Unquoted values"):
            TomlParser().parse_translation("key = value")

    def test_unterminated_string(self):
        """An unterminated string is reported at its opening quote."""
        with pytest.raises(TextParseError) as exc_info:
            TomlParser().parse_translation('key = "abc')
        assert (exc_info.value.line, exc_info.value.column) == (1, 7)

    def test_unterminated_multiline_string(self):
        """An unterminated multi-line string is reported."""
        with pytest.raises(TextParseError, match="Unterminated multi-line string"):
            TomlParser().parse_translation('key = """abc\n')

    def test_text_after_value(self):
        """Only a comment may follow a value."""
        with pytest.raises(TextParseError, match="Unexpected character 'x'"):
            TomlParser().parse_translation('key = "a" x')

    def test_missing_value(self):
        """A separator must be followed by a value."""
        with pytest.raises(TextParseError, match="Missing value"):
            TomlParser().parse_translation("key =")


@pytest.mark.unit
class TestTomlStructureAndConfiguration:
    """Tests for TomlParser trees and configurations."""

    def test_structure(self):
        """The tree keeps decoded and escaped values."""
        tree = TomlParser().parse_structure(CONTENT)
        leaf = tree.find_leaf("logs.server.started")
        assert leaf.value == "Started\tnow"
        assert leaf.escaped_value == "Started\\tnow"
        assert tree.get_value("title") == 'Main "menu"'

    def test_configuration(self):
        """Configuration values are strings; the translations table maps locales."""
        config = TomlParser().parse_configuration(
            'default_file = "strings.toml"\n'
            'default_locale = "en-US"\n'
            "[translations]\n"
            'de = "strings_de.toml"\n'
        )
        assert config.default_file == "strings.toml"
        assert dict(config.translations) == {"DE": "strings_de.toml"}
        assert config.text_processing_mode is None

    def test_extensions(self):
        """The toml parser reads .toml and .tomlcfg files."""
        assert TomlParser().can_handle(".toml")
        assert TomlParser().can_handle_config(".tomlcfg")
