"""Tests for localization.models."""

from dataclasses import FrozenInstanceError

import pytest

from localization.exceptions import ParserError
from localization.models import (
    EMPTY_ENTRY,
    Placeholder,
    TextProcessingMode,
    Translation,
    TranslationEntry,
    TranslationTree,
    TranslationTreeLeaf,
)
from tests.factories.localization import make_entry, make_translation


@pytest.mark.unit
class TestTextProcessingMode:
    """Tests for TextProcessingMode."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("None", TextProcessingMode.NONE),
            ("Backslash", TextProcessingMode.BACKSLASH_ESCAPING),
            ("BackslashEscaping", TextProcessingMode.BACKSLASH_ESCAPING),
            ("backslash_escaping", TextProcessingMode.BACKSLASH_ESCAPING),
            ("Arb", TextProcessingMode.ARB),
            ("ArbNoEscaping", TextProcessingMode.ARB_NO_ESCAPING),
            ("DotNet", TextProcessingMode.DOTNET),
        ],
    )
    def test_parse_names(self, name, expected):
        """parse() accepts names and aliases case-insensitively."""
        assert TextProcessingMode.parse(name) is expected

    def test_parse_empty(self):
        """An empty value means no mode."""
        assert TextProcessingMode.parse("") is None
        assert TextProcessingMode.parse(None) is None

    def test_parse_unknown(self):
        """An unknown name is a ParserError."""
        with pytest.raises(ParserError):
            TextProcessingMode.parse("Markdown")

    def test_flags(self):
        """Dialect flags describe placeholder parsing and escaping."""
        assert not TextProcessingMode.NONE.parses_placeholders
        assert not TextProcessingMode.BACKSLASH_ESCAPING.parses_placeholders
        assert TextProcessingMode.ARB_NO_ESCAPING.is_arb
        assert TextProcessingMode.DOTNET.keeps_escaped_text
        assert not TextProcessingMode.ARB.keeps_escaped_text


@pytest.mark.unit
class TestTranslationEntry:
    """Tests for TranslationEntry."""

    def test_empty_entry(self):
        """The canonical empty entry has no text and no reference."""
        assert EMPTY_ENTRY.is_empty
        assert not make_entry("x").is_empty
        assert not TranslationEntry(reference="other.txt").is_empty
        assert EMPTY_ENTRY.is_locked

    def test_locked_entry_is_read_only(self):
        """A locked entry rejects field changes and new metadata."""
        entry = make_entry("Hi", properties={"owner": "web"}).lock()
        with pytest.raises(FrozenInstanceError):
            entry.text = "Hello"
        with pytest.raises(FrozenInstanceError):
            entry.add_placeholder(Placeholder("name"))
        with pytest.raises(TypeError):
            entry.properties["owner"] = "api"
        assert entry.text == "Hi"
        assert entry.properties == {"owner": "web"}

    def test_unlocked_entry_is_mutable(self):
        """Entries are mutable until locked."""
        entry = make_entry("Hi")
        entry.text = "Hello"
        assert entry.text == "Hello"
        assert entry.is_locked is False

    def test_resolve_reference(self):
        """resolve_reference() caches the text and consumes the reference."""
        entry = TranslationEntry(key="terms", reference="terms.txt")
        entry.resolve_reference("Terms of use")
        assert entry.text == "Terms of use"
        assert entry.reference is None

    def test_find_placeholder_ignores_case(self):
        """Placeholders are found by case-insensitive name."""
        entry = make_entry("{Count}")
        entry.add_placeholder(Placeholder(name="Count", type="int"))
        assert entry.find_placeholder("count").type == "int"
        assert entry.find_placeholder("missing") is None


@pytest.mark.unit
class TestTranslation:
    """Tests for Translation."""

    def test_lookup_ignores_case(self):
        """Keys are matched case-insensitively."""
        translation = make_translation({"Greeting": "Hello"})
        assert translation.get("GREETING").text == "Hello"
        assert "greeting" in translation
        assert translation["greeting"].text == "Hello"
        assert translation.keys() == ["GREETING"]

    def test_add_overwrites(self):
        """add() replaces an existing entry."""
        translation = make_translation({"greeting": "Hello"})
        translation.add("greeting", make_entry("Hi"))
        assert translation.get("greeting").text == "Hi"
        assert len(translation) == 1

    def test_missing_key(self):
        """get() returns None for an unknown key."""
        assert make_translation().get("unknown") is None
        assert 42 not in make_translation()

    def test_set_origin(self):
        """set_origin() records the source and returns the translation."""
        translation = Translation()
        assert translation.set_origin("strings.ini") is translation
        assert translation.origin == "strings.ini"
        assert translation.is_basic_locale is False


@pytest.mark.unit
class TestTranslationTree:
    """Tests for TranslationTree."""

    def test_dotted_paths(self):
        """Leaves are reachable by dotted path and through flatten()."""
        tree = TranslationTree()
        tree.root.make_node("logs.server").add_leaf(TranslationTreeLeaf("started", "Started"))
        tree.root.add_leaf(TranslationTreeLeaf("title", "Title"))

        assert tree.get_value("logs.server.started") == "Started"
        assert tree.get_value("LOGS.Server.STARTED") == "Started"
        assert tree.get_value("title") == "Title"
        assert tree.find_leaf("logs.missing.started") is None
        assert dict((key, leaf.value) for key, leaf in tree.flatten()) == {
            "title": "Title",
            "logs.server.started": "Started",
        }

    def test_make_node_reuses_nodes(self):
        """make_node() returns existing nodes."""
        tree = TranslationTree()
        node = tree.root.make_node("a.b")
        assert tree.root.make_node("A.B") is node
        assert tree.root.find_node("a").get_child("b") is node
        assert tree.root.find_node("") is tree.root

    def test_duplicate_leaf(self):
        """A duplicate leaf key raises ParserError."""
        tree = TranslationTree()
        tree.root.add_leaf(TranslationTreeLeaf("key", "1"))
        with pytest.raises(ParserError):
            tree.root.add_leaf(TranslationTreeLeaf("KEY", "2"))
