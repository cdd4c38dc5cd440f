"""Shared reader for sectioned key/value formats (ini, toml).

A document is a sequence of lines: blank lines, comment lines, ``[a.b]``
section headers and ``key <separator> value`` pairs. Subclasses define the
comment character, the separators and how a value lexeme is read.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from localization.configuration import (
    KEY_SECTION_TRANSLATIONS,
    LoadConfiguration,
    build_translation_map,
    configuration_from_values,
)
from localization.models import (
    TextProcessingMode,
    Translation,
    TranslationTree,
    TranslationTreeLeaf,
)
from localization.parsers.base import BaseParser, Content
from localization.text import TextCursor, is_key_char, is_key_start


@dataclass
class KeyValueItem:
    """One parsed ``key = value`` pair.

    Attributes:
        group: Dotted group path (section plus dotted-key prefix).
        key: The last key segment.
        raw: Value as written, without delimiting quotes.
        decoded: Value after escape decoding, when the lexer already decoded it.
    """

    group: str
    key: str
    raw: str
    decoded: Optional[str] = None

    @property
    def full_key(self) -> str:
        return f"{self.group}.{self.key}" if self.group else self.key


@dataclass
class KeyValueDocument:
    items: List[KeyValueItem] = field(default_factory=list)
    sections: List[str] = field(default_factory=list)

    def root_values(self) -> Dict[str, str]:
        return {
            item.key.lower(): item.decoded if item.decoded is not None else item.raw
            for item in self.items
            if not item.group
        }

    def section_pairs(self, section: str) -> List[Tuple[str, str]]:
        folded = section.upper()
        return [
            (item.key, item.decoded if item.decoded is not None else item.raw)
            for item in self.items
            if item.group.upper() == folded
        ]


class KeyValueParser(BaseParser):
    """Base for line-oriented formats with bracketed sections."""

    comment_char: str = ";"
    separators: str = "="

    def read_key(self, cursor: TextCursor) -> List[str]:
        """Read a key and return its dotted segments."""
        if cursor.peek() == "*":
            cursor.advance()
            return ["*"]
        if not is_key_start(cursor.peek()):
            raise cursor.error(f"Unexpected character '{cursor.peek()}'")
        start = cursor.offset
        while not cursor.at_end and is_key_char(cursor.peek()):
            cursor.advance()
        return [cursor.text[start : cursor.offset]]

    def read_value(self, cursor: TextCursor) -> Tuple[str, Optional[str]]:
        """Read a value lexeme; the cursor is on the first non-blank character.

        Returns:
            (raw, decoded). ``decoded`` is None when the lexeme needs no
            decoding of its own.
        """
        return cursor.read_until_line_end().rstrip(), None

    def finish_line(self, cursor: TextCursor) -> None:
        """Accept trailing blanks (and a comment, where allowed) up to the line end."""
        cursor.skip_inline_whitespace()
        if not cursor.at_line_end():
            raise cursor.error(f"Unexpected character '{cursor.peek()}'")

    def read_section(self, cursor: TextCursor) -> str:
        mark = cursor.mark()
        cursor.advance()  # '['
        start = cursor.offset
        while not cursor.at_line_end() and cursor.peek() != "]":
            ch = cursor.peek()
            if not (is_key_char(ch) or ch in ". \t"):
                raise cursor.error(f"Character '{ch}' is not valid for a section name")
            cursor.advance()
        if cursor.peek() != "]":
            raise cursor.error("Unclosed section name", mark)
        name = cursor.text[start : cursor.offset].strip()
        cursor.advance()  # ']'
        parts = [part.strip() for part in name.split(".")]
        if not name or any(not part for part in parts):
            raise cursor.error("Empty section name", mark)
        return ".".join(parts)

    def read_document(self, text: str) -> KeyValueDocument:
        """Split the text into sections and key/value items.

        Raises:
            TextParseError: On malformed lines, duplicate sections or
                duplicate keys within a section.
        """
        document = KeyValueDocument()
        cursor = TextCursor(text)
        section = ""
        seen_sections: Set[str] = set()
        seen_keys: Set[Tuple[str, str]] = set()

        while not cursor.at_end:
            cursor.skip_inline_whitespace()
            if cursor.at_line_end():
                cursor.skip_line_break()
                continue

            ch = cursor.peek()
            if ch == self.comment_char:
                cursor.read_until_line_end()
                continue

            if ch == "[":
                mark = cursor.mark()
                section = self.read_section(cursor)
                if section.upper() in seen_sections:
                    raise cursor.error(f"Duplicate section '{section}'", mark)
                seen_sections.add(section.upper())
                document.sections.append(section)
                self.finish_line(cursor)
                continue

            key_mark = cursor.mark()
            segments = self.read_key(cursor)
            key = segments[-1]
            group = ".".join(filter(None, [section] + segments[:-1]))

            cursor.skip_inline_whitespace()
            if cursor.at_line_end():
                raise cursor.error(f"Line {cursor.line} does not contain a key/value pair")
            if cursor.peek() not in self.separators:
                raise cursor.error(f"Key-value separator expected, character '{cursor.peek()}' found instead")
            cursor.advance()
            cursor.skip_inline_whitespace()

            folded = (group.upper(), key.upper())
            if folded in seen_keys:
                raise cursor.error(f"Duplicate key '{key}'", key_mark)
            seen_keys.add(folded)

            raw, decoded = self.read_value(cursor)
            document.items.append(KeyValueItem(group, key, raw, decoded))
            self.finish_line(cursor)

        return document

    def item_text(self, item: KeyValueItem, mode: TextProcessingMode) -> Tuple[str, Optional[str]]:
        """Return (text, escaped text) of an item under a mode."""
        if item.decoded is not None:
            return item.decoded, item.raw
        return self.split_escapes(item.raw, mode)

    def parse_configuration(self, content: Content, source: Optional[str] = None) -> LoadConfiguration:
        text = self.decode(content) or ""
        document = self.read_document(text)
        translations = build_translation_map(document.section_pairs(KEY_SECTION_TRANSLATIONS))
        return configuration_from_values(document.root_values(), translations, source)

    def parse_translation(
        self,
        content: Content,
        locale: Optional[str] = None,
        mode: Optional[TextProcessingMode] = None,
    ) -> Optional[Translation]:
        text = self.decode(content)
        if not text:
            return None
        mode = self.effective_mode(mode)

        result = Translation()
        for item in self.read_document(text).items:
            value, escaped = self.item_text(item, mode)
            result.add(item.full_key, self.make_entry(item.full_key, value, mode, escaped))
        return result

    def parse_structure(self, content: Content) -> Optional[TranslationTree]:
        text = self.decode(content)
        if not text:
            return None
        mode = self.default_mode

        tree = TranslationTree()
        document = self.read_document(text)
        for section in document.sections:
            tree.root.make_node(section)
        for item in document.items:
            value, escaped = self.item_text(item, mode)
            node = tree.root.make_node(item.group)
            node.add_leaf(
                TranslationTreeLeaf(
                    key=item.key,
                    value=value,
                    escaped_value=escaped,
                    contains_placeholders=self.leaf_flags(escaped or value, mode),
                )
            )
        return tree
