"""Shared handling of JSON-shaped formats (json, arb)."""

import json
from typing import Any, Dict, List, Optional, Tuple

from localization.configuration import (
    KEY_DEFAULT_FILE,
    KEY_DEFAULT_LOCALE,
    KEY_SECTION_TRANSLATIONS,
    KEY_TEXT_PROCESSING_MODE,
    LoadConfiguration,
    build_translation_map,
    configuration_from_values,
)
from localization.exceptions import ParserError, TextParseError
from localization.models import TranslationTree, TranslationTreeNode, TranslationTreeLeaf
from localization.parsers.base import BaseParser, Content


def _unique_object(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in pairs:
        if key in result:
            raise ParserError(f"Duplicate key '{key}'")
        result[key] = value
    return result


def load_json_object(text: str) -> Dict[str, Any]:
    """Decode a JSON document whose root is an object.

    Raises:
        TextParseError: On malformed JSON, with the decoder's position.
        ParserError: On a duplicate key or a non-object root.
    """
    try:
        data = json.loads(text, object_pairs_hook=_unique_object)
    except json.JSONDecodeError as e:
        raise TextParseError(f"{e.msg} at {e.lineno}:{e.colno}", e.pos, e.pos, e.lineno, e.colno) from e
    if not isinstance(data, dict):
        raise ParserError("The root element of the document must be an object")
    return data


def join_key(group: str, key: str) -> str:
    return f"{group}.{key}" if group else key


class JsonFamilyParser(BaseParser):
    """Base for formats stored as a JSON object.

    String properties are entries; object properties are groups whose keys
    are joined with '.'.
    """

    def skip_property(self, name: str) -> bool:
        """Whether a property carries metadata rather than a value or a group."""
        return False

    def leaf_key(self, name: str) -> str:
        return name.strip()

    def parse_configuration(self, content: Content, source: Optional[str] = None) -> LoadConfiguration:
        text = self.decode(content) or ""
        data = load_json_object(text) if text.strip() else {}

        values: Dict[str, Optional[str]] = {}
        pairs: List[Tuple[str, str]] = []
        for name, value in data.items():
            key = name.strip().lower()
            if key == KEY_SECTION_TRANSLATIONS:
                if not isinstance(value, dict):
                    raise ParserError(f"The '{KEY_SECTION_TRANSLATIONS}' setting must be an object")
                for locale, reference in value.items():
                    if not isinstance(reference, str):
                        raise ParserError(f"The translation reference for '{locale}' must be a string")
                    pairs.append((locale, reference))
            elif key in (KEY_DEFAULT_FILE, KEY_DEFAULT_LOCALE, KEY_TEXT_PROCESSING_MODE):
                if value is not None and not isinstance(value, str):
                    raise ParserError(f"The '{key}' setting must be a string")
                values[key] = value

        return configuration_from_values(values, build_translation_map(pairs), source)

    def parse_structure(self, content: Content) -> Optional[TranslationTree]:
        text = self.decode(content)
        if not text:
            return None
        tree = TranslationTree()
        self.fill_node(tree.root, load_json_object(text))
        return tree

    def fill_node(self, node: TranslationTreeNode, data: Dict[str, Any]) -> None:
        mode = self.default_mode
        for name, value in data.items():
            if self.skip_property(name):
                continue
            if isinstance(value, str):
                node.add_leaf(
                    TranslationTreeLeaf(
                        key=self.leaf_key(name),
                        value=value,
                        contains_placeholders=self.leaf_flags(value, mode),
                    )
                )
            elif isinstance(value, dict):
                self.fill_node(node.make_node(name.strip()), value)
            else:
                raise ParserError(f"Unsupported value of type '{type(value).__name__}' for key '{name}'")
