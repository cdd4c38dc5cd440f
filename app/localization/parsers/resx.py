"""XML resource files (.resx translations, .resxcfg configurations).

Resources are read as plain structured text:

    <root>
      <data name="Greeting" xml:space="preserve">
        <value>Hello, {0}</value>
        <comment>Shown on the start page</comment>
      </data>
    </root>

Locale-specific files use '.' as the separator ("Strings.de-DE.resx").
"""

import xml.etree.ElementTree as ElementTree
from typing import Dict, Iterator, List, Optional, Tuple

from core.logging import get_module_logger
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
from localization.models import (
    TextProcessingMode,
    Translation,
    TranslationTree,
    TranslationTreeLeaf,
)
from localization.parsers.base import BaseParser, Content
from localization.text import absolute_position

logger = get_module_logger()

XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"
STRING_TYPE = "System.String"
KEY_LOCALE = "locale"
KEY_NAME = "name"


def load_root(text: str) -> ElementTree.Element:
    """Parse an XML document and return its root element.

    Raises:
        TextParseError: On malformed XML, with the parser's line and column.
        ParserError: If the document has no root element.
    """
    if not text.strip():
        raise ParserError("The document has no XML root node")
    try:
        return ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        line, column = e.position
        # expat columns are 0-based
        column += 1
        position = absolute_position(text, line, column)
        raise TextParseError(f"{e} at {line}:{column}", position, position, line, column) from e


def _child_text(element: ElementTree.Element, tag: str) -> Optional[str]:
    child = element.find(tag)
    if child is None:
        return None
    return (child.text or "").strip()


class ResxParser(BaseParser):
    """Parser for .resx resource files."""

    name = "resx"
    extensions = (".resx",)
    config_extensions = (".resxcfg",)
    locale_separator = "."
    default_mode = TextProcessingMode.DOTNET

    def data_elements(self, root: ElementTree.Element) -> Iterator[Tuple[str, Optional[str], Optional[str]]]:
        """Yield (name, value, comment) for every string resource.

        Elements typed as anything but System.String are skipped. Values are
        trimmed unless the element asks for xml:space="preserve".

        Raises:
            ParserError: On a duplicate resource name.
        """
        seen = set()
        for data in root.findall("data"):
            data_type = data.get("type")
            if data_type is not None and not STRING_TYPE.startswith(data_type):
                continue
            name = (data.get(KEY_NAME) or "").strip()
            if not name:
                continue
            if name.upper() in seen:
                raise ParserError(f"Duplicate key '{name}' specified in the translation file")
            seen.add(name.upper())

            value_element = data.find("value")
            value = None
            if value_element is not None:
                value = value_element.text or ""
                if data.get(XML_SPACE) != "preserve":
                    value = value.strip()
            yield name, value, _child_text(data, "comment")

    def parse_configuration(self, content: Content, source: Optional[str] = None) -> LoadConfiguration:
        root = load_root(self.decode(content) or "")

        values: Dict[str, Optional[str]] = {
            key: _child_text(root, key)
            for key in (KEY_DEFAULT_FILE, KEY_DEFAULT_LOCALE, KEY_TEXT_PROCESSING_MODE)
        }

        pairs: List[Tuple[str, str]] = []
        section = root.find(KEY_SECTION_TRANSLATIONS)
        if section is not None:
            for item in section:
                if item.tag.lower() != KEY_LOCALE:
                    raise ParserError(f"Unexpected '{item.tag}' tag in the '{KEY_SECTION_TRANSLATIONS}' section")
                locale = (item.get(KEY_NAME) or "").strip()
                if not locale:
                    raise ParserError(f"The '{KEY_NAME}' attribute is missing from the '{KEY_LOCALE}' node")
                pairs.append((locale, item.text or ""))

        return configuration_from_values(values, build_translation_map(pairs), source)

    def parse_translation(
        self,
        content: Content,
        locale: Optional[str] = None,
        mode: Optional[TextProcessingMode] = None,
    ) -> Optional[Translation]:
        text = self.decode(content)
        if not text:
            return None
        root = load_root(text)
        mode = self.effective_mode(mode)

        result = Translation()
        for key, value, comment in self.data_elements(root):
            # XML already decoded the value; there is no escaped form
            entry = self.make_entry(key, value, mode)
            entry.comments = comment or None
            result.add(key, entry)
        logger.debug("resx_entries_read", entry_count=len(result))
        return result

    def parse_structure(self, content: Content) -> Optional[TranslationTree]:
        text = self.decode(content)
        if not text:
            return None
        root = load_root(text)

        tree = TranslationTree()
        for key, value, _ in self.data_elements(root):
            tree.root.add_leaf(
                TranslationTreeLeaf(
                    key=key,
                    value=value,
                    contains_placeholders=self.leaf_flags(value, self.default_mode),
                )
            )
        return tree
