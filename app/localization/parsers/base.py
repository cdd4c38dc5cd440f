"""Parser interface shared by all translation formats.

Defines the contract for turning raw file content into a LoadConfiguration,
a flat Translation and a hierarchical TranslationTree.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, Tuple, Union

from core.logging import get_module_logger
from localization.configuration import LoadConfiguration
from localization.exceptions import (
    ParserConfigError,
    ParserError,
    ParserLoadError,
    TextFileParseError,
    TextParseError,
)
from localization.models import (
    TextProcessingMode,
    Translation,
    TranslationEntry,
    TranslationTree,
)
from localization.templates.scanner import string_contains_placeholders
from localization.text import decode_content, is_reference, unescape_string

if TYPE_CHECKING:
    from localization.parsers.registry import ParserRegistry

logger = get_module_logger()

Content = Union[bytes, str, None]

# (column caption, requested locale) -> whether the column holds that locale
ColumnMatcher = Callable[[str, str], bool]


@dataclass(frozen=True)
class ParserOptions:
    """Options shared by the parsers of one registry.

    Attributes:
        recognize_references: Store values that start with '@' as file references.
        treat_empty_values_as_absent: Table formats skip empty cells.
        description_caption: Header caption of the table description column.
        comments_caption: Header caption of the table comments column.
        column_matcher: Table formats ask it about columns that match neither
            the locale name nor its language code.
    """

    recognize_references: bool = False
    treat_empty_values_as_absent: bool = False
    description_caption: str = "Description"
    comments_caption: str = "Comments"
    column_matcher: Optional[ColumnMatcher] = None


class BaseParser(ABC):
    """Abstract base for format parsers.

    Subclasses declare the extensions they handle and implement the three
    parse operations. Content may be given as bytes (UTF-8, optional BOM) or
    as an already decoded string.
    """

    name: str = ""
    extensions: Tuple[str, ...] = ()
    config_extensions: Tuple[str, ...] = ()
    locale_separator: str = "_"
    multi_locale: bool = False
    default_mode: TextProcessingMode = TextProcessingMode.BACKSLASH_ESCAPING

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options or ParserOptions()

    def can_handle(self, extension: str) -> bool:
        """Check whether this parser reads translation files with the extension."""
        return bool(extension) and extension.lower() in self.extensions

    def can_handle_config(self, extension: str) -> bool:
        return bool(extension) and extension.lower() in self.config_extensions

    def effective_mode(self, mode: Optional[TextProcessingMode]) -> TextProcessingMode:
        return mode or self.default_mode

    def make_entry(
        self,
        key: str,
        text: Optional[str],
        mode: TextProcessingMode,
        escaped_text: Optional[str] = None,
    ) -> TranslationEntry:
        """Create an entry from a parsed value.

        A value that starts with '@' becomes a reference when references are
        enabled. The placeholder flag is computed from the escaped form when
        there is one.

        Raises:
            PlaceholderSyntaxError: If the text has unbalanced braces under
                a dialect that parses placeholders.
        """
        if text is not None and is_reference(text, self.options.recognize_references):
            return TranslationEntry(key=key, reference=text[1:].strip())

        if not mode.keeps_escaped_text:
            escaped_text = None
        entry = TranslationEntry(key=key, text=text, escaped_text=escaped_text)
        scanned = escaped_text if escaped_text is not None else text
        if scanned:
            entry.contains_placeholders = string_contains_placeholders(scanned, mode)
        return entry

    def split_escapes(self, value: str, mode: TextProcessingMode) -> Tuple[str, Optional[str]]:
        """Return (text, escaped text) for a stored value under a mode."""
        if mode.keeps_escaped_text:
            return unescape_string(value), value
        return value, None

    def leaf_flags(self, value: Optional[str], mode: TextProcessingMode) -> bool:
        if not value or is_reference(value, self.options.recognize_references):
            return False
        return string_contains_placeholders(value, mode)

    @abstractmethod
    def parse_configuration(self, content: Content, source: Optional[str] = None) -> LoadConfiguration:
        """Parse a configuration file.

        Args:
            content: Raw file content.
            source: Name of the file, kept on the configuration.

        Returns:
            A validated LoadConfiguration.

        Raises:
            TextParseError: On malformed syntax.
            ParserError: On invalid configuration values, or when the
                format has no configuration form.
        """
        pass

    @abstractmethod
    def parse_translation(
        self,
        content: Content,
        locale: Optional[str] = None,
        mode: Optional[TextProcessingMode] = None,
    ) -> Optional[Translation]:
        """Parse a translation file.

        Args:
            content: Raw file content.
            locale: Locale to extract; used by multi-locale formats.
            mode: Text processing mode; None means the format default.

        Returns:
            The Translation, or None when the content is empty or holds no
            data for the locale.

        Raises:
            TextParseError: On malformed syntax.
            ParserError: On invalid content such as duplicate keys.
        """
        pass

    @abstractmethod
    def parse_structure(self, content: Content) -> Optional[TranslationTree]:
        """Parse a translation file into a tree of groups and keys.

        Returns:
            The TranslationTree, or None when the content is empty.
        """
        pass

    @staticmethod
    def decode(content: Content) -> Optional[str]:
        return decode_content(content)

    def parse_configuration_file(self, path: Union[str, Path]) -> LoadConfiguration:
        """Read and parse a configuration file from disk.

        The directory of the file becomes the directory hint of the result.

        Raises:
            ParserLoadError: If the file cannot be read.
            ParserConfigError: If the file content is invalid.
        """
        file_name = str(path).strip()
        try:
            content = Path(file_name).read_bytes()
        except OSError as e:
            logger.warning("configuration_read_failed", file=file_name, error=str(e))
            raise ParserLoadError(file_name, f"Loading of the configuration file '{file_name}' has failed") from e

        try:
            config = self.parse_configuration(content, source=file_name)
        except ParserError as e:
            logger.warning("configuration_parse_failed", file=file_name, error=str(e))
            raise ParserConfigError(
                file_name,
                f"Parsing of the configuration file '{file_name}' has failed with an error: {e}",
            ) from e

        return config.with_directory(os.path.dirname(file_name))

    def load_structure(
        self,
        config_path: Union[str, Path],
        registry: Optional["ParserRegistry"] = None,
    ) -> Tuple[TranslationTree, LoadConfiguration]:
        """Parse a configuration file and the tree of its default file.

        Args:
            config_path: Path to the configuration file.
            registry: Used to find a parser when the default file is in a
                different format than the configuration.

        Returns:
            (tree, configuration).

        Raises:
            ParserLoadError: If a file cannot be read, is empty, or has no parser.
            ParserConfigError: If the configuration is invalid.
            TextFileParseError: If the default file is malformed.
        """
        config_file = str(config_path)
        config = self.parse_configuration_file(config_file)

        default_file = config.default_file
        if not os.path.isabs(default_file) and config.directory:
            default_file = os.path.join(config.directory, default_file)

        extension = os.path.splitext(default_file)[1].lower()
        parser: Optional[BaseParser] = self if self.can_handle(extension) else None
        if parser is None and registry is not None:
            parser = registry.parser_for(extension)
        if parser is None:
            raise ParserLoadError(
                config_file,
                f"No parser found for the '{extension}' file extension that the default "
                f"translation file '{default_file}' has",
            )

        try:
            content = Path(default_file).read_bytes()
        except OSError as e:
            raise ParserLoadError(
                config_file, f"Loading of the default translation file '{default_file}' has failed"
            ) from e
        if not self.decode(content):
            raise ParserLoadError(config_file, f"Default translation file '{default_file}' is empty")

        try:
            tree = parser.parse_structure(content)
        except TextParseError as e:
            raise TextFileParseError.from_error(default_file, e) from e

        logger.info(
            "translation_structure_loaded",
            config_file=config_file,
            default_file=default_file,
            parser=parser.name,
        )
        return tree, config
