"""Registry mapping file extensions to parsers.

A registry is built once at startup and passed to the resolver and to
configuration loading; there is no process-wide parser table.
"""

import threading
from typing import Dict, List, Optional

from core.logging import get_module_logger
from localization.parsers.arb import ArbParser
from localization.parsers.base import BaseParser, ColumnMatcher, ParserOptions
from localization.parsers.csv import CsvParser
from localization.parsers.ini import IniParser
from localization.parsers.json import JsonParser
from localization.parsers.resx import ResxParser
from localization.parsers.toml import TomlParser
from localization.parsers.tsv import TsvParser

logger = get_module_logger()

DEFAULT_PARSERS = (IniParser, TomlParser, JsonParser, ArbParser, CsvParser, TsvParser, ResxParser)


class ParserRegistry:
    """Thread-safe extension to parser lookup.

    Attributes:
        options: Options the default parsers were built with, if any.
    """

    def __init__(self, options: Optional[ParserOptions] = None):
        self.options = options
        self._parsers: Dict[str, BaseParser] = {}
        self._config_parsers: Dict[str, BaseParser] = {}
        self._lock = threading.Lock()

    @classmethod
    def default(
        cls,
        options: Optional[ParserOptions] = None,
        recognize_references: bool = False,
        treat_empty_values_as_absent: bool = False,
        description_caption: str = "Description",
        comments_caption: str = "Comments",
        column_matcher: Optional[ColumnMatcher] = None,
    ) -> "ParserRegistry":
        """Build a registry holding every built-in parser.

        Args:
            options: Shared parser options; when given, the keyword
                arguments are ignored.
            recognize_references: Store '@name' values as references.
            treat_empty_values_as_absent: Table formats skip empty cells.
            description_caption: Header caption of the description column.
            comments_caption: Header caption of the comments column.
            column_matcher: Fallback matcher for table locale columns.

        Returns:
            ParserRegistry: Registry with ini, toml, json, arb, csv, tsv and resx.
        """
        if options is None:
            options = ParserOptions(
                recognize_references=recognize_references,
                treat_empty_values_as_absent=treat_empty_values_as_absent,
                description_caption=description_caption,
                comments_caption=comments_caption,
                column_matcher=column_matcher,
            )
        registry = cls(options)
        for parser_class in DEFAULT_PARSERS:
            registry.register(parser_class(options))
        return registry

    def register(self, parser: BaseParser) -> None:
        """Register a parser for its translation and configuration extensions.

        A later registration replaces an earlier one for the same extension.
        """
        with self._lock:
            for extension in parser.extensions:
                self._parsers[extension.lower()] = parser
            for extension in parser.config_extensions:
                self._config_parsers[extension.lower()] = parser
        logger.debug(
            "parser_registered",
            parser=parser.name,
            extensions=list(parser.extensions),
            config_extensions=list(parser.config_extensions),
        )

    def parser_for(self, extension: Optional[str]) -> Optional[BaseParser]:
        if not extension:
            return None
        with self._lock:
            return self._parsers.get(extension.lower())

    def config_parser_for(self, extension: Optional[str]) -> Optional[BaseParser]:
        if not extension:
            return None
        with self._lock:
            return self._config_parsers.get(extension.lower())

    def extensions(self) -> List[str]:
        """List registered translation extensions in registration order."""
        with self._lock:
            return list(self._parsers.keys())

    def config_extensions(self) -> List[str]:
        with self._lock:
            return list(self._config_parsers.keys())
