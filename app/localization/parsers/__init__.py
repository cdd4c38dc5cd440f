"""Format parsers for translation files.

Components:
- BaseParser: Contract shared by all formats
- IniParser, TomlParser: Sectioned key/value files
- JsonParser, ArbParser: JSON-shaped files
- CsvParser, TsvParser: Multi-locale delimited tables
- ResxParser: XML resource files
- ParserRegistry: Extension to parser lookup

Usage:
    from localization.parsers import ParserRegistry

    registry = ParserRegistry.default()
    parser = registry.parser_for(".toml")
    translation = parser.parse_translation(content)
"""

from localization.parsers.arb import ArbParser
from localization.parsers.base import BaseParser, ColumnMatcher, ParserOptions
from localization.parsers.csv import CsvParser
from localization.parsers.ini import IniParser
from localization.parsers.json import JsonParser
from localization.parsers.registry import ParserRegistry
from localization.parsers.resx import ResxParser
from localization.parsers.toml import TomlParser
from localization.parsers.tsv import TsvParser

__all__ = [
    "ArbParser",
    "BaseParser",
    "ColumnMatcher",
    "CsvParser",
    "IniParser",
    "JsonParser",
    "ParserOptions",
    "ParserRegistry",
    "ResxParser",
    "TomlParser",
    "TsvParser",
]
