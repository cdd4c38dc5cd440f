"""Localization engine.

Loads translation files in several formats, resolves keys with locale
fallback and renders ICU-style message templates.

Components:
- parsers: ini, toml, json, arb, csv, tsv and resx parsers plus ParserRegistry
- resolver: TranslationResolver with exact, basic-locale and default fallback
- sources: byte sources (file system, in-memory, chained)
- hooks: optional resolver callbacks
- templates: placeholder detection, parsing and evaluation
- factory: create_resolver() built from application settings

Usage:
    from localization import create_resolver

    resolver = create_resolver("locales/strings.cfg")
    text = resolver.expand("items", "de-AT", {"count": 2})
"""

from localization.configuration import LoadConfiguration
from localization.exceptions import (
    LocalizationError,
    ParserConfigError,
    ParserError,
    ParserFileError,
    ParserLoadError,
    PlaceholderSyntaxError,
    TemplateProcessingError,
    TextFileParseError,
    TextParseError,
)
from localization.factory import create_registry, create_resolver, load_configuration
from localization.hooks import HookResult, ResolverHooks
from localization.models import (
    EMPTY_ENTRY,
    Placeholder,
    TextProcessingMode,
    Translation,
    TranslationEntry,
    TranslationTree,
    TranslationTreeLeaf,
    TranslationTreeNode,
)
from localization.parsers import ParserOptions, ParserRegistry
from localization.resolver import TranslationResolver
from localization.sources import ByteSource, ChainSource, FileSystemSource, MappingSource
from localization.templates import expand_template, string_contains_placeholders

__all__ = [
    # Configuration
    "LoadConfiguration",
    # Exceptions
    "LocalizationError",
    "ParserConfigError",
    "ParserError",
    "ParserFileError",
    "ParserLoadError",
    "PlaceholderSyntaxError",
    "TemplateProcessingError",
    "TextFileParseError",
    "TextParseError",
    # Factory
    "create_registry",
    "create_resolver",
    "load_configuration",
    # Hooks
    "HookResult",
    "ResolverHooks",
    # Models
    "EMPTY_ENTRY",
    "Placeholder",
    "TextProcessingMode",
    "Translation",
    "TranslationEntry",
    "TranslationTree",
    "TranslationTreeLeaf",
    "TranslationTreeNode",
    # Parsers
    "ParserOptions",
    "ParserRegistry",
    # Resolution
    "TranslationResolver",
    "ByteSource",
    "ChainSource",
    "FileSystemSource",
    "MappingSource",
    # Templates
    "expand_template",
    "string_contains_placeholders",
]
