"""Factory functions for creating localization components.

Provides convenience functions that build a parser registry, a byte source
and a resolver from the application settings.
"""

import os
from pathlib import Path
from typing import Optional, Union

from core.config import LocalizationSettings, settings as app_settings
from core.logging import get_module_logger
from localization.configuration import LoadConfiguration
from localization.exceptions import ParserLoadError
from localization.hooks import ResolverHooks
from localization.models import TextProcessingMode
from localization.parsers.base import ColumnMatcher
from localization.parsers.registry import ParserRegistry
from localization.resolver import TranslationResolver
from localization.sources import ByteSource, FileSystemSource

logger = get_module_logger()


def create_registry(
    localization_settings: Optional[LocalizationSettings] = None,
    column_matcher: Optional[ColumnMatcher] = None,
) -> ParserRegistry:
    """Create a registry of all built-in parsers configured from settings."""
    localization_settings = localization_settings or app_settings.localization
    return ParserRegistry.default(
        recognize_references=localization_settings.recognize_file_refs,
        treat_empty_values_as_absent=localization_settings.treat_empty_values_as_absent,
        description_caption=localization_settings.description_caption,
        comments_caption=localization_settings.comments_caption,
        column_matcher=column_matcher,
    )


def load_configuration(
    config_path: Union[str, Path],
    registry: ParserRegistry,
    localization_settings: Optional[LocalizationSettings] = None,
) -> LoadConfiguration:
    """Parse a configuration file with the parser registered for its extension.

    A relative path is looked up in the configured files location first.

    Raises:
        ParserLoadError: If no parser handles the extension or the file
            cannot be read.
        ParserConfigError: If the configuration is invalid.
    """
    localization_settings = localization_settings or app_settings.localization
    path = str(config_path)
    if not os.path.isabs(path) and localization_settings.files_location:
        located = os.path.join(localization_settings.files_location, path)
        if os.path.isfile(located):
            path = located

    extension = os.path.splitext(path)[1]
    parser = registry.config_parser_for(extension)
    if parser is None:
        raise ParserLoadError(path, f"No parser found for the '{extension}' configuration file extension")
    return parser.parse_configuration_file(path)


def create_resolver(
    config: Union[LoadConfiguration, str, Path],
    localization_settings: Optional[LocalizationSettings] = None,
    registry: Optional[ParserRegistry] = None,
    source: Optional[ByteSource] = None,
    hooks: Optional[ResolverHooks] = None,
    column_matcher: Optional[ColumnMatcher] = None,
) -> TranslationResolver:
    """Create and configure a TranslationResolver.

    Args:
        config: A LoadConfiguration, or the path of a configuration file.
        localization_settings: Settings to apply (default: the global settings).
        registry: Parser registry (default: all parsers, configured from settings).
        source: Byte source (default: the file system, searching the files
            location and the configuration's directory).
        hooks: Optional resolver callbacks.
        column_matcher: Locale matcher for table columns.

    Returns:
        TranslationResolver: Configured resolver.

    Raises:
        ParserLoadError: If the configuration file cannot be read.
        ParserConfigError: If the configuration is invalid.
        ParserError: If the default mode setting is unknown or no parser
            handles the default file.

    Usage:
        # From a configuration file next to the translations
        resolver = create_resolver("locales/strings.cfg")
        resolver.expand("greeting", "de-AT", {"name": "Mia"})

        # From an in-memory configuration
        resolver = create_resolver(
            LoadConfiguration(default_file="strings.toml", default_locale="en-US"),
            source=MappingSource({"strings.toml": content}),
        )
    """
    localization_settings = localization_settings or app_settings.localization
    registry = registry or create_registry(localization_settings, column_matcher)

    if not isinstance(config, LoadConfiguration):
        config = load_configuration(config, registry, localization_settings)

    if source is None:
        directories = [
            d for d in (localization_settings.files_location, config.directory) if d
        ]
        source = FileSystemSource(directories)

    resolver = TranslationResolver(
        config,
        registry=registry,
        source=source,
        hooks=hooks,
        column_matcher=column_matcher,
        default_mode=TextProcessingMode.parse(localization_settings.default_mode),
    )
    logger.info(
        "resolver_created",
        default_file=config.default_file,
        source=config.source,
        parser_count=len(registry.extensions()),
    )
    return resolver
