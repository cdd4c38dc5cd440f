"""Locale resolution engine.

Resolves a key for a locale by walking the exact locale, its basic locale
(the language's conventional default region) and finally the default
translation. Loaded translations are cached per locale; every locale is
loaded at most once per resolver.
"""

import dataclasses
import os
import threading
from typing import Any, Dict, Iterator, List, Optional, Tuple

from core.logging import get_module_logger
from localization import locales
from localization.configuration import WILDCARD, LoadConfiguration
from localization.exceptions import ParserError, TextFileParseError, TextParseError
from localization.hooks import HookResult, ResolverHooks
from localization.models import EMPTY_ENTRY, TextProcessingMode, Translation, TranslationEntry
from localization.parsers.base import BaseParser, ColumnMatcher
from localization.parsers.registry import ParserRegistry
from localization.sources import ByteSource, FileSystemSource
from localization.templates.evaluator import expand_template
from localization.templates.scanner import string_contains_placeholders
from localization.text import decode_content, unescape_string

logger = get_module_logger()


class TranslationResolver:
    """Looks up translation entries with locale fallback.

    Resolution order for a key:
    1. The ``value_needed`` hook.
    2. The translation of the requested locale (unless it is the default locale).
    3. The translation of its basic locale ("de-CH" -> "de-DE"); a hit is
       copied into the requested locale's translation.
    4. The default translation; a hit is copied into both of the above.
    5. The ``value_not_found`` hook, else the canonical empty entry.

    A single lock serializes every "look up or load" sequence, so concurrent
    requests for different locales queue behind one another.

    Attributes:
        config: Configuration of the translation set.
        registry: Parser lookup by file extension.
        source: Supplies file content.
        hooks: Optional callbacks.
        default_locale: Normalized locale of the default file ("" if unknown).
    """

    def __init__(
        self,
        config: LoadConfiguration,
        registry: Optional[ParserRegistry] = None,
        source: Optional[ByteSource] = None,
        hooks: Optional[ResolverHooks] = None,
        column_matcher: Optional[ColumnMatcher] = None,
        default_mode: Optional[TextProcessingMode] = None,
    ):
        """Initialize the resolver.

        Args:
            config: Configuration of the translation set.
            registry: Parser registry (default: all built-in parsers).
            source: Byte source (default: the file system, searching the
                configuration's directory).
            hooks: Optional callbacks.
            column_matcher: Overrides the registry's column matcher for
                table formats.
            default_mode: Text processing mode used when the configuration
                names none; None means the default file format's mode.

        Raises:
            ParserError: If no parser handles the default file's extension.
        """
        self.config = config
        self.registry = registry or ParserRegistry.default()
        self.source = source or FileSystemSource([config.directory] if config.directory else None)
        self.hooks = hooks or ResolverHooks()
        self.column_matcher = column_matcher
        self.default_mode = default_mode
        self.default_locale = locales.normalize(config.default_locale)

        self._translations: Dict[str, Translation] = {}
        self._default: Optional[Translation] = None
        self._default_loaded = False
        self._lock = threading.Lock()

        self.parser_for(config)
        logger.info(
            "initialized_translation_resolver",
            default_file=config.default_file,
            default_locale=self.default_locale or None,
        )

    def parser_for(self, config: LoadConfiguration) -> BaseParser:
        """Find the parser of the configuration's default file.

        Raises:
            ParserError: If no parser handles the extension.
        """
        parser = self.registry.parser_for(config.default_extension)
        if parser is None:
            raise ParserError(
                f"No parser found for the '{config.default_extension}' file extension "
                f"of the default translation file '{config.default_file}'"
            )
        if self.column_matcher is not None and parser.multi_locale:
            options = dataclasses.replace(parser.options, column_matcher=self.column_matcher)
            parser = type(parser)(options)
        return parser

    def mode_for(self, config: LoadConfiguration) -> TextProcessingMode:
        """Effective text processing mode of a configuration."""
        return (
            config.text_processing_mode
            or self.default_mode
            or self.parser_for(config).default_mode
        )

    def resolve(
        self,
        key: str,
        locale: Optional[str] = None,
        config: Optional[LoadConfiguration] = None,
    ) -> TranslationEntry:
        """Resolve a key for a locale.

        Args:
            key: Entry key, case-insensitive; groups are joined with '.'.
            locale: Requested locale; None means the default locale.
            config: Configuration to load files with (default: the resolver's).

        Returns:
            The entry, or EMPTY_ENTRY when the key is found nowhere.

        Raises:
            TextFileParseError: If a translation file is malformed.
            ParserError: If a translation file has invalid content.
        """
        config = config or self.config
        locale_name = locales.normalize(locale) if locale is not None else self.default_locale

        if self.hooks.value_needed is not None:
            entry = self.entry_from_hook(self.hooks.value_needed(locale_name, key), config)
            if entry is not None:
                logger.debug("translation_value_supplied", key=key, locale=locale_name)
                return entry

        local: Optional[Translation] = None
        basic_local: Optional[Translation] = None

        if not self.is_default_locale(locale_name):
            entry, local = self.lookup(key, locale_name, config, basic=False)
            if entry is not None:
                return self.found(locale_name, key, entry, local, config)

            if not local.is_basic_locale:
                basic_name = locales.basic_locale(locale_name)
                if basic_name and not self.is_default_locale(basic_name):
                    entry, basic_local = self.lookup(key, basic_name, config, basic=True)
                    if entry is not None:
                        with self._lock:
                            local.add(key, entry)
                        return self.found(locale_name, key, entry, basic_local, config)

        default = self.default_translation(config)
        entry = self.usable_entry(default, key)
        if entry is not None:
            with self._lock:
                if local is not None:
                    local.add(key, entry)
                if basic_local is not None:
                    basic_local.add(key, entry)
            return self.found(locale_name, key, entry, default, config)

        return self.not_found(locale_name, key, config)

    def expand(
        self,
        key: str,
        locale: Optional[str] = None,
        arguments: Any = None,
        config: Optional[LoadConfiguration] = None,
    ) -> str:
        """Resolve a key and render its template.

        Args:
            key: Entry key.
            locale: Requested locale; also used for number and date formatting.
            arguments: Values for the placeholders (see expand_template()).
            config: Configuration to load files with (default: the resolver's).

        Returns:
            The rendered text; "" when the key is found nowhere.
        """
        config = config or self.config
        entry = self.resolve(key, locale, config)
        if entry.is_empty:
            return ""
        locale_name = locales.normalize(locale) if locale is not None else self.default_locale
        return expand_template(entry, locale_name, arguments, self.mode_for(config))

    def drop_locale(self, locale: Optional[str]) -> None:
        """Forget the cached translation of a locale; it is reloaded on next use."""
        cache_key = self.cache_key(locales.normalize(locale))
        with self._lock:
            dropped = self._translations.pop(cache_key, None)
            if dropped is not None and dropped is self._default:
                self._default = None
                self._default_loaded = False
        logger.info("translation_cache_dropped", locale=locale, found=dropped is not None)

    def drop_all(self) -> None:
        """Forget every cached translation, including the default one."""
        with self._lock:
            count = len(self._translations)
            self._translations.clear()
            self._default = None
            self._default_loaded = False
        logger.info("translation_cache_dropped", locale=None, dropped_count=count)

    def cached_locales(self) -> List[str]:
        with self._lock:
            return list(self._translations.keys())

    def cached_translation(self, locale: Optional[str]) -> Optional[Translation]:
        """Return the cached translation of a locale without loading it."""
        with self._lock:
            return self._translations.get(self.cache_key(locales.normalize(locale)))

    def is_default_locale(self, locale_name: str) -> bool:
        return locale_name.upper() == self.default_locale.upper()

    @staticmethod
    def cache_key(locale_name: str) -> str:
        return locale_name.upper()

    def lookup(
        self,
        key: str,
        locale_name: str,
        config: LoadConfiguration,
        basic: bool,
    ) -> Tuple[Optional[TranslationEntry], Translation]:
        """Find a usable entry in a locale's translation, loading it on first use.

        A locale whose files cannot be found gets an empty translation, so
        the load is not attempted again.

        Returns:
            (entry or None, the cached translation).
        """
        cache_key = self.cache_key(locale_name)
        with self._lock:
            translation = self._translations.get(cache_key)
            if translation is None:
                translation = self.load(config, locale_name, include_default=False)
                if translation is None:
                    translation = Translation(locale_name)
                self._translations[cache_key] = translation
            if basic:
                translation.is_basic_locale = True
            entry = self.usable_entry_locked(translation, key)
        return entry, translation

    def default_translation(self, config: LoadConfiguration) -> Translation:
        """Return the default translation, loading it once per resolver."""
        with self._lock:
            if not self._default_loaded:
                translation = self.load(config, self.default_locale, include_default=True)
                if translation is None:
                    translation = Translation(self.default_locale or None)
                cache_key = self.cache_key(locales.normalize(translation.locale) or self.default_locale)
                self._translations.setdefault(cache_key, translation)
                self._default = translation
                self._default_loaded = True
            return self._default

    def usable_entry(self, translation: Translation, key: str) -> Optional[TranslationEntry]:
        with self._lock:
            return self.usable_entry_locked(translation, key)

    def usable_entry_locked(self, translation: Translation, key: str) -> Optional[TranslationEntry]:
        """Return the entry for a key if it has text or a loadable reference.

        A reference is loaded once and its text cached onto the entry.
        """
        entry = translation.get(key)
        if entry is None:
            return None
        if entry.text is not None:
            return entry
        if entry.reference is None:
            return None

        text = decode_content(self.source.load(entry.reference, translation.origin))
        if not text:
            logger.info("translation_reference_missing", key=key, reference=entry.reference)
            return None
        entry.resolve_reference(text)
        logger.debug("translation_reference_resolved", key=key, origin=translation.origin)
        return entry

    def candidate_files(self, config: LoadConfiguration, locale_name: str, include_default: bool) -> Iterator[str]:
        """Yield file names to try for a locale, in order."""
        seen = set()
        language = locales.language_code(locale_name)

        for map_key in (locale_name.upper(), language.upper(), WILDCARD):
            reference = config.translations.get(map_key) if map_key else None
            if reference and reference not in seen:
                seen.add(reference)
                yield reference

        parser = self.parser_for(config)
        base, extension = os.path.splitext(config.default_file)
        for suffix in (locale_name, language):
            if not suffix:
                continue
            name = f"{base}{parser.locale_separator}{suffix}{extension}"
            if name not in seen:
                seen.add(name)
                yield name

        if (include_default or parser.multi_locale) and config.default_file not in seen:
            yield config.default_file

    def origin_hint(self, config: LoadConfiguration) -> Optional[str]:
        if config.directory:
            return os.path.join(config.directory, os.path.basename(config.default_file))
        return config.source

    def load(self, config: LoadConfiguration, locale_name: str, include_default: bool) -> Optional[Translation]:
        """Acquire and parse the translation of a locale. Called under the lock.

        Returns:
            The translation, or None when no content was found.
        """
        content = None
        used_name = None

        if self.hooks.content_needed is not None:
            content = self.hooks.content_needed(config, locale_name)
            if content:
                used_name = config.default_file

        if not content:
            origin = self.origin_hint(config)
            for name in self.candidate_files(config, locale_name, include_default):
                content = self.source.load(name, origin)
                if content:
                    used_name = name
                    break

        if not content:
            logger.info("translation_source_missing", locale=locale_name or None, default_file=config.default_file)
            return None

        parser = self.parser_for(config)
        try:
            translation = parser.parse_translation(
                content,
                locale=locale_name or None,
                mode=config.text_processing_mode or self.default_mode,
            )
        except TextParseError as e:
            logger.warning("translation_parse_failed", file=used_name, error=str(e), line=e.line, column=e.column)
            raise TextFileParseError.from_error(used_name, e) from e
        except ParserError as e:
            logger.warning("translation_parse_failed", file=used_name, error=str(e))
            raise

        if translation is None:
            logger.info("translation_source_empty", locale=locale_name or None, file=used_name)
            return None

        translation.set_origin(used_name)
        logger.info(
            "translation_loaded",
            locale=locale_name or None,
            source=used_name,
            entry_count=len(translation),
        )
        return translation

    def entry_from_hook(self, result: Optional[HookResult], config: LoadConfiguration) -> Optional[TranslationEntry]:
        """Turn a hook result into an entry; None when it is not usable."""
        if result is None:
            return None
        if result.entry is not None:
            if result.entry.text is not None and result.entry.reference is None:
                return result.entry
            return None
        if result.text is None and result.escaped_text is None:
            return None

        text = result.text
        if text is None:
            text = unescape_string(result.escaped_text)
        entry = TranslationEntry(text=text, escaped_text=result.escaped_text)
        scanned = result.escaped_text if result.escaped_text is not None else text
        entry.contains_placeholders = string_contains_placeholders(scanned, self.mode_for(config))
        return entry

    def found(
        self,
        locale_name: str,
        key: str,
        entry: TranslationEntry,
        translation: Translation,
        config: LoadConfiguration,
    ) -> TranslationEntry:
        logger.debug("translation_value_found", key=key, locale=locale_name, source=translation.origin)
        if self.hooks.value_found is None:
            return entry
        replacement = self.entry_from_hook(self.hooks.value_found(locale_name, key, entry), config)
        return replacement if replacement is not None else entry

    def not_found(self, locale_name: str, key: str, config: LoadConfiguration) -> TranslationEntry:
        logger.info("translation_value_not_found", key=key, locale=locale_name or None)
        if self.hooks.value_not_found is not None:
            replacement = self.entry_from_hook(self.hooks.value_not_found(locale_name, key), config)
            if replacement is not None:
                return replacement
        return EMPTY_ENTRY
