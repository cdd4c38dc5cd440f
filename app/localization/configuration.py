"""Load configuration for a translation set.

A configuration names the default translation file, the locale that file is
written in, explicit per-locale file references and the text processing mode.
"""

import os
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from localization import locales
from localization.exceptions import ParserError
from localization.models import TextProcessingMode

KEY_DEFAULT_FILE = "default_file"
KEY_DEFAULT_LOCALE = "default_locale"
KEY_TEXT_PROCESSING_MODE = "text_processing_mode"
KEY_SECTION_TRANSLATIONS = "translations"

# Stored key of the wildcard translation reference
WILDCARD = "DEFAULT"
_WILDCARD_ALIASES = ("*", "default", "other")


def translation_map_key(name: str) -> str:
    """Normalize a locale key from the translations section.

    ``*``, ``default`` and ``other`` denote the wildcard; every other key is
    upper-cased with '_' read as '-'.
    """
    stripped = name.strip()
    if stripped.lower() in _WILDCARD_ALIASES:
        return WILDCARD
    return stripped.replace("_", "-").upper()


def build_translation_map(pairs) -> Dict[str, str]:
    """Build the locale to file map from (locale, file) pairs.

    Raises:
        ParserError: If a locale (or the wildcard) is listed twice.
    """
    result: Dict[str, str] = {}
    for name, reference in pairs:
        key = translation_map_key(name)
        if key in result:
            raise ParserError(
                f"Duplicate translation reference '{name}' specified in the list of translations"
            )
        result[key] = reference.strip()
    return result


@dataclass(frozen=True)
class LoadConfiguration:
    """Immutable description of a translation set.

    Attributes:
        default_file: File used when no locale-specific file applies.
        default_locale: Locale the default file is written in.
        translations: Upper-cased locale name, language code or wildcard
            mapped to a file reference.
        source: Where this configuration was loaded from.
        directory: Directory hint used to locate referenced files.
        text_processing_mode: Dialect of the texts; None means the
            default mode of the default file's format.
    """

    default_file: str
    default_locale: Optional[str] = None
    translations: Mapping[str, str] = field(default_factory=dict)
    source: Optional[str] = None
    directory: Optional[str] = None
    text_processing_mode: Optional[TextProcessingMode] = None

    def __post_init__(self):
        object.__setattr__(self, "translations", MappingProxyType(dict(self.translations)))

    @property
    def default_extension(self) -> str:
        return os.path.splitext(self.default_file)[1].lower()

    def file_for_locale(self, locale: Optional[str]) -> Optional[str]:
        """Find an explicit file reference for a locale.

        Tries the exact locale name, then its language code, then the
        wildcard entry.
        """
        normalized = locales.normalize(locale).upper()
        if normalized and self.translations.get(normalized):
            return self.translations[normalized]
        language = locales.language_code(locale).upper()
        if language and self.translations.get(language):
            return self.translations[language]
        return self.translations.get(WILDCARD) or None

    def with_directory(self, directory: Optional[str]) -> "LoadConfiguration":
        return replace(self, directory=directory or None)

    def validate(self) -> "LoadConfiguration":
        """Check the configuration for completeness.

        Raises:
            ParserError: If the default file is missing or the default locale
                is unknown.
        """
        if not self.default_file:
            raise ParserError(
                "No reference to a default translation file is present in the configuration. "
                f"The reference must be specified as a '{KEY_DEFAULT_FILE}' setting."
            )
        if self.default_locale and not locales.is_known(self.default_locale):
            raise ParserError(
                f"Unknown locale identifier '{self.default_locale}' specified as a default locale"
            )
        return self


def configuration_from_values(
    values: Mapping[str, Optional[str]],
    translations: Dict[str, str],
    source: Optional[str] = None,
) -> LoadConfiguration:
    """Create a validated configuration from parsed top-level values.

    Args:
        values: Top-level settings keyed by lower-case name.
        translations: Locale to file map built by build_translation_map().
        source: Name of the configuration file, if any.
    """
    default_file = (values.get(KEY_DEFAULT_FILE) or "").strip()
    default_locale = (values.get(KEY_DEFAULT_LOCALE) or "").strip() or None
    mode = TextProcessingMode.parse(values.get(KEY_TEXT_PROCESSING_MODE))
    return LoadConfiguration(
        default_file=default_file,
        default_locale=default_locale,
        translations=translations,
        source=source,
        text_processing_mode=mode,
    ).validate()
