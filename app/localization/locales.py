"""Locale name helpers backed by Babel's CLDR data."""

from typing import Optional

from babel import Locale, UnknownLocaleError
from babel.core import get_global

from core.logging import get_module_logger

logger = get_module_logger()

_FALLBACK_LOCALE = Locale("en", "US")


def normalize(name: Optional[str]) -> str:
    """Normalize a locale name to BCP 47 casing ("de_at" -> "de-AT").

    Args:
        name: Locale name with '-' or '_' separators, or None.

    Returns:
        Normalized name; empty string for the invariant locale.
    """
    if not name:
        return ""
    parts = [p for p in name.strip().replace("_", "-").split("-") if p]
    if not parts:
        return ""
    result = [parts[0].lower()]
    for part in parts[1:]:
        if len(part) == 4 and part.isalpha():
            result.append(part.title())
        elif len(part) in (2, 3):
            result.append(part.upper())
        else:
            result.append(part)
    return "-".join(result)


def language_code(name: Optional[str]) -> str:
    """Return the language part of a locale name ("de-AT" -> "de")."""
    normalized = normalize(name)
    return normalized.split("-", 1)[0] if normalized else ""


def basic_locale(name: Optional[str]) -> Optional[str]:
    """Derive the conventional default-region locale for a language.

    Uses CLDR likely subtags: "de-CH" and "de" both yield "de-DE".

    Args:
        name: Requested locale name.

    Returns:
        The basic locale name, or None when it is unknown or equals ``name``.
    """
    language = language_code(name)
    if not language:
        return None

    likely = get_global("likely_subtags").get(language)
    if not likely:
        return None

    parts = likely.split("_")
    territory = parts[-1] if len(parts) > 1 else None
    if not territory:
        return None

    basic = f"{language}-{territory}"
    if basic.upper() == normalize(name).upper():
        return None

    logger.debug("basic_locale_derived", requested_locale=name, basic_locale=basic)
    return basic


def is_known(name: str) -> bool:
    """Check whether Babel has data for a locale name."""
    try:
        Locale.parse(normalize(name), sep="-")
    except (UnknownLocaleError, ValueError):
        return False
    return True


def to_babel(name: Optional[str]) -> Locale:
    """Convert a locale name to a Babel Locale.

    The invariant (empty) locale and unknown names map to en-US.
    """
    normalized = normalize(name)
    if not normalized:
        return _FALLBACK_LOCALE
    try:
        return Locale.parse(normalized, sep="-")
    except (UnknownLocaleError, ValueError):
        logger.debug("unknown_locale_fallback", locale=name)
        return _FALLBACK_LOCALE
