"""Optional callbacks that let an application veto or substitute results.

Every callback returns None to pass through, or a value that replaces what
the resolver would have produced.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Union

from localization.configuration import LoadConfiguration
from localization.models import TranslationEntry


@dataclass
class HookResult:
    """Substitute result supplied by a hook.

    Either a ready entry or a text (with an optional escaped form) that the
    resolver turns into an entry.
    """

    entry: Optional[TranslationEntry] = None
    text: Optional[str] = None
    escaped_text: Optional[str] = None


ContentNeeded = Callable[[LoadConfiguration, str], Union[bytes, str, None]]
ValueNeeded = Callable[[str, str], Optional[HookResult]]
ValueFound = Callable[[str, str, TranslationEntry], Optional[HookResult]]
ValueNotFound = Callable[[str, str], Optional[HookResult]]


@dataclass
class ResolverHooks:
    """Callbacks invoked by TranslationResolver.

    Attributes:
        content_needed: (config, locale) -> content of the file for a locale,
            asked before any file is looked up.
        value_needed: (locale, key) -> result returned before any lookup.
        value_found: (locale, key, entry) -> replacement for a found entry.
        value_not_found: (locale, key) -> result for a key found nowhere.
    """

    content_needed: Optional[ContentNeeded] = None
    value_needed: Optional[ValueNeeded] = None
    value_found: Optional[ValueFound] = None
    value_not_found: Optional[ValueNotFound] = None
