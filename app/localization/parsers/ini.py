"""Simple key=value format (.ini translations, .cfg configurations)."""

from localization.models import TextProcessingMode
from localization.parsers.key_value import KeyValueParser


class IniParser(KeyValueParser):
    """Parser for ini-style files.

    Lines starting with ';' are comments. Keys and values are separated by
    '=' or ':'; the value is the rest of the line with surrounding blanks
    removed.

    Example:
        [logs.server]
        started=Started
    """

    name = "ini"
    extensions = (".ini",)
    config_extensions = (".cfg",)
    comment_char = ";"
    separators = "=:"
    default_mode = TextProcessingMode.NONE
