"""Comma-separated tables (.csv) with RFC 4180 quoting."""

from localization.models import TextProcessingMode
from localization.parsers.table import TableParser


class CsvParser(TableParser):
    """Parser for CSV tables.

    Example:
        key,en-US,de-DE,Description
        greeting,Hello,Hallo,Shown on start
    """

    name = "csv"
    extensions = (".csv",)
    separator = ","
    default_mode = TextProcessingMode.NONE
