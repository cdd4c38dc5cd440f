"""Tab-separated tables (.tsv)."""

from localization.models import TextProcessingMode
from localization.parsers.table import TableParser


class TsvParser(TableParser):
    """Parser for TSV tables.

    Cells are separated by tabs. Quoting is optional; values are stored
    backslash-escaped ("\\t", "\\n").
    """

    name = "tsv"
    extensions = (".tsv",)
    separator = "\t"
    default_mode = TextProcessingMode.BACKSLASH_ESCAPING
