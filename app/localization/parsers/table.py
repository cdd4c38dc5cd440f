"""Shared reader for delimited table formats (csv, tsv).

The first non-empty line is the header. Column 1 holds the keys; every other
column is a locale, except the description and comments columns recognized
by their captions. One file carries all locales.
"""

from dataclasses import dataclass
from typing import List, Optional

from localization import locales
from localization.configuration import LoadConfiguration
from localization.exceptions import ParserError, TextParseError
from localization.models import (
    TextProcessingMode,
    Translation,
    TranslationTree,
    TranslationTreeLeaf,
)
from localization.parsers.base import BaseParser, Content


@dataclass
class TableRow:
    cells: List[str]
    offset: int
    line: int


@dataclass
class TableHeader:
    """Column layout derived from the header row.

    Attributes:
        width: Number of cells in the header.
        captions: Trimmed captions, including the key column.
        locale_columns: Indexes of the columns that hold translations.
        description_column: Index of the description column, or -1.
        comments_column: Index of the comments column, or -1.
    """

    width: int
    captions: List[str]
    locale_columns: List[int]
    description_column: int = -1
    comments_column: int = -1


class TableParser(BaseParser):
    """Base for delimited multi-locale tables."""

    separator: str = ","
    multi_locale = True

    def read_rows(self, text: str) -> List[TableRow]:
        """Split the text into rows of cells.

        Quoted cells may contain separators, doubled quotes and line breaks.

        Raises:
            TextParseError: If a quoted cell is not closed.
        """
        rows: List[TableRow] = []
        length = len(text)
        i = 0
        line = 1

        while i < length:
            if text[i] in "\r\n":
                if text[i] == "\n" or not text.startswith("\r\n", i):
                    line += 1
                i += 1
                continue

            row_offset, row_line = i, line
            line_start = i
            cells: List[str] = []
            while True:
                cell: List[str] = []
                if i < length and text[i] == '"':
                    quote_offset, quote_line, quote_column = i, line, i - line_start + 1
                    i += 1
                    while True:
                        if i >= length:
                            raise TextParseError(
                                f"Unclosed quoted cell at {quote_line}:{quote_column}",
                                quote_offset,
                                length,
                                quote_line,
                                quote_column,
                            )
                        ch = text[i]
                        if ch == '"':
                            if i + 1 < length and text[i + 1] == '"':
                                cell.append('"')
                                i += 2
                                continue
                            i += 1
                            break
                        if ch == "\n":
                            line += 1
                            line_start = i + 1
                        cell.append(ch)
                        i += 1

                while i < length and text[i] not in "\r\n" and text[i] != self.separator:
                    cell.append(text[i])
                    i += 1
                cells.append("".join(cell))

                if i < length and text[i] == self.separator:
                    i += 1
                    continue
                break

            if text.startswith("\r\n", i):
                i += 2
            elif i < length:
                i += 1
            line += 1
            rows.append(TableRow(cells, row_offset, row_line))

        return rows

    def read_header(self, row: TableRow) -> TableHeader:
        captions = [cell.strip() for cell in row.cells]
        header = TableHeader(width=len(captions), captions=captions, locale_columns=[])
        description = self.options.description_caption.lower()
        comments = self.options.comments_caption.lower()

        for index, caption in enumerate(captions[1:], start=1):
            if len(captions) > 2 and not caption:
                raise TextParseError(
                    "Multiple columns are provided, but the locale name is empty for at least one column. "
                    f"Locale names must be listed as column captions on the first non-empty line ({row.line}:1)",
                    row.offset,
                    row.offset,
                    row.line,
                    1,
                )
            lowered = caption.lower()
            if lowered == description and header.description_column < 0:
                header.description_column = index
            elif lowered == comments and header.comments_column < 0:
                header.comments_column = index
            else:
                header.locale_columns.append(index)
        return header

    def find_locale_column(self, header: TableHeader, locale: Optional[str]) -> int:
        """Pick the column for a locale: exact name, language code, then the matcher hook."""
        if not header.locale_columns:
            return -1
        if not locale:
            return header.locale_columns[0]

        wanted = locales.normalize(locale).lower()
        for index in header.locale_columns:
            if locales.normalize(header.captions[index]).lower() == wanted:
                return index

        language = locales.language_code(locale)
        for index in header.locale_columns:
            if header.captions[index].lower() == language:
                return index

        matcher = self.options.column_matcher
        if matcher is not None:
            for index in header.locale_columns:
                if matcher(header.captions[index], locale):
                    return index
        return -1

    def data_rows(self, rows: List[TableRow], header: TableHeader):
        """Yield (key, cells) for every data row after validating it."""
        seen = set()
        for row in rows[1:]:
            key = row.cells[0].strip()
            if not key:
                raise TextParseError(f"Empty key detected on line {row.line}", row.offset, row.offset, row.line, 1)
            if key.upper() in seen:
                raise TextParseError(
                    f"A duplicate key {key} detected on line {row.line}", row.offset, row.offset, row.line, 1
                )
            if len(row.cells) < header.width:
                raise TextParseError(
                    f"Insufficient number of columns detected on line {row.line} "
                    f"({header.width} columns expected, {len(row.cells)} columns found)",
                    row.offset,
                    row.offset,
                    row.line,
                    1,
                )
            seen.add(key.upper())
            yield key, [cell.strip() for cell in row.cells]

    def parse_configuration(self, content: Content, source: Optional[str] = None) -> LoadConfiguration:
        raise ParserError(
            f"The {self.name} format has no configuration form; use an ini, toml, json or arb configuration"
        )

    def parse_translation(
        self,
        content: Content,
        locale: Optional[str] = None,
        mode: Optional[TextProcessingMode] = None,
    ) -> Optional[Translation]:
        text = self.decode(content)
        if not text:
            return None
        rows = self.read_rows(text)
        if not rows:
            return None
        mode = self.effective_mode(mode)

        header = self.read_header(rows[0])
        column = self.find_locale_column(header, locale)
        if column < 0:
            return None

        result = Translation()
        for key, cells in self.data_rows(rows, header):
            value = cells[column]
            if not value and self.options.treat_empty_values_as_absent:
                continue
            value_text, escaped = self.split_escapes(value, mode)
            entry = self.make_entry(key, value_text, mode, escaped)
            if header.description_column >= 0:
                entry.description = cells[header.description_column] or None
            if header.comments_column >= 0:
                entry.comments = cells[header.comments_column] or None
            result.add(key, entry)
        return result

    def parse_structure(self, content: Content) -> Optional[TranslationTree]:
        text = self.decode(content)
        if not text:
            return None
        rows = self.read_rows(text)
        if not rows:
            return None

        header = self.read_header(rows[0])
        column = self.find_locale_column(header, None)
        tree = TranslationTree()
        for key, cells in self.data_rows(rows, header):
            value = cells[column] if column >= 0 else None
            tree.root.add_leaf(
                TranslationTreeLeaf(
                    key=key,
                    value=value,
                    contains_placeholders=self.leaf_flags(value, self.default_mode),
                )
            )
        return tree
