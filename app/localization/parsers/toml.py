"""TOML-like format (.toml translations, .tomlcfg configurations).

Only string values are accepted. Keys may be bare, dotted or quoted.
Values are basic and literal strings in single-line and triple-quoted
multi-line forms.
"""

from typing import List, Optional, Tuple

from localization.models import TextProcessingMode
from localization.parsers.key_value import KeyValueParser
from localization.text import TextCursor, is_key_char, is_key_start, unescape_string


def fold_line_continuations(raw: str) -> str:
    """Remove backslash line continuations from a multi-line basic string.

    A backslash that ends a line drops the line break and all whitespace up
    to the next non-blank character. An escaped backslash is kept.
    """
    if "\\" not in raw:
        return raw

    result = []
    i = 0
    length = len(raw)
    while i < length:
        ch = raw[i]
        if ch != "\\":
            result.append(ch)
            i += 1
            continue
        if i + 1 < length and raw[i + 1] == "\\":
            result.append("\\\\")
            i += 2
            continue

        j = i + 1
        while j < length and raw[j] in " \t":
            j += 1
        if j < length and raw[j] in "\r\n":
            while j < length and raw[j].isspace():
                j += 1
            i = j
            continue

        result.append(ch)
        i += 1
    return "".join(result)


class TomlParser(KeyValueParser):
    """Parser for TOML-like files.

    Lines starting with '#' are comments; a comment may also follow a value.
    A newline right after an opening triple quote is dropped.
    """

    name = "toml"
    extensions = (".toml",)
    config_extensions = (".tomlcfg",)
    comment_char = "#"
    separators = "="
    default_mode = TextProcessingMode.BACKSLASH_ESCAPING

    def read_key(self, cursor: TextCursor) -> List[str]:
        segments = []
        while True:
            if cursor.peek() == '"':
                mark = cursor.mark()
                cursor.advance()
                start = cursor.offset
                while not cursor.at_line_end() and cursor.peek() != '"':
                    cursor.advance(2 if cursor.peek() == "\\" else 1)
                if cursor.peek() != '"':
                    raise cursor.error("Unterminated quoted key", mark)
                segments.append(unescape_string(cursor.text[start : cursor.offset]))
                cursor.advance()
            elif cursor.peek() == "*" and not segments:
                cursor.advance()
                segments.append("*")
            elif is_key_start(cursor.peek()):
                start = cursor.offset
                while not cursor.at_end and is_key_char(cursor.peek()):
                    cursor.advance()
                segments.append(cursor.text[start : cursor.offset])
            else:
                raise cursor.error(f"Unexpected character '{cursor.peek()}'")

            cursor.skip_inline_whitespace()
            if cursor.peek() != ".":
                return segments
            cursor.advance()
            cursor.skip_inline_whitespace()

    def finish_line(self, cursor: TextCursor) -> None:
        cursor.skip_inline_whitespace()
        if cursor.peek() == self.comment_char:
            cursor.read_until_line_end()
        if not cursor.at_line_end():
            raise cursor.error(f"Unexpected character '{cursor.peek()}'")

    def read_value(self, cursor: TextCursor) -> Tuple[str, Optional[str]]:
        if cursor.at_line_end():
            raise cursor.error("Missing value")

        if cursor.startswith('"""'):
            raw = self.read_multiline(cursor, '"""')
            return raw, unescape_string(fold_line_continuations(raw))
        if cursor.startswith("'''"):
            raw = self.read_multiline(cursor, "'''")
            return raw, raw
        if cursor.peek() == '"':
            raw = self.read_single_line(cursor, '"', escapes=True)
            return raw, unescape_string(raw)
        if cursor.peek() == "'":
            raw = self.read_single_line(cursor, "'", escapes=False)
            return raw, raw

        raise cursor.error("Unquoted values are not supported, a string value is expected")

    def read_single_line(self, cursor: TextCursor, quote: str, escapes: bool) -> str:
        mark = cursor.mark()
        cursor.advance()
        start = cursor.offset
        while not cursor.at_line_end():
            ch = cursor.peek()
            if ch == quote:
                raw = cursor.text[start : cursor.offset]
                cursor.advance()
                return raw
            if escapes and ch == "\\" and cursor.peek(1) not in ("", "\r", "\n"):
                cursor.advance(2)
            else:
                cursor.advance()
        raise cursor.error("Unterminated string", mark)

    def read_multiline(self, cursor: TextCursor, delimiter: str) -> str:
        mark = cursor.mark()
        cursor.advance(3)
        if cursor.startswith("\r\n"):
            cursor.advance(2)
        elif cursor.peek() == "\n":
            cursor.advance()

        start = cursor.offset
        escapes = delimiter == '"""'
        while not cursor.at_end:
            # Quotes directly before the closing delimiter belong to the value
            if cursor.startswith(delimiter) and cursor.peek(3) != delimiter[0]:
                raw = cursor.text[start : cursor.offset]
                cursor.advance(3)
                return raw
            if escapes and cursor.peek() == "\\":
                cursor.advance(2)
            else:
                cursor.advance()
        raise cursor.error("Unterminated multi-line string", mark)
