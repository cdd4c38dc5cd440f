"""Tokenizing primitives shared by all parsers.

Provides a line/column tracking cursor, escape-sequence decoding and the
character classes used for keys.
"""

from typing import Optional, Union

from localization.exceptions import TextParseError

_SIMPLE_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

_HEX_DIGITS = "0123456789abcdefABCDEF"


def decode_content(content: Union[bytes, str, None]) -> Optional[str]:
    """Decode raw content as UTF-8, dropping a byte order mark.

    Args:
        content: Raw bytes or an already decoded string.

    Returns:
        The text, or None when no content was given.
    """
    if content is None:
        return None
    if isinstance(content, bytes):
        return content.decode("utf-8-sig")
    if content.startswith("\ufeff"):
        return content[1:]
    return content


def unescape_string(value: str) -> str:
    """Decode backslash escape sequences.

    Recognizes ``\\" \\\\ \\/ \\b \\f \\n \\r \\t`` and ``\\uXXXX``. Unknown
    sequences and a trailing backslash are kept as they are.

    Args:
        value: Text with escape sequences.

    Returns:
        The decoded text.
    """
    if "\\" not in value:
        return value

    result = []
    i = 0
    length = len(value)
    while i < length:
        ch = value[i]
        if ch != "\\" or i + 1 >= length:
            result.append(ch)
            i += 1
            continue

        nxt = value[i + 1]
        if nxt in _SIMPLE_ESCAPES:
            result.append(_SIMPLE_ESCAPES[nxt])
            i += 2
        elif nxt == "u":
            digits = value[i + 2 : i + 6]
            if len(digits) == 4 and all(d in _HEX_DIGITS for d in digits):
                result.append(chr(int(digits, 16)))
                i += 6
            else:
                result.append("\\u")
                i += 2
        else:
            result.append("\\")
            result.append(nxt)
            i += 2
    return "".join(result)


def absolute_position(text: str, line: int, column: int) -> int:
    """Convert a 1-based line and column into an absolute offset."""
    current_line = 1
    index = 0
    while current_line < line and index < len(text):
        if text[index] == "\n":
            current_line += 1
        index += 1
    return index + max(column - 1, 0)


def is_key_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def is_key_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-"


def is_reference(value: Optional[str], enabled: bool) -> bool:
    """Check whether a raw value is an external '@name' reference."""
    return enabled and bool(value) and value[0] == "@"


class TextCursor:
    """Character cursor that tracks offset, line and column.

    Lines and columns are 1-based. A ``\\r\\n`` pair counts as one line break.

    Attributes:
        text: The text being scanned.
        offset: Absolute position of the next character.
        line: Line of the next character.
        column: Column of the next character.
    """

    def __init__(self, text: str):
        self.text = text
        self.offset = 0
        self.line = 1
        self.column = 1

    @property
    def at_end(self) -> bool:
        return self.offset >= len(self.text)

    def peek(self, ahead: int = 0) -> str:
        """Return the character ``ahead`` positions away, or '' past the end."""
        pos = self.offset + ahead
        if pos < len(self.text):
            return self.text[pos]
        return ""

    def startswith(self, prefix: str) -> bool:
        return self.text.startswith(prefix, self.offset)

    def advance(self, count: int = 1) -> str:
        """Consume ``count`` characters and return them."""
        start = self.offset
        for _ in range(count):
            if self.offset >= len(self.text):
                break
            ch = self.text[self.offset]
            self.offset += 1
            if ch == "\n":
                self.line += 1
                self.column = 1
            elif ch == "\r" and self.peek() != "\n":
                self.line += 1
                self.column = 1
            elif ch != "\r":
                self.column += 1
        return self.text[start : self.offset]

    def skip_inline_whitespace(self) -> None:
        """Skip spaces and tabs without crossing a line break."""
        while not self.at_end and self.peek() in " \t\f\v":
            self.advance()

    def skip_whitespace(self) -> None:
        while not self.at_end and self.peek().isspace():
            self.advance()

    def at_line_end(self) -> bool:
        return self.at_end or self.peek() in "\r\n"

    def skip_line_break(self) -> None:
        if self.startswith("\r\n"):
            self.advance(2)
        elif self.peek() in "\r\n" and not self.at_end:
            self.advance()

    def read_until_line_end(self) -> str:
        start = self.offset
        while not self.at_line_end():
            self.advance()
        return self.text[start : self.offset]

    def mark(self) -> tuple:
        """Snapshot the current position as (offset, line, column)."""
        return self.offset, self.line, self.column

    def error(
        self,
        message: str,
        mark: Optional[tuple] = None,
        error_class: type = TextParseError,
    ) -> TextParseError:
        """Build a structural error at the current position or at ``mark``.

        The location is appended to the message as ``line:column``.
        """
        if mark is None:
            mark = self.mark()
        offset, line, column = mark
        return error_class(
            f"{message} at {line}:{column}",
            offset,
            max(self.offset, offset),
            line,
            column,
        )
