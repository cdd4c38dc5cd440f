"""Custom exceptions for the localization engine.

Structural errors carry the absolute character offset plus the 1-based line
and column where parsing stopped. A source that cannot be found is never an
error; byte sources simply return None.
"""

from typing import Optional


class LocalizationError(Exception):
    """Base exception for all localization errors.

    Example:
        try:
            resolver.resolve("greeting", "de-AT")
        except LocalizationError as e:
            logger.error("localization_error", error=str(e))
    """

    pass


class ParserError(LocalizationError):
    """Raised when content or a configuration cannot be turned into data.

    Example:
        >>> IniParser().parse_configuration("default_locale=en")
        Traceback (most recent call last):
        ...
        ParserError: No reference to a default translation file ...
    """

    pass


class ParserFileError(ParserError):
    """A parser error bound to a specific file."""

    def __init__(self, file_name: str, message: str):
        super().__init__(message)
        self.file_name = file_name


class ParserLoadError(ParserFileError):
    """Raised when a configuration or default file cannot be read."""

    pass


class ParserConfigError(ParserFileError):
    """Raised when a configuration file is syntactically or semantically invalid."""

    pass


class TextParseError(ParserError):
    """Raised on malformed syntax at a known position.

    Attributes:
        start: Absolute offset where the offending fragment starts.
        end: Absolute offset where the offending fragment ends.
        line: 1-based line number.
        column: 1-based column number.
    """

    def __init__(self, message: str, start: int, end: int, line: int, column: int):
        super().__init__(message)
        self.start = start
        self.end = end
        self.line = line
        self.column = column


class TextFileParseError(TextParseError):
    """A structural error inside a named file."""

    def __init__(
        self,
        file_name: str,
        message: str,
        start: int,
        end: int,
        line: int,
        column: int,
    ):
        super().__init__(message, start, end, line, column)
        self.file_name = file_name

    @classmethod
    def from_error(cls, file_name: str, error: TextParseError) -> "TextFileParseError":
        """Attach a file name to an existing structural error."""
        return cls(
            file_name,
            f"{file_name}:{error.line}:{error.column}: {error}",
            error.start,
            error.end,
            error.line,
            error.column,
        )


class PlaceholderSyntaxError(TextParseError):
    """Raised on an unmatched or unterminated brace, or an unclosed quote, in a template."""

    pass


class TemplateProcessingError(LocalizationError):
    """Raised when a template cannot be evaluated.

    Example:
        >>> expand_template("{g, select, male{he}}", "en-US", {"g": "x"}, ARB)
        Traceback (most recent call last):
        ...
        TemplateProcessingError: The 'select' placeholder 'g' has no 'other' case
    """

    def __init__(self, message: str, placeholder: Optional[str] = None):
        super().__init__(message)
        self.placeholder = placeholder
