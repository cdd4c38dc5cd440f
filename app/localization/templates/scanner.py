"""Placeholder detection.

A single forward scan decides whether a text contains at least one
placeholder under a given dialect.
"""

from localization.exceptions import PlaceholderSyntaxError
from localization.models import TextProcessingMode


def text_position(text: str, offset: int) -> tuple:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def syntax_error(message: str, text: str, offset: int) -> PlaceholderSyntaxError:
    line, column = text_position(text, offset)
    return PlaceholderSyntaxError(
        f"{message} at {line}:{column} in the text '{text}'",
        offset,
        offset,
        line,
        column,
    )


def string_contains_placeholders(text: str, mode: TextProcessingMode) -> bool:
    """Check whether a text contains a placeholder.

    Under NONE and BACKSLASH_ESCAPING braces carry no meaning and the result
    is always False. Under ARB a doubled single quote is a literal apostrophe
    and a single quote toggles a literal span; ARB_NO_ESCAPING toggles on
    every quote. Under DOTNET doubled braces are literal.

    Args:
        text: Text to scan.
        mode: Dialect of the text.

    Returns:
        True when at least one '{' is matched by a '}'. The whole text is
        scanned, so a later unbalanced brace still raises.

    Raises:
        PlaceholderSyntaxError: On a '}' with no open '{' or an unclosed '{'.
            An unclosed quote extends the literal span to the end of the text.
    """
    if not text or not mode.parses_placeholders:
        return False

    in_quotes = False
    open_braces = 0
    open_start = -1
    found = False
    i = 0
    length = len(text)

    while i < length:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < length else ""

        if mode == TextProcessingMode.ARB and ch == "'" and nxt == "'":
            i += 2
            continue

        if mode == TextProcessingMode.DOTNET:
            if ch == "{" and nxt == "{":
                i += 2
                continue
            if ch == "}" and nxt == "}" and open_braces == 0:
                i += 2
                continue

        if mode.is_arb and ch == "'":
            in_quotes = not in_quotes
            i += 1
            continue

        if not in_quotes:
            if ch == "{":
                if open_braces == 0:
                    open_start = i
                open_braces += 1
            elif ch == "}":
                if open_braces > 0:
                    open_braces -= 1
                    found = True
                else:
                    raise syntax_error("Unmatched closing curly bracket", text, i)
        i += 1

    if open_braces > 0:
        raise syntax_error("Unclosed opening curly bracket", text, open_start)
    return found
