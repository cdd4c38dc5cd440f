"""Recursive-descent parser for message templates.

Grammar::

    Template    := (Literal | Placeholder)*
    Placeholder := '{' Argument (',' Kind (',' Body)?)? '}'
    Body        := Style                                   (number, date, time, datetime)
                 | ['offset:' N] (Label '{' Template '}')+   (plural, selectordinal, select)

Dialects change how literal text is read. ARB treats a doubled single quote as
an apostrophe and a single quote as the start or end of a literal span.
ARB_NO_ESCAPING toggles literal spans but keeps the quotes. DOTNET reads
doubled braces as literal braces, except that a '}' always closes a case body,
and accepts ``{0:N2}`` and ``{0,-8}`` tails. Quoted styles are LDML patterns
and keep their doubled apostrophes.
"""

from functools import lru_cache
from typing import List, Optional

from localization.exceptions import TemplateProcessingError
from localization.models import TextProcessingMode
from localization.templates.nodes import (
    Case,
    Complex,
    Literal,
    Node,
    PlaceholderKind,
    PluralValue,
    Simple,
    Template,
)
from localization.templates.scanner import syntax_error

_KINDS = {kind.value: kind for kind in PlaceholderKind}


class _TemplateParser:
    def __init__(self, text: str, mode: TextProcessingMode):
        self.text = text
        self.mode = mode
        self.pos = 0

    def peek(self, ahead: int = 0) -> str:
        index = self.pos + ahead
        return self.text[index] if index < len(self.text) else ""

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def skip_whitespace(self) -> None:
        while not self.at_end() and self.text[self.pos].isspace():
            self.pos += 1

    def fail(self, message: str, offset: Optional[int] = None):
        return syntax_error(message, self.text, self.pos if offset is None else offset)

    def parse(self) -> Template:
        nodes = self.parse_nodes(in_case=False, in_plural=False)
        return Template(tuple(nodes))

    def parse_nodes(self, in_case: bool, in_plural: bool) -> List[Node]:
        """Parse literal text and placeholders up to the end or a closing case brace."""
        nodes: List[Node] = []
        buffer: List[str] = []
        in_quotes = False
        quote_kept = self.mode == TextProcessingMode.ARB_NO_ESCAPING

        def flush():
            if buffer:
                nodes.append(Literal("".join(buffer)))
                buffer.clear()

        while not self.at_end():
            ch = self.peek()
            nxt = self.peek(1)

            if self.mode == TextProcessingMode.ARB and ch == "'" and nxt == "'":
                buffer.append("'")
                self.pos += 2
                continue

            if self.mode.is_arb and ch == "'":
                in_quotes = not in_quotes
                if quote_kept:
                    buffer.append(ch)
                self.pos += 1
                continue

            if in_quotes:
                buffer.append(ch)
                self.pos += 1
                continue

            if ch == "}" and in_case:
                break

            if self.mode == TextProcessingMode.DOTNET and ch in "{}" and nxt == ch:
                buffer.append(ch)
                self.pos += 2
                continue

            if ch == "{":
                flush()
                nodes.append(self.parse_placeholder(in_plural))
                continue

            if ch == "}":
                raise self.fail("Unmatched closing curly bracket")

            if ch == "#" and in_plural:
                flush()
                nodes.append(PluralValue())
                self.pos += 1
                continue

            buffer.append(ch)
            self.pos += 1

        flush()
        return nodes

    def read_name(self) -> str:
        start = self.pos
        while not self.at_end() and (self.peek().isalnum() or self.peek() == "_"):
            self.pos += 1
        return self.text[start : self.pos]

    def expect_close(self, start: int) -> None:
        self.skip_whitespace()
        if self.at_end():
            raise self.fail("Unclosed opening curly bracket", start)
        if self.peek() != "}":
            raise self.fail(f"Unexpected character '{self.peek()}' in placeholder")
        self.pos += 1

    def parse_placeholder(self, in_plural: bool) -> Node:
        start = self.pos
        self.pos += 1  # '{'

        if self.mode.is_arb and self.peek() == "@":
            end = self.text.find("}", self.pos)
            if end < 0:
                raise self.fail("Unclosed opening curly bracket", start)
            literal = self.text[self.pos + 1 : end]
            self.pos = end + 1
            return Literal(literal)

        self.skip_whitespace()
        if self.at_end():
            raise self.fail("Unclosed opening curly bracket", start)

        name = self.read_name()
        if not name:
            if self.peek() == "}":
                raise self.fail("Empty placeholder", start)
            raise self.fail(f"Unexpected character '{self.peek()}' in placeholder")
        if self.mode.is_arb and not (name.isdigit() or name[0].isalpha() or name[0] == "_"):
            raise TemplateProcessingError(
                f"Invalid placeholder name in placeholder '{name}'", placeholder=name
            )

        self.skip_whitespace()
        if self.at_end():
            raise self.fail("Unclosed opening curly bracket", start)

        ch = self.peek()
        if ch == "}":
            self.pos += 1
            return Simple(name, raw=self.text[start : self.pos])

        if ch == ":" and self.mode == TextProcessingMode.DOTNET:
            end = self.text.find("}", self.pos)
            if end < 0:
                raise self.fail("Unclosed opening curly bracket", start)
            format_tail = self.text[self.pos + 1 : end]
            self.pos = end + 1
            return Simple(name, format=format_tail, raw=self.text[start : self.pos])

        if ch != ",":
            raise self.fail(f"Unexpected character '{ch}' in placeholder")
        self.pos += 1
        self.skip_whitespace()

        if self.mode == TextProcessingMode.DOTNET and (self.peek().isdigit() or self.peek() == "-"):
            return self.parse_alignment(name, start)

        kind_name = self.read_name()
        kind = _KINDS.get(kind_name.lower())
        if kind is None:
            raise self.fail(f"Unknown placeholder kind '{kind_name}'")

        self.skip_whitespace()
        if self.peek() == "}":
            if kind.has_cases:
                raise self.fail(f"The '{kind.value}' placeholder '{name}' has no cases")
            self.pos += 1
            return Complex(kind, name, raw=self.text[start : self.pos])

        if self.peek() != ",":
            if self.at_end():
                raise self.fail("Unclosed opening curly bracket", start)
            raise self.fail(f"Unexpected character '{self.peek()}' in placeholder")
        self.pos += 1

        if kind.has_cases:
            offset, cases = self.parse_cases(kind, name, start, in_plural)
            return Complex(
                kind,
                name,
                offset=offset,
                cases=tuple(cases),
                raw=self.text[start : self.pos],
            )

        style, custom = self.parse_style(start)
        return Complex(
            kind,
            name,
            style=style,
            custom_style=custom,
            raw=self.text[start : self.pos],
        )

    def parse_alignment(self, name: str, start: int) -> Simple:
        digits_start = self.pos
        if self.peek() == "-":
            self.pos += 1
        while self.peek().isdigit():
            self.pos += 1
        alignment = int(self.text[digits_start : self.pos])
        format_tail = None
        if self.peek() == ":":
            end = self.text.find("}", self.pos)
            if end < 0:
                raise self.fail("Unclosed opening curly bracket", start)
            format_tail = self.text[self.pos + 1 : end]
            self.pos = end
        self.expect_close(start)
        return Simple(name, format=format_tail, alignment=alignment, raw=self.text[start : self.pos])

    def parse_style(self, start: int):
        """Read a number/date style: a keyword, a skeleton or a quoted pattern."""
        self.skip_whitespace()
        if self.peek() == "'":
            self.pos += 1
            pattern: List[str] = []
            while True:
                if self.at_end():
                    raise self.fail("Unclosed opening curly bracket", start)
                ch = self.peek()
                if ch == "'":
                    if self.peek(1) == "'":
                        pattern.append("''")
                        self.pos += 2
                        continue
                    self.pos += 1
                    break
                pattern.append(ch)
                self.pos += 1
            self.expect_close(start)
            return "".join(pattern), True

        end = self.text.find("}", self.pos)
        if end < 0:
            raise self.fail("Unclosed opening curly bracket", start)
        style = self.text[self.pos : end].strip()
        self.pos = end + 1
        return style or None, False

    def parse_cases(self, kind: PlaceholderKind, name: str, start: int, in_plural: bool):
        offset = 0
        cases: List[Case] = []
        case_plural = in_plural or kind != PlaceholderKind.SELECT

        self.skip_whitespace()
        if kind != PlaceholderKind.SELECT and self.text.startswith("offset:", self.pos):
            self.pos += len("offset:")
            self.skip_whitespace()
            digits_start = self.pos
            while self.peek().isdigit():
                self.pos += 1
            if digits_start == self.pos:
                raise self.fail("Plural offset must be a non-negative integer")
            offset = int(self.text[digits_start : self.pos])

        while True:
            self.skip_whitespace()
            if self.at_end():
                raise self.fail("Unclosed opening curly bracket", start)
            if self.peek() == "}":
                self.pos += 1
                break

            label_start = self.pos
            while not self.at_end() and not self.peek().isspace() and self.peek() not in "{}":
                self.pos += 1
            label = self.text[label_start : self.pos]
            if not label:
                raise self.fail(f"Missing case label in '{kind.value}' placeholder '{name}'")

            self.skip_whitespace()
            if self.peek() != "{":
                if self.at_end():
                    raise self.fail("Unclosed opening curly bracket", start)
                raise self.fail(f"Expected '{{' after case label '{label}'")
            body_start = self.pos
            self.pos += 1
            body = self.parse_nodes(in_case=True, in_plural=case_plural)
            if self.at_end():
                raise self.fail("Unclosed opening curly bracket", body_start)
            self.pos += 1  # '}' of the case body
            cases.append(Case(label, Template(tuple(body))))

        if not cases:
            raise self.fail(f"The '{kind.value}' placeholder '{name}' has no cases", start)
        return offset, cases


@lru_cache(maxsize=1024)
def parse_template(text: str, mode: TextProcessingMode) -> Template:
    """Parse a template under a dialect.

    NONE and BACKSLASH_ESCAPING texts are returned as a single literal.

    Args:
        text: Template text (already decoded from backslash escapes).
        mode: Dialect of the text.

    Returns:
        The parsed Template. Results are cached per (text, mode).

    Raises:
        PlaceholderSyntaxError: On unbalanced braces or malformed placeholders.
        TemplateProcessingError: On an invalid ARB placeholder name.
    """
    if not mode.parses_placeholders:
        return Template((Literal(text),) if text else ())
    return _TemplateParser(text, mode).parse()
