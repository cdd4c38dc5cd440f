"""Template evaluation.

Walks a parsed Template and renders it against an argument source in a
locale. Plural categories are reduced to "one" and "other"; exact "=N"
labels are tried first.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

from babel import Locale

from localization import locales
from localization.exceptions import TemplateProcessingError
from localization.models import TextProcessingMode, TranslationEntry
from localization.templates import formatting
from localization.templates.arguments import ArgumentSource, as_argument_source
from localization.templates.nodes import (
    Complex,
    Literal,
    PlaceholderKind,
    PluralValue,
    Simple,
    Template,
)
from localization.templates.parser import parse_template
from localization.text import unescape_string

_ARB_NUMERIC_TYPES = ("num", "int", "double")


class _Evaluation:
    """State of one expand_template() call."""

    def __init__(
        self,
        entry: Optional[TranslationEntry],
        locale: Locale,
        arguments: ArgumentSource,
        mode: TextProcessingMode,
        indexes: Dict[str, int],
    ):
        self.entry = entry
        self.locale = locale
        self.arguments = arguments
        self.mode = mode
        self.indexes = indexes

    def lookup(self, name: str):
        index = int(name) if name.isdigit() else self.indexes.get(name, -1)
        return self.arguments.lookup(name, index)

    def render(self, template: Template, plural_value: Optional[Decimal] = None) -> str:
        parts: List[str] = []
        for node in template.nodes:
            if isinstance(node, Literal):
                parts.append(node.text)
            elif isinstance(node, PluralValue):
                if plural_value is None:
                    parts.append(node.raw)
                else:
                    parts.append(formatting.format_number(plural_value, None, self.locale))
            elif isinstance(node, Simple):
                parts.append(self.render_simple(node))
            else:
                parts.append(self.render_complex(node, plural_value))
        return "".join(parts)

    def render_simple(self, node: Simple) -> str:
        if self.mode == TextProcessingMode.DOTNET:
            found, value = self.lookup(node.argument)
            text = formatting.format_dotnet(value, node.format, self.locale) if found else ""
            if node.alignment:
                width = abs(node.alignment)
                text = text.rjust(width) if node.alignment > 0 else text.ljust(width)
            return text

        declared = None
        if self.entry is not None and self.entry.placeholders and not node.argument.isdigit():
            declared = self.entry.find_placeholder(node.argument)
            if declared is None:
                return node.raw

        found, value = self.lookup(node.argument)
        if not found:
            return node.raw
        if declared is not None and declared.format and value is not None:
            declared_type = (declared.type or "String").lower()
            if declared_type in _ARB_NUMERIC_TYPES and formatting.is_number(value):
                if declared_type == "int" and not isinstance(value, int):
                    return formatting.format_plain(value, self.locale)
                return formatting.format_arb_number(value, declared, self.locale)
            if declared_type == "datetime":
                return formatting.format_arb_datetime(value, declared, self.locale)
        return formatting.format_plain(value, self.locale)

    def render_complex(self, node: Complex, plural_value: Optional[Decimal]) -> str:
        found, value = self.lookup(node.argument)
        if not found:
            if self.mode == TextProcessingMode.DOTNET:
                return ""
            return node.raw

        kind = node.kind
        if kind == PlaceholderKind.NUMBER:
            return formatting.format_number(value, node.style, self.locale, node.custom_style)
        if kind in (PlaceholderKind.DATE, PlaceholderKind.TIME, PlaceholderKind.DATETIME):
            return formatting.format_temporal(kind.value, value, node.style, self.locale, node.custom_style)
        if kind == PlaceholderKind.SELECT:
            return self.render_select(node, value, plural_value)
        return self.render_plural(node, value)

    def render_select(self, node: Complex, value: Any, plural_value: Optional[Decimal]) -> str:
        selector = "null" if value is None else str(value)
        case = node.find_case(selector) or node.find_case("other")
        if case is None:
            raise TemplateProcessingError(
                f"The 'select' placeholder '{node.argument}' has no 'other' case",
                placeholder=node.argument,
            )
        return self.render(case.template, plural_value)

    def render_plural(self, node: Complex, value: Any) -> str:
        try:
            number = formatting.to_decimal(value)
        except TemplateProcessingError as e:
            raise TemplateProcessingError(
                f"The '{node.kind.value}' placeholder '{node.argument}' needs a numeric value",
                placeholder=node.argument,
            ) from e

        case = None
        for candidate in node.cases:
            if candidate.label.startswith("="):
                try:
                    exact = Decimal(candidate.label[1:])
                except ArithmeticError:
                    continue
                if exact == number:
                    case = candidate
                    break

        adjusted = number - node.offset
        if case is None:
            category = "one" if adjusted == 1 else "other"
            case = node.find_case(category) or node.find_case("other")
        if case is None:
            raise TemplateProcessingError(
                f"The '{node.kind.value}' placeholder '{node.argument}' has no 'other' case",
                placeholder=node.argument,
            )
        return self.render(case.template, adjusted)


def positional_indexes(template: Template) -> Dict[str, int]:
    """Assign each distinct argument name its first-occurrence position."""
    return {name: position for position, name in enumerate(template.argument_names())}


def expand_template(
    source: Union[TranslationEntry, str, None],
    locale: Optional[Union[str, Locale]] = None,
    arguments: Any = None,
    mode: TextProcessingMode = TextProcessingMode.ARB,
) -> str:
    """Render a templated text.

    Args:
        source: An entry (its declared placeholders are honored) or a plain text.
        locale: Locale name or Babel locale used for number and date formatting.
        arguments: A dict (ordered), another mapping (unordered), a list or
            tuple (positional), an ArgumentSource, or any object read by
            attribute.
        mode: Dialect of the text.

    Returns:
        The rendered text. An entry without text renders as "".

    Raises:
        PlaceholderSyntaxError: If the text is not a well-formed template.
        TemplateProcessingError: If a value cannot be used by its placeholder.

    Example:
        >>> expand_template("{count, plural, =0{no items} other{# items}}", "en-US", {"count": 2})
        '2 items'
    """
    entry = source if isinstance(source, TranslationEntry) else None
    if entry is not None:
        if mode == TextProcessingMode.NONE:
            return entry.escaped_text or entry.text or ""
        text = entry.text
        if text is None and entry.escaped_text is not None:
            text = unescape_string(entry.escaped_text)
    else:
        text = source
    if not text:
        return ""

    if mode == TextProcessingMode.NONE:
        return text
    if mode == TextProcessingMode.BACKSLASH_ESCAPING:
        return text if entry is not None else unescape_string(text)

    template = parse_template(text, mode)
    if template.is_literal:
        return "".join(node.text for node in template.nodes)

    babel_locale = locale if isinstance(locale, Locale) else locales.to_babel(locale)
    evaluation = _Evaluation(
        entry,
        babel_locale,
        as_argument_source(arguments),
        mode,
        positional_indexes(template),
    )
    return evaluation.render(template)
