"""Message templates - placeholder detection, parsing and evaluation.

Main components:
- scanner: string_contains_placeholders() single-pass detection
- nodes: immutable template syntax tree
- parser: parse_template() recursive-descent parser
- arguments: argument source adapters
- formatting: Babel-backed number and date formatting
- evaluator: expand_template()
"""

from localization.templates.arguments import (
    ArgumentSource,
    MappingArguments,
    ObjectArguments,
    OrderedArguments,
    SequenceArguments,
    as_argument_source,
)
from localization.templates.evaluator import expand_template
from localization.templates.nodes import (
    Case,
    Complex,
    Literal,
    PlaceholderKind,
    PluralValue,
    Simple,
    Template,
)
from localization.templates.parser import parse_template
from localization.templates.scanner import string_contains_placeholders

__all__ = [
    "ArgumentSource",
    "MappingArguments",
    "ObjectArguments",
    "OrderedArguments",
    "SequenceArguments",
    "as_argument_source",
    "expand_template",
    "Case",
    "Complex",
    "Literal",
    "PlaceholderKind",
    "PluralValue",
    "Simple",
    "Template",
    "parse_template",
    "string_contains_placeholders",
]
