"""Template syntax tree.

Nodes are frozen dataclasses; a parsed Template can be shared across threads.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple, Union


class PlaceholderKind(str, Enum):
    """Kinds of complex placeholders ("{name, kind, ...}")."""

    PLURAL = "plural"
    SELECTORDINAL = "selectordinal"
    SELECT = "select"
    NUMBER = "number"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"

    @property
    def has_cases(self) -> bool:
        return self in (
            PlaceholderKind.PLURAL,
            PlaceholderKind.SELECTORDINAL,
            PlaceholderKind.SELECT,
        )


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Simple:
    """A plain "{name}" placeholder.

    Attributes:
        argument: Argument name, or the digits of a positional label.
        format: DOTNET format tail after ':' (e.g. "N2"), if any.
        alignment: DOTNET field width after ','; negative pads on the right.
        raw: Placeholder source including braces.
    """

    argument: str
    format: Optional[str] = None
    alignment: Optional[int] = None
    raw: str = field(default="", compare=False)


@dataclass(frozen=True)
class PluralValue:
    """The "#" sign inside a plural case: the argument minus the offset."""

    raw: str = "#"


@dataclass(frozen=True)
class Case:
    """One labelled branch of a plural/selectordinal/select placeholder."""

    label: str
    template: "Template"


@dataclass(frozen=True)
class Complex:
    """A "{name, kind, ...}" placeholder.

    Attributes:
        kind: Placeholder kind.
        argument: Argument name.
        offset: Plural offset ("offset:N"); zero otherwise.
        style: Style of number/date/time kinds; a quoted pattern is kept
            with its outer quotes removed and is flagged by ``custom_style``.
            Doubled apostrophes stay doubled, as LDML expects.
        cases: Ordered branches of plural/selectordinal/select.
    """

    kind: PlaceholderKind
    argument: str
    offset: int = 0
    style: Optional[str] = None
    custom_style: bool = False
    cases: Tuple[Case, ...] = ()
    raw: str = field(default="", compare=False)

    def find_case(self, label: str) -> Optional[Case]:
        for case in self.cases:
            if case.label == label:
                return case
        return None


Node = Union[Literal, Simple, PluralValue, Complex]


@dataclass(frozen=True)
class Template:
    nodes: Tuple[Node, ...] = ()

    @property
    def is_literal(self) -> bool:
        return all(isinstance(node, Literal) for node in self.nodes)

    def argument_names(self) -> Tuple[str, ...]:
        """Distinct argument names in order of first occurrence, nested bodies included."""
        seen = []

        def visit(template: "Template") -> None:
            for node in template.nodes:
                if isinstance(node, (Simple, Complex)) and node.argument not in seen:
                    seen.append(node.argument)
                if isinstance(node, Complex):
                    for case in node.cases:
                        visit(case.template)

        visit(self)
        return tuple(seen)
