"""Argument sources for template expansion.

A template asks its argument source for a value by name and by the
positional index assigned to that name. Each adapter answers from one shape
of caller data.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Optional, Sequence, Tuple

Lookup = Tuple[bool, Any]

_NOT_FOUND: Lookup = (False, None)


class ArgumentSource(ABC):
    """Named-value source consulted once per placeholder."""

    @abstractmethod
    def lookup(self, name: str, index: int) -> Lookup:
        """Find the value of an argument.

        Args:
            name: Argument name as written in the template.
            index: Positional index assigned to the name.

        Returns:
            (found, value). A found value may itself be None.
        """


class EmptyArguments(ArgumentSource):
    def lookup(self, name: str, index: int) -> Lookup:
        return _NOT_FOUND


class ObjectArguments(ArgumentSource):
    """Reads attributes of an object (dataclass, model, namespace)."""

    def __init__(self, target: Any):
        self.target = target

    def lookup(self, name: str, index: int) -> Lookup:
        if name.startswith("_"):
            return _NOT_FOUND
        if hasattr(self.target, name):
            return True, getattr(self.target, name)
        return _NOT_FOUND


class MappingArguments(ArgumentSource):
    """Unordered name to value map; names match case-insensitively.

    Positional labels ("0", "1") are looked up as string or integer keys.
    """

    def __init__(self, values: Mapping):
        self.values = values
        self._folded = {str(key).upper(): key for key in values}

    def lookup(self, name: str, index: int) -> Lookup:
        key = self._folded.get(name.upper())
        if key is not None:
            return True, self.values[key]
        if name.isdigit() and int(name) in self.values:
            return True, self.values[int(name)]
        return _NOT_FOUND


class OrderedArguments(MappingArguments):
    """Ordered name to value map.

    Falls back to the insertion position when a name is not present.
    """

    def __init__(self, values: Mapping):
        super().__init__(values)
        self._ordered = list(values.values())

    def lookup(self, name: str, index: int) -> Lookup:
        found, value = super().lookup(name, index)
        if found:
            return found, value
        if 0 <= index < len(self._ordered):
            return True, self._ordered[index]
        return _NOT_FOUND


class SequenceArguments(ArgumentSource):
    """Positional list of values."""

    def __init__(self, values: Sequence):
        self.values = list(values)

    def lookup(self, name: str, index: int) -> Lookup:
        if 0 <= index < len(self.values):
            return True, self.values[index]
        return _NOT_FOUND


def as_argument_source(arguments: Optional[Any]) -> ArgumentSource:
    """Wrap caller data in the matching argument source.

    ``dict`` keeps insertion order and is ordered; other mappings are
    unordered; lists and tuples are positional; scalars become a
    single positional value; anything else is read by attribute.
    """
    if arguments is None:
        return EmptyArguments()
    if isinstance(arguments, ArgumentSource):
        return arguments
    if isinstance(arguments, dict):
        return OrderedArguments(arguments)
    if isinstance(arguments, Mapping):
        return MappingArguments(arguments)
    if isinstance(arguments, (list, tuple)):
        return SequenceArguments(arguments)
    if isinstance(arguments, (str, int, float, Decimal)):
        return SequenceArguments([arguments])
    return ObjectArguments(arguments)
