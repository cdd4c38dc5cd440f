"""Translation models for the localization engine.

Defines the parsed representations handed from parsers to the resolver:
entries, flat translations and the grouped translation tree.
"""

from dataclasses import FrozenInstanceError, dataclass, field
from types import MappingProxyType
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from localization.exceptions import ParserError


class TextProcessingMode(str, Enum):
    """Dialect that decides how braces, quotes and backslashes are read.

    NONE and BACKSLASH_ESCAPING never treat braces as placeholders. ARB and
    ARB_NO_ESCAPING use ICU-style placeholders with single-quote literal
    spans. DOTNET uses composite-format placeholders with doubled braces.
    """

    NONE = "none"
    BACKSLASH_ESCAPING = "backslash_escaping"
    ARB = "arb"
    ARB_NO_ESCAPING = "arb_no_escaping"
    DOTNET = "dotnet"

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["TextProcessingMode"]:
        """Convert a configuration value to a mode.

        Args:
            name: Mode name such as "Arb", "DotNet" or "BackslashEscaping".
                Matching ignores case, underscores and dashes.

        Returns:
            The matching mode, or None for an empty value.

        Raises:
            ParserError: If the name is not a known mode.
        """
        if name is None or not name.strip():
            return None
        normalized = name.strip().lower().replace("_", "").replace("-", "")
        aliases = {
            "none": cls.NONE,
            "backslash": cls.BACKSLASH_ESCAPING,
            "backslashescaping": cls.BACKSLASH_ESCAPING,
            "arb": cls.ARB,
            "arbnoescaping": cls.ARB_NO_ESCAPING,
            "dotnet": cls.DOTNET,
        }
        try:
            return aliases[normalized]
        except KeyError as e:
            raise ParserError(f"Unknown text processing mode: {name}") from e

    @property
    def parses_placeholders(self) -> bool:
        return self in (
            TextProcessingMode.ARB,
            TextProcessingMode.ARB_NO_ESCAPING,
            TextProcessingMode.DOTNET,
        )

    @property
    def is_arb(self) -> bool:
        return self in (TextProcessingMode.ARB, TextProcessingMode.ARB_NO_ESCAPING)

    @property
    def keeps_escaped_text(self) -> bool:
        """Whether parsers store raw escaped text next to decoded text."""
        return self in (TextProcessingMode.BACKSLASH_ESCAPING, TextProcessingMode.DOTNET)


@dataclass
class Placeholder:
    """Declared placeholder metadata (ARB ``placeholders`` block).

    Descriptive only, except that ARB typed placeholders select a formatter.

    Attributes:
        name: Placeholder name as used in the text.
        type: Declared type, e.g. "String", "int", "num", "DateTime".
        format: Format hint, e.g. "compact", "currency", "yMd".
        example: Example value for translators.
        optional_parameters: Formatter parameters such as decimalDigits.
        properties: Any other declared properties.
    """

    name: str
    type: Optional[str] = None
    format: Optional[str] = None
    example: Optional[str] = None
    optional_parameters: Dict[str, Any] = field(default_factory=dict)
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TranslationEntry:
    """A single translated value with optional metadata.

    Exactly one of ``text`` and ``reference`` is meaningful at a time. A
    reference names another file whose content becomes the text on first use
    and stays cached on the entry afterwards.

    Attributes:
        key: Key as written in the source (case preserved).
        text: Decoded text.
        escaped_text: Raw text as stored, for formats with backslash escaping.
        reference: Name of a file that holds the text.
        contains_placeholders: Whether the text has at least one placeholder.
        target: Redirect target for alias entries.
        properties: Free ``x-`` metadata properties, keyed without the prefix.
    """

    key: str = ""
    text: Optional[str] = None
    escaped_text: Optional[str] = None
    reference: Optional[str] = None
    contains_placeholders: bool = False
    description: Optional[str] = None
    comments: Optional[str] = None
    type: Optional[str] = None
    context: Optional[str] = None
    source_text: Optional[str] = None
    screen: Optional[str] = None
    video: Optional[str] = None
    target: Optional[str] = None
    placeholders: List[Placeholder] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)
    _locked: bool = field(default=False, init=False, repr=False, compare=False)

    def __setattr__(self, name: str, value: Any) -> None:
        if self.__dict__.get("_locked"):
            raise FrozenInstanceError(f"cannot assign to field '{name}' of a locked entry")
        super().__setattr__(name, value)

    def lock(self) -> "TranslationEntry":
        """Make the entry read-only, its placeholders and properties included."""
        self.placeholders = tuple(self.placeholders)
        self.properties = MappingProxyType(dict(self.properties))
        self._locked = True
        return self

    @property
    def is_locked(self) -> bool:
        return self._locked

    @property
    def is_empty(self) -> bool:
        return self.text is None and self.escaped_text is None and self.reference is None

    def resolve_reference(self, text: str) -> None:
        """Cache text loaded for the reference; the reference is consumed."""
        self.text = text
        self.reference = None

    def add_placeholder(self, placeholder: Placeholder) -> None:
        if self._locked:
            raise FrozenInstanceError("cannot add a placeholder to a locked entry")
        self.placeholders.append(placeholder)

    def find_placeholder(self, name: str) -> Optional[Placeholder]:
        lowered = name.lower()
        for placeholder in self.placeholders:
            if placeholder.name.lower() == lowered:
                return placeholder
        return None


# Returned when a key cannot be resolved anywhere
EMPTY_ENTRY = TranslationEntry().lock()


class Translation:
    """Flat key to entry map produced from one loaded source.

    Keys are stored upper-cased; lookups accept any case.

    Attributes:
        locale: Locale the data declares for itself, if the format allows it.
        origin: Name of the file or resource the data came from.
        is_basic_locale: Set once the data served as a basic-locale fallback.
        custom_properties: Format-specific extra properties (ARB ``@@x-*``).
    """

    def __init__(self, locale: Optional[str] = None):
        self.locale = locale
        self.origin: Optional[str] = None
        self.is_basic_locale = False
        self.custom_properties: Dict[str, Any] = {}
        self.context: Optional[str] = None
        self.author: Optional[str] = None
        self.last_modified: Optional[datetime] = None
        self._entries: Dict[str, TranslationEntry] = {}

    def add(self, key: str, entry: TranslationEntry) -> None:
        self._entries[key.upper()] = entry

    def get(self, key: str) -> Optional[TranslationEntry]:
        return self._entries.get(key.upper())

    def set_origin(self, origin: Optional[str]) -> "Translation":
        self.origin = origin
        return self

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def items(self) -> List[Tuple[str, TranslationEntry]]:
        return list(self._entries.items())

    def __getitem__(self, key: str) -> TranslationEntry:
        return self._entries[key.upper()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.upper() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Translation(locale={self.locale!r}, entries={len(self._entries)})"


@dataclass
class TranslationTreeLeaf:
    """A leaf of the translation tree: one key with its raw value."""

    key: str
    value: Optional[str] = None
    escaped_value: Optional[str] = None
    contains_placeholders: bool = False


class TranslationTreeNode:
    """A named group of leaves and child groups.

    Names of leaves and children are matched case-insensitively.
    """

    def __init__(self, name: str = ""):
        self.name = name
        self.keys: Dict[str, TranslationTreeLeaf] = {}
        self.child_nodes: Dict[str, "TranslationTreeNode"] = {}

    def add_leaf(self, leaf: TranslationTreeLeaf) -> TranslationTreeLeaf:
        """Add a leaf.

        Raises:
            ParserError: If a leaf with the same key already exists.
        """
        folded = leaf.key.upper()
        if folded in self.keys:
            raise ParserError(f"Duplicate key '{leaf.key}'")
        self.keys[folded] = leaf
        return leaf

    def get_leaf(self, key: str) -> Optional[TranslationTreeLeaf]:
        return self.keys.get(key.upper())

    def get_child(self, name: str) -> Optional["TranslationTreeNode"]:
        return self.child_nodes.get(name.upper())

    def find_node(self, path: str) -> Optional["TranslationTreeNode"]:
        """Find a descendant by dotted path ("a.b"); an empty path is this node."""
        node: Optional[TranslationTreeNode] = self
        for part in filter(None, path.split(".")):
            node = node.get_child(part)
            if node is None:
                return None
        return node

    def make_node(self, path: str) -> "TranslationTreeNode":
        """Find or create a descendant by dotted path."""
        node = self
        for part in filter(None, path.split(".")):
            child = node.get_child(part)
            if child is None:
                child = TranslationTreeNode(part)
                node.child_nodes[part.upper()] = child
            node = child
        return node

    def __repr__(self) -> str:
        return f"TranslationTreeNode(name={self.name!r}, keys={len(self.keys)}, children={len(self.child_nodes)})"


class TranslationTree:
    """Hierarchical view of a translation source."""

    def __init__(self):
        self.root = TranslationTreeNode()

    def find_leaf(self, path: str) -> Optional[TranslationTreeLeaf]:
        """Find a leaf by dotted path, e.g. "logs.server.started"."""
        group, _, key = path.rpartition(".")
        node = self.root.find_node(group)
        if node is None:
            return None
        return node.get_leaf(key)

    def get_value(self, path: str) -> Optional[str]:
        leaf = self.find_leaf(path)
        return leaf.value if leaf else None

    def flatten(self) -> Iterator[Tuple[str, TranslationTreeLeaf]]:
        """Yield (dotted key, leaf) pairs in insertion order."""
        stack: List[Tuple[str, TranslationTreeNode]] = [("", self.root)]
        while stack:
            prefix, node = stack.pop(0)
            for leaf in node.keys.values():
                yield (f"{prefix}.{leaf.key}" if prefix else leaf.key), leaf
            for child in node.child_nodes.values():
                stack.append((f"{prefix}.{child.name}" if prefix else child.name, child))
