"""Application Resource Bundle format (.arb translations, .arbcfg configurations).

ARB is JSON with metadata. ``@@``-prefixed properties describe the whole
file, ``@key`` objects describe the entry ``key`` and ``key@target`` records
an alias entry.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from core.logging import get_module_logger
from localization.exceptions import ParserError
from localization.models import Placeholder, TextProcessingMode, Translation, TranslationEntry
from localization.parsers.base import Content
from localization.parsers.json_base import JsonFamilyParser, join_key, load_json_object

logger = get_module_logger()

KEY_LOCALE = "@@locale"
KEY_CONTEXT = "@@context"
KEY_AUTHOR = "@@author"
KEY_LAST_MODIFIED = "@@last_modified"
CUSTOM_PREFIX = "@@x-"
PROPERTY_PREFIX = "x-"

_ENTRY_FIELDS = {
    "description": "description",
    "type": "type",
    "context": "context",
    "source_text": "source_text",
    "screen": "screen",
    "video": "video",
}


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; "Z" is read as UTC. Invalid values give None."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        logger.warning("arb_timestamp_invalid", value=value)
        return None


def make_placeholder(name: str, definition: Dict[str, Any]) -> Placeholder:
    placeholder = Placeholder(name=name.strip())
    for prop, value in definition.items():
        key = prop.strip()
        lowered = key.lower()
        if lowered == "optionalparameters" and isinstance(value, dict):
            placeholder.optional_parameters.update(value)
        elif lowered == "type" and isinstance(value, str):
            placeholder.type = value
        elif lowered == "format" and isinstance(value, str):
            placeholder.format = value
        elif lowered == "example" and isinstance(value, (str, int, float)):
            placeholder.example = str(value)
        else:
            placeholder.properties[key] = value
    return placeholder


class ArbParser(JsonFamilyParser):
    """Parser for ARB files."""

    name = "arb"
    extensions = (".arb",)
    config_extensions = (".arbcfg",)
    default_mode = TextProcessingMode.ARB

    def skip_property(self, name: str) -> bool:
        return name.strip().startswith("@")

    def leaf_key(self, name: str) -> str:
        key, _, target = name.strip().partition("@")
        return key if target else name.strip()

    def parse_translation(
        self,
        content: Content,
        locale: Optional[str] = None,
        mode: Optional[TextProcessingMode] = None,
    ) -> Optional[Translation]:
        text = self.decode(content)
        if not text:
            return None
        data = load_json_object(text)

        result = Translation(locale=self.header_string(data, KEY_LOCALE))
        result.context = self.header_string(data, KEY_CONTEXT)
        result.author = self.header_string(data, KEY_AUTHOR)
        result.last_modified = parse_timestamp(self.header_string(data, KEY_LAST_MODIFIED))
        for name, value in data.items():
            if name.startswith(CUSTOM_PREFIX) and len(name) > len(CUSTOM_PREFIX):
                result.custom_properties[name[len(CUSTOM_PREFIX) :]] = value

        self.collect(data, "", result, self.effective_mode(mode))
        return result

    @staticmethod
    def header_string(data: Dict[str, Any], key: str) -> Optional[str]:
        value = data.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ParserError(f"The '{key}' property must be a string")
        return value.strip() or None

    def collect(self, data: Dict[str, Any], group: str, result: Translation, mode: TextProcessingMode) -> None:
        """Add string entries first, then apply metadata and descend into groups."""
        for name, value in data.items():
            if not isinstance(value, str):
                continue
            name = name.strip()
            if name.startswith("@"):
                continue

            target = None
            base, _, alias = name.partition("@")
            if alias:
                name, target = base, alias

            key = join_key(group, name)
            text, escaped = self.split_escapes(value, mode)
            existing = result.get(key)
            if existing is not None and not existing.is_empty:
                raise ParserError(f"Duplicate key '{key}' specified in the translation file")

            entry = self.make_entry(key, text, mode, escaped)
            entry.target = target
            if existing is not None:
                # Metadata seen earlier created the entry
                self.copy_metadata(existing, entry)
            result.add(key, entry)

        for name, value in data.items():
            name = name.strip()
            if isinstance(value, str):
                continue
            if name.startswith("@@"):
                continue
            if not isinstance(value, dict):
                raise ParserError(f"Unsupported value of type '{type(value).__name__}' for key '{join_key(group, name)}'")
            if name.startswith("@"):
                if len(name) > 1:
                    self.apply_metadata(join_key(group, name[1:]), value, result)
            else:
                self.collect(value, join_key(group, name), result, mode)

    @staticmethod
    def apply_metadata(key: str, metadata: Dict[str, Any], result: Translation) -> None:
        entry = result.get(key)
        if entry is None:
            entry = TranslationEntry(key=key)
            result.add(key, entry)

        for prop, value in metadata.items():
            lowered = prop.strip().lower()
            if lowered in _ENTRY_FIELDS and isinstance(value, str):
                setattr(entry, _ENTRY_FIELDS[lowered], value)
            elif lowered == "placeholders" and isinstance(value, dict):
                for placeholder_name, definition in value.items():
                    if isinstance(definition, dict):
                        entry.add_placeholder(make_placeholder(placeholder_name, definition))
            elif lowered.startswith(PROPERTY_PREFIX) and len(lowered) > len(PROPERTY_PREFIX):
                entry.properties[prop.strip()[len(PROPERTY_PREFIX) :]] = value

    @staticmethod
    def copy_metadata(source: TranslationEntry, target: TranslationEntry) -> None:
        for attribute in _ENTRY_FIELDS.values():
            setattr(target, attribute, getattr(source, attribute))
        target.placeholders = list(source.placeholders)
        target.properties = dict(source.properties)
