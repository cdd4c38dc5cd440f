"""JSON format (.json translations, .jsoncfg configurations)."""

from typing import Any, Dict, Optional

from localization.exceptions import ParserError
from localization.models import TextProcessingMode, Translation
from localization.parsers.base import Content
from localization.parsers.json_base import JsonFamilyParser, join_key, load_json_object


class JsonParser(JsonFamilyParser):
    """Parser for plain JSON translation files.

    Example:
        {"logs": {"server": {"started": "Started"}}}

    yields the entry "logs.server.started".
    """

    name = "json"
    extensions = (".json",)
    config_extensions = (".jsoncfg",)
    default_mode = TextProcessingMode.DOTNET

    def parse_translation(
        self,
        content: Content,
        locale: Optional[str] = None,
        mode: Optional[TextProcessingMode] = None,
    ) -> Optional[Translation]:
        text = self.decode(content)
        if not text:
            return None
        result = Translation()
        self.collect(load_json_object(text), "", result, self.effective_mode(mode))
        return result

    def collect(self, data: Dict[str, Any], group: str, result: Translation, mode: TextProcessingMode) -> None:
        for name, value in data.items():
            key = join_key(group, name.strip())
            if isinstance(value, str):
                text, escaped = self.split_escapes(value, mode)
                result.add(key, self.make_entry(key, text, mode, escaped))
            elif isinstance(value, dict):
                self.collect(value, key, result, mode)
            else:
                raise ParserError(f"Unsupported value of type '{type(value).__name__}' for key '{key}'")
