"""JSON format adapter."""

from __future__ import annotations

import json
from typing import Any

from typeserial.adapters import FormatAdapter
from typeserial.codecs import to_builtins
from typeserial.config import DEFAULT_OPTIONS


class JSONAdapter(FormatAdapter):
    """JSON via the standard library json module."""

    name = "json"

    def write(self, value: Any) -> str:
        """Serialize a value to a JSON string."""
        return json.dumps(
            to_builtins(value),
            indent=self.options.json_indent,
            sort_keys=self.options.json_sort_keys,
            ensure_ascii=self.options.json_ensure_ascii,
        )

    def read(self, text: str) -> Any:
        """Parse a JSON string to builtins."""
        return json.loads(text)


def to_json(obj: Any, *, indent: int | None = None) -> str:
    """Serialize a value to a JSON string.

    Args:
        obj: The value to serialize
        indent: JSON indentation level (None for compact)

    Returns:
        JSON string representation

    """
    return JSONAdapter(DEFAULT_OPTIONS.replace(json_indent=indent)).write(obj)


def from_json(s: str, target: Any = Any) -> Any:
    """Deserialize a JSON string into the target type.

    Raises:
        json.JSONDecodeError: If the string is not valid JSON
        ConversionError: If the JSON does not fit the target type

    """
    return JSONAdapter().decode(s, target)
