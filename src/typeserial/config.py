"""Dispatcher configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any

# XML 1.0 element names, restricted to ASCII and without namespace prefixes
_XML_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_.\-]*$")


def is_xml_name(name: str) -> bool:
    """Check whether name can be used as an XML element name."""
    return bool(_XML_NAME.match(name)) and not name.lower().startswith("xml")


@dataclass(frozen=True)
class SerializerOptions:
    """Options shared by the format adapters of one dispatcher.

    Attributes:
        json_indent: Indentation passed to json.dumps (None for compact output)
        json_sort_keys: Sort JSON object keys
        json_ensure_ascii: Escape non-ASCII characters in JSON output
        xml_root_tag: Fixed root element name; derived from the value's type
            when None
        xml_declaration: Emit the <?xml ...?> declaration
        bson_envelope_key: Document key wrapping values that are not
            mappings, since a BSON document must be one

    """

    json_indent: int | None = None
    json_sort_keys: bool = False
    json_ensure_ascii: bool = False
    xml_root_tag: str | None = None
    xml_declaration: bool = True
    bson_envelope_key: str = "value"

    def __post_init__(self) -> None:
        """Validate option values."""
        if self.json_indent is not None and self.json_indent < 0:
            msg = f"json_indent must be non-negative, got {self.json_indent}"
            raise ValueError(msg)
        if self.xml_root_tag is not None and not is_xml_name(self.xml_root_tag):
            msg = f"xml_root_tag {self.xml_root_tag!r} is not a valid XML name"
            raise ValueError(msg)
        if not self.bson_envelope_key:
            msg = "bson_envelope_key must not be empty"
            raise ValueError(msg)

    def replace(self, **changes: Any) -> SerializerOptions:
        """Return a copy with the given fields changed."""
        return replace(self, **changes)


DEFAULT_OPTIONS = SerializerOptions()
