"""BSON format adapter.

BSON is binary; the adapter base64-encodes documents so that every format
exchanges text. A BSON document must be a mapping, so every value is wrapped
as {envelope_key: value} and unwrapped again on read. Wrapping mappings too
keeps a dict that happens to look like an envelope distinct from a wrapped
scalar.
"""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any

from zaber_bson import dumps, loads

from typeserial.adapters import FormatAdapter
from typeserial.codecs import from_builtins, to_builtins
from typeserial.config import DEFAULT_OPTIONS
from typeserial.errors import ConversionError

if TYPE_CHECKING:
    from typeserial.types import TypeDef


class BSONAdapter(FormatAdapter):
    """BSON via zaber_bson, base64-encoded."""

    name = "bson"

    def write(self, value: Any) -> str:
        """Serialize a value to a base64-encoded BSON document."""
        document = {self.options.bson_envelope_key: to_builtins(value)}
        return base64.b64encode(dumps(document)).decode("ascii")

    def read(self, text: str) -> Any:
        """Decode base64 text and parse the BSON document it holds."""
        return loads(base64.b64decode(text, validate=True))

    def convert(self, data: Any, typedef: TypeDef) -> Any:
        """Unwrap the envelope, then convert its payload."""
        key = self.options.bson_envelope_key
        if not isinstance(data, dict) or list(data) != [key]:
            msg = f"BSON document is not wrapped in a single {key!r} key"
            raise ConversionError(msg)
        return from_builtins(data[key], typedef)


def to_bson(obj: Any) -> str:
    """Serialize a value to a base64-encoded BSON document."""
    return BSONAdapter(DEFAULT_OPTIONS).write(obj)


def from_bson(s: str, target: Any = Any) -> Any:
    """Deserialize a base64-encoded BSON document into the target type.

    Raises:
        binascii.Error: If the text is not valid base64
        ConversionError: If the document does not fit the target type

    """
    return BSONAdapter().decode(s, target)
