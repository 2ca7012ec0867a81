"""typeserial - format-switched serialization of typed Python values."""

import logging

from typeserial.codecs import (
    from_builtins,
    to_builtins,
    zero_value,
)
from typeserial.config import SerializerOptions
from typeserial.dispatch import (
    FormatDispatcher,
    deserialize,
    serialize,
)
from typeserial.errors import (
    ConversionError,
    SerializationError,
    UnsupportedTypeError,
    XMLFormatError,
)
from typeserial.formats import (
    from_bson,
    from_json,
    from_xml,
    to_bson,
    to_json,
    to_xml,
)
from typeserial.options import SerializationType
from typeserial.registry import TypeCodecs
from typeserial.schema import extract_type

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ConversionError",
    "FormatDispatcher",
    "SerializationError",
    "SerializationType",
    "SerializerOptions",
    "TypeCodecs",
    "UnsupportedTypeError",
    "XMLFormatError",
    "deserialize",
    "extract_type",
    "from_bson",
    "from_builtins",
    "from_json",
    "from_xml",
    "serialize",
    "to_bson",
    "to_builtins",
    "to_json",
    "to_xml",
    "zero_value",
]
