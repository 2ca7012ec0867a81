"""Format adapters for serialization.

Each format module provides a FormatAdapter plus to_<format> and
from_<format> functions that work without the dispatcher's fallback policy.
"""

from typeserial.formats.bson import BSONAdapter, from_bson, to_bson
from typeserial.formats.json import JSONAdapter, from_json, to_json
from typeserial.formats.xml import XMLAdapter, from_xml, to_xml

__all__ = [
    "BSONAdapter",
    "JSONAdapter",
    "XMLAdapter",
    "from_bson",
    "from_json",
    "from_xml",
    "to_bson",
    "to_json",
    "to_xml",
]
