"""XML format adapter.

Documents are written with lxml's incremental writer and read back with
iterparse. Every element carries a ``type`` attribute naming the builtin it
holds:

    <?xml version='1.0' encoding='utf-8'?>
    <Point type="dict"><entry key="x" type="int">1</entry>...</Point>

- dict children are ``<entry key="...">`` elements
- list children are ``<item>`` elements
- ``type="null"`` elements are empty
- elements without a ``type`` attribute hold text, or a mapping keyed by
  child tag when they have children, so hand-written documents such as
  ``<Point><x>1</x><y>2</y></Point>`` are readable too

XML text carries no scalar types of its own, so conversion to the target
type is lenient ("42" becomes 42 for an int target). That conversion is not
guarded by the dispatcher: a value that cannot be coerced raises
ConversionError.
"""

from __future__ import annotations

import io
import re
from typing import TYPE_CHECKING, Any

from lxml import etree

from typeserial.adapters import FormatAdapter
from typeserial.codecs import from_builtins, to_builtins
from typeserial.config import DEFAULT_OPTIONS, is_xml_name
from typeserial.errors import UnsupportedTypeError, XMLFormatError

if TYPE_CHECKING:
    from typeserial.types import TypeDef

_ENCODING = "utf-8"
_DEFAULT_ROOT = "value"
_ITEM = "item"
_ENTRY = "entry"
_KEY = "key"
_TYPE = "type"

# The text is already decoded, so a declared encoding no longer applies
_DECLARATION = re.compile(r"\A\s*<\?xml\s[^>]*\?>")


def root_tag(value: Any) -> str:
    """Root element name for a value: its type name if that is a valid XML name."""
    name = type(value).__name__
    return name if is_xml_name(name) else _DEFAULT_ROOT


class XMLAdapter(FormatAdapter):
    """XML via lxml."""

    name = "xml"
    guards_conversion = False

    def write(self, value: Any) -> str:
        """Serialize a value to an XML document string."""
        data = to_builtins(value)
        tag = self.options.xml_root_tag or root_tag(value)
        with io.BytesIO() as buffer:
            with etree.xmlfile(buffer, encoding=_ENCODING) as xf:
                if self.options.xml_declaration:
                    xf.write_declaration()
                _write_element(xf, tag, data, {})
            return buffer.getvalue().decode(_ENCODING)

    def read(self, text: str) -> Any:
        """Parse an XML document to builtins.

        Any encoding named in the XML declaration is ignored: the document is
        read from the decoded text.
        """
        body = _DECLARATION.sub("", text, count=1)
        with io.BytesIO(body.encode(_ENCODING)) as buffer:
            return _parse(buffer)

    def convert(self, data: Any, typedef: TypeDef) -> Any:
        """Coerce builtins to the target type, converting scalars from text."""
        return from_builtins(data, typedef, lenient=True)


def _kind(data: Any) -> str:  # noqa: PLR0911
    if data is None:
        return "null"
    if isinstance(data, bool):
        return "bool"
    if isinstance(data, int):
        return "int"
    if isinstance(data, float):
        return "float"
    if isinstance(data, str):
        return "str"
    if isinstance(data, list):
        return "list"
    if isinstance(data, dict):
        return "dict"
    msg = f"Cannot write {type(data).__name__} value to XML"
    raise UnsupportedTypeError(msg)


def _write_element(
    xf: Any,
    tag: str,
    data: Any,
    attrib: dict[str, str],
) -> None:
    kind = _kind(data)
    with xf.element(tag, {**attrib, _TYPE: kind}):
        match kind:
            case "null":
                pass
            case "list":
                for item in data:
                    _write_element(xf, _ITEM, item, {})
            case "dict":
                for key, value in data.items():
                    _write_element(xf, _ENTRY, value, {_KEY: key})
            case "bool":
                xf.write("true" if data else "false")
            case "float":
                xf.write(repr(data))
            case _:
                xf.write(str(data))


def _parse(source: io.BytesIO) -> Any:
    """Stream through the document, building builtins bottom-up."""
    # One frame of (key, tag, value) children per open element
    frames: list[list[tuple[str | None, str, Any]]] = [[]]
    events = etree.iterparse(
        source,
        events=("start", "end"),
        no_network=True,
        resolve_entities=False,
        remove_comments=True,
        remove_pis=True,
    )
    for event, element in events:
        if event == "start":
            frames.append([])
            continue
        children = frames.pop()
        value = _element_value(element, children)
        tag = etree.QName(element).localname
        frames[-1].append((element.get(_KEY), tag, value))
        element.clear(keep_tail=True)

    [(_, _, root)] = frames[0]
    return root


def _element_value(  # noqa: PLR0911
    element: Any,
    children: list[tuple[str | None, str, Any]],
) -> Any:
    kind = element.get(_TYPE)
    text = element.text
    match kind:
        case "null":
            return None
        case "list":
            return [value for _, _, value in children]
        case "dict":
            entries: dict[str, Any] = {}
            for key, tag, value in children:
                if key is None:
                    msg = f"<{tag}> inside a dict element has no '{_KEY}' attribute"
                    raise XMLFormatError(msg)
                entries[key] = value
            return entries
        case "bool":
            flag = (text or "").strip().lower()
            if flag not in ("true", "false"):
                msg = f"Invalid bool text {text!r}"
                raise XMLFormatError(msg)
            return flag == "true"
        case "int":
            return int((text or "").strip())
        case "float":
            return float((text or "").strip())
        case "str":
            return text or ""
        case None if children:
            return {
                key if key is not None else tag: value
                for key, tag, value in children
            }
        case None:
            return text or ""
        case _:
            msg = f"Unknown {_TYPE} attribute {kind!r}"
            raise XMLFormatError(msg)


def to_xml(obj: Any, *, root: str | None = None) -> str:
    """Serialize a value to an XML document string.

    Args:
        obj: The value to serialize
        root: Root element name (derived from the value's type when None)

    Returns:
        XML document string

    """
    return XMLAdapter(DEFAULT_OPTIONS.replace(xml_root_tag=root)).write(obj)


def from_xml(s: str, target: Any = Any) -> Any:
    """Deserialize an XML document into the target type.

    Raises:
        lxml.etree.XMLSyntaxError: If the document is not well-formed
        XMLFormatError: If the document does not follow the element layout
        ConversionError: If the content cannot be coerced to the target type

    """
    return XMLAdapter().decode(s, target)
