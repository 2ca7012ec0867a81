"""Tests for the XML format adapter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

import pytest
from lxml import etree

from typeserial.config import SerializerOptions
from typeserial.errors import ConversionError, UnsupportedTypeError, XMLFormatError
from typeserial.formats.xml import XMLAdapter, from_xml, root_tag, to_xml


@dataclass
class Point:
    x: int
    y: int


@dataclass
class Reading:
    sensor: str
    taken: datetime
    values: list[float]
    calibration: Decimal | None = None


def parse(text: str) -> etree._Element:
    return etree.fromstring(text.encode("utf-8"))


# =============================================================================
# Test: document layout
# =============================================================================


class TestXMLLayout:
    """Test the element layout of written documents."""

    def test_declaration(self) -> None:
        """Test that the XML declaration is written unless disabled."""
        assert to_xml(1).startswith("<?xml")
        adapter = XMLAdapter(SerializerOptions(xml_declaration=False))
        assert adapter.write(1) == '<int type="int">1</int>'

    def test_dataclass_layout(self) -> None:
        """Test that a dataclass becomes a dict element of keyed entries."""
        root = parse(to_xml(Point(1, 2)))
        assert root.tag == "Point"
        assert root.get("type") == "dict"
        entries = list(root)
        assert [e.tag for e in entries] == ["entry", "entry"]
        assert [e.get("key") for e in entries] == ["x", "y"]
        assert [e.get("type") for e in entries] == ["int", "int"]
        assert [e.text for e in entries] == ["1", "2"]

    def test_list_layout(self) -> None:
        """Test that list items are <item> elements."""
        root = parse(to_xml([True, None, 2.5]))
        assert root.tag == "list"
        assert [(e.tag, e.get("type"), e.text) for e in root] == [
            ("item", "bool", "true"),
            ("item", "null", None),
            ("item", "float", "2.5"),
        ]

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (Point(0, 0), "Point"),
            ("text", "str"),
            ({"a": 1}, "dict"),
            (3, "int"),
        ],
    )
    def test_root_tag_from_type_name(self, value: Any, expected: str) -> None:
        """Test that the root element is named after the value's type."""
        assert root_tag(value) == expected

    def test_root_tag_option(self) -> None:
        """Test that a fixed root tag overrides the derived one."""
        assert parse(to_xml(Point(0, 0), root="location")).tag == "location"

    def test_special_characters_escaped(self) -> None:
        """Test that markup characters in text and keys are escaped."""
        text = to_xml({"a<b": "x & y"})
        root = parse(text)
        assert root[0].get("key") == "a<b"
        assert root[0].text == "x & y"

    def test_unsupported_value(self) -> None:
        """Test that values with no builtin form cannot be written."""
        with pytest.raises(UnsupportedTypeError):
            to_xml(object())


# =============================================================================
# Test: reading
# =============================================================================


class TestXMLRead:
    """Test XML decoding into target types."""

    def test_round_trip_dataclass(self) -> None:
        """Test that a dataclass survives a write/read cycle."""
        reading = Reading(
            sensor="t1",
            taken=datetime(2024, 5, 1, 12, 0),
            values=[1.5, -0.25],
            calibration=Decimal("0.003"),
        )
        assert from_xml(to_xml(reading), Reading) == reading

    @pytest.mark.parametrize(
        "value",
        [
            0,
            -17,
            0.1,
            True,
            "",
            "multi\nline",
            [],
            {},
            [{"a": [1, None]}, {"b": {}}],
            {"spaced key": "v"},
        ],
    )
    def test_untyped_round_trip(self, value: Any) -> None:
        """Test that builtins are restored from their type attributes."""
        assert from_xml(to_xml(value)) == value

    def test_hand_written_document(self) -> None:
        """Test reading elements without type attributes."""
        text = "<Point>\n  <x>3</x>\n  <y>4</y>\n</Point>"
        assert from_xml(text) == {"x": "3", "y": "4"}
        assert from_xml(text, Point) == Point(3, 4)

    def test_namespaced_tags_use_local_name(self) -> None:
        """Test that untyped children are keyed by their local name."""
        text = '<p:Point xmlns:p="urn:p"><p:x>1</p:x><p:y>2</p:y></p:Point>'
        assert from_xml(text, Point) == Point(1, 2)

    @pytest.mark.parametrize("encoding", ["utf-8", "ISO-8859-1", "utf-16"])
    def test_declared_encoding_ignored(self, encoding: str) -> None:
        """Test that text is read as decoded, whatever the declaration names."""
        text = (
            f'<?xml version="1.0" encoding="{encoding}"?>\n'
            '<value type="str">café</value>'
        )
        assert from_xml(text, str) == "café"

    @pytest.mark.parametrize(
        ("text", "target", "expected"),
        [
            ('<value type="str">42</value>', int, 42),
            ('<value type="str">true</value>', bool, True),
            ('<value type="int">5</value>', str, "5"),
            ("<value>2.5</value>", float, 2.5),
            (
                '<value type="list"><item>1</item><item>2</item></value>',
                set[int],
                {1, 2},
            ),
        ],
    )
    def test_lenient_conversion(self, text: str, target: Any, expected: Any) -> None:
        """Test that scalar text is coerced to the target type."""
        assert from_xml(text, target) == expected

    def test_conversion_failure_raises(self) -> None:
        """Test that content which cannot be coerced raises ConversionError."""
        with pytest.raises(ConversionError):
            from_xml('<value type="str">abc</value>', int)

    @pytest.mark.parametrize(
        "text",
        [
            '<value type="dict"><item type="int">1</item></value>',
            '<value type="bool">yes</value>',
            '<value type="complex">1j</value>',
        ],
    )
    def test_layout_errors(self, text: str) -> None:
        """Test that documents breaking the element layout are rejected."""
        with pytest.raises(XMLFormatError):
            from_xml(text)

    def test_bad_number_text(self) -> None:
        """Test that typed numbers must parse."""
        with pytest.raises(ValueError, match="invalid literal"):
            from_xml('<value type="int">abc</value>')

    def test_malformed_document(self) -> None:
        """Test that the adapter itself does not fall back on syntax errors."""
        with pytest.raises(etree.XMLSyntaxError):
            from_xml("<value type='int'>1")
