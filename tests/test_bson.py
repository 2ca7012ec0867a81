"""Tests for the BSON format adapter."""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from datetime import date
from typing import Any

import pytest
from zaber_bson import dumps, loads

from typeserial.config import SerializerOptions
from typeserial.errors import ConversionError
from typeserial.formats.bson import BSONAdapter, from_bson, to_bson


@dataclass
class Order:
    number: int
    placed: date
    lines: list[str]
    note: str | None = None


def document(text: str) -> Any:
    return loads(base64.b64decode(text, validate=True))


def encode_document(doc: dict[str, Any]) -> str:
    return base64.b64encode(dumps(doc)).decode("ascii")


class TestBSONWrite:
    """Test the documents written for different value shapes."""

    def test_output_is_base64(self) -> None:
        """Test that output is ASCII base64 text."""
        text = to_bson({"a": 1})
        assert text.isascii()
        assert base64.b64encode(base64.b64decode(text)).decode("ascii") == text

    @pytest.mark.parametrize(
        "value",
        [5, 2.5, "text", False, [1, 2], {"a": 1, "b": [True, None]}],
    )
    def test_values_are_enveloped(self, value: Any) -> None:
        """Test that every value is wrapped in the envelope key."""
        assert document(to_bson(value)) == {"value": value}

    def test_dataclass_is_enveloped(self) -> None:
        """Test that dataclasses are wrapped like any other value."""
        order = Order(3, date(2024, 2, 29), ["tea"])
        assert document(to_bson(order)) == {
            "value": {
                "number": 3,
                "placed": "2024-02-29",
                "lines": ["tea"],
                "note": None,
            },
        }

    def test_custom_envelope_key(self) -> None:
        """Test that the envelope key is configurable."""
        adapter = BSONAdapter(SerializerOptions(bson_envelope_key="payload"))
        assert document(adapter.write(7)) == {"payload": 7}
        assert adapter.decode(adapter.write(7), int) == 7


class TestBSONRead:
    """Test BSON decoding into target types."""

    @pytest.mark.parametrize(
        ("value", "target"),
        [
            (5, int),
            (2.5, float),
            ("text", str),
            (True, bool),
            ([1, 2], list[int]),
            ((1, "a"), tuple[int, str]),
            (b"\x00\xff", bytes),
            ({"value": 1}, dict[str, int]),
            (None, int | None),
        ],
    )
    def test_round_trip(self, value: Any, target: Any) -> None:
        """Test that values survive a write/read cycle."""
        assert from_bson(to_bson(value), target) == value

    def test_round_trip_dataclass(self) -> None:
        """Test that a dataclass survives a write/read cycle."""
        order = Order(12, date(2023, 12, 1), ["coffee", "cake"], note="window")
        assert from_bson(to_bson(order), Order) == order

    @pytest.mark.parametrize("value", [5, "text", [1, 2], {"value": 5}, {}])
    def test_untyped_round_trip(self, value: Any) -> None:
        """Test that an Any target receives the value as written."""
        assert from_bson(to_bson(value)) == value

    @pytest.mark.parametrize("value", [3, {"value": 3}, {"other": 3}])
    def test_mixed_union_round_trip(self, value: Any) -> None:
        """Test that a dict shaped like the envelope is not taken for a scalar."""
        assert from_bson(to_bson(value), int | dict[str, int]) == value

    def test_unwrapped_document_rejected(self) -> None:
        """Test that documents without the envelope key cannot be read."""
        with pytest.raises(ConversionError, match="'value'"):
            from_bson(encode_document({"a": 1}), dict[str, int])

    def test_strict_conversion(self) -> None:
        """Test that BSON values are not coerced from text."""
        with pytest.raises(ConversionError):
            from_bson(to_bson("5"), int)

    def test_invalid_base64(self) -> None:
        """Test that the adapter itself does not fall back on bad input."""
        with pytest.raises(binascii.Error):
            from_bson("not base64!")
