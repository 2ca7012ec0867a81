"""
Format Switching Example
========================

One value, three wire formats, demonstrating:
- serialize/deserialize with a SerializationType selector
- Registering a codec for an application type
- The fallback values returned for input that cannot be decoded
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from typeserial import SerializationType, TypeCodecs, deserialize, serialize


# ============================================================================
# Define Types
# ============================================================================

@dataclass(frozen=True)
class Money:
    """An amount in a currency, stored as ["EUR", "12.50"]."""
    currency: str
    amount: Decimal


TypeCodecs.register(
    Money,
    encode=lambda m: [m.currency, str(m.amount)],
    decode=lambda data: Money(data[0], Decimal(data[1])),
)


@dataclass
class Invoice:
    number: int
    issued: date
    total: Money
    lines: list[str]


# ============================================================================
# Round Trips
# ============================================================================

def main():
    invoice = Invoice(
        number=1042,
        issued=date(2024, 4, 30),
        total=Money("EUR", Decimal("12.50")),
        lines=["coffee", "croissant"],
    )

    for fmt in (SerializationType.JSON, SerializationType.XML, SerializationType.BSON):
        text = serialize(invoice, fmt)
        print(f"{fmt.name}:")
        print(text)
        assert deserialize(text, Invoice, fmt) == invoice
        print()

    # Nothing to decode: the zero value of the target type
    print(f"Empty input as int: {deserialize('', int)!r}")

    # Undecodable input: the text itself for str targets, zero value otherwise
    print(f"'hello' as str: {deserialize('hello', str)!r}")
    print(f"'hello' as list[int]: {deserialize('hello', list[int])!r}")

    # XML text is coerced to the target type
    xml = "<Invoice><number>7</number></Invoice>"
    print(f"XML number: {deserialize(xml, dict[str, int], SerializationType.XML)!r}")


if __name__ == "__main__":
    main()
