"""Type codec registry."""

from __future__ import annotations

import base64
from collections.abc import Callable
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID

from typeserial.types import ExternalType

# Types with a dedicated TypeDef (don't need ExternalType registration)
_SCHEMA_BUILTINS: set[type] = {
    int,
    float,
    str,
    bool,
    type(None),
    bytes,
    Decimal,
    date,
    time,
    datetime,
    timedelta,
}


class TypeCodecs:
    """Registry of encode/decode functions for types without a native format form.

    Pre-registered for bytes, temporal types, Decimal and UUID. Applications
    register their own types the same way; a registered type can then be used
    as a value and as a deserialization target in every format.

    Usage:
        TypeCodecs.register(
            Money,
            encode=lambda m: [m.currency, str(m.amount)],
            decode=lambda data: Money(data[0], Decimal(data[1])),
        )
    """

    _registry: ClassVar[
        dict[type, tuple[Callable[[Any], Any], Callable[[Any], Any]]]
    ] = {}
    _external_types: ClassVar[dict[type, ExternalType]] = {}

    @classmethod
    def register[T](
        cls,
        typ: type[T],
        encode: Callable[[T], Any],
        decode: Callable[[Any], T],
    ) -> None:
        """Register encode/decode functions for a serializable type.

        Args:
            typ: The type to register (e.g., datetime, Money)
            encode: Function to convert T → format-neutral builtins
            decode: Function to convert format-neutral builtins → T

        Raises:
            ValueError: If a different type with the same __name__ is already
                registered. External types are looked up by name on decode.

        """
        type_name = typ.__name__
        for existing_type in cls._registry:
            if existing_type is not typ and existing_type.__name__ == type_name:
                msg = (
                    f"Cannot register {typ!r}: a different type with name "
                    f"'{type_name}' is already registered ({existing_type!r}). "
                    f"Type names must be unique."
                )
                raise ValueError(msg)

        cls._registry[typ] = (encode, decode)

    @classmethod
    def get[T](
        cls,
        typ: type[T],
    ) -> tuple[Callable[[T], Any], Callable[[Any], T]] | None:
        """Get codec for type, or None if not registered."""
        return cls._registry.get(typ)

    @classmethod
    def get_by_name(
        cls,
        type_name: str,
    ) -> tuple[type, Callable[[Any], Any]] | None:
        """Get type and decoder by type name."""
        for typ, (_, decode) in cls._registry.items():
            if typ.__name__ == type_name:
                return typ, decode
        return None

    @classmethod
    def get_external_type(cls, typ: type) -> ExternalType:
        """Get the TypeDef for a registered type without a dedicated TypeDef."""
        if typ in _SCHEMA_BUILTINS:
            msg = f"{typ.__name__} has a dedicated TypeDef"
            raise ValueError(msg)
        if typ not in cls._external_types:
            cls._external_types[typ] = ExternalType(
                module=typ.__module__,
                name=typ.__name__,
            )
        return cls._external_types[typ]

    @classmethod
    def unregister(cls, typ: type) -> bool:
        """Unregister a type's codec.

        Returns:
            True if the type was registered and removed, False otherwise.

        """
        cls._external_types.pop(typ, None)
        if typ in cls._registry:
            del cls._registry[typ]
            return True
        return False

    @classmethod
    def clear(cls) -> None:
        """Clear codec registry and re-register builtins."""
        cls._registry.clear()
        cls._external_types.clear()
        _register_builtins()


def _register_builtins() -> None:
    """Pre-register codecs for Python builtin types."""
    TypeCodecs.register(
        bytes,
        encode=lambda b: base64.b64encode(b).decode("ascii"),
        decode=lambda s: base64.b64decode(s, validate=True),
    )

    TypeCodecs.register(
        datetime,
        encode=lambda dt: dt.isoformat(),
        decode=datetime.fromisoformat,
    )

    TypeCodecs.register(
        date,
        encode=lambda d: d.isoformat(),
        decode=date.fromisoformat,
    )

    TypeCodecs.register(
        time,
        encode=lambda t: t.isoformat(),
        decode=time.fromisoformat,
    )

    TypeCodecs.register(
        timedelta,
        encode=lambda td: td.total_seconds(),
        decode=lambda s: timedelta(seconds=s),
    )

    TypeCodecs.register(
        Decimal,
        encode=str,
        decode=Decimal,
    )

    TypeCodecs.register(
        UUID,
        encode=str,
        decode=UUID,
    )


# Register builtins on module load
_register_builtins()
