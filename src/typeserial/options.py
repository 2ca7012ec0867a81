"""Format selector for the serialization dispatcher."""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class SerializationType(IntEnum):
    """Wire format used by serialize/deserialize.

    DEFAULT is an alias for JSON.
    """

    DEFAULT = 0
    JSON = 1
    XML = 2
    BSON = 3

    @classmethod
    def resolve(cls, value: Any) -> SerializationType | None:
        """Normalize a selector, returning None when it is not recognized.

        Accepts enum members, their integer values and their names
        (case-insensitive). DEFAULT resolves to JSON.
        """
        member: SerializationType | None
        if isinstance(value, cls):
            member = value
        elif isinstance(value, str):
            member = cls.__members__.get(value.upper())
        elif isinstance(value, int) and not isinstance(value, bool):
            try:
                member = cls(value)
            except ValueError:
                member = None
        else:
            member = None

        if member is cls.DEFAULT:
            return cls.JSON
        return member
