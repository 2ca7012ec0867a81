"""Format dispatch with empty-input short circuits and decode fallbacks."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from typeserial.codecs import zero_value
from typeserial.config import DEFAULT_OPTIONS, SerializerOptions
from typeserial.errors import UnsupportedTypeError
from typeserial.formats.bson import BSONAdapter
from typeserial.formats.json import JSONAdapter
from typeserial.formats.xml import XMLAdapter
from typeserial.options import SerializationType
from typeserial.schema import extract_type

if TYPE_CHECKING:
    from typeserial.adapters import FormatAdapter

logger = logging.getLogger(__name__)


class FormatDispatcher:
    """Routes values to the adapter selected by a SerializationType.

    serialize:
        None serializes to "" in every format. An unrecognized selector also
        yields "". Encoder failures propagate.

    deserialize:
        None or "" yields the target type's zero value, as does an
        unrecognized selector. When decoding fails, JSON and BSON return the
        input text itself for a str target and the zero value otherwise.
        XML falls back the same way only while reading the document; a
        failure to coerce its content to the target type raises
        ConversionError. This asymmetry is intentional and kept as-is.
        A target type the codecs cannot handle has the zero value None.
    """

    def __init__(self, options: SerializerOptions = DEFAULT_OPTIONS) -> None:
        self.options = options
        self._adapters: dict[SerializationType, FormatAdapter] = {
            SerializationType.JSON: JSONAdapter(options),
            SerializationType.XML: XMLAdapter(options),
            SerializationType.BSON: BSONAdapter(options),
        }

    def adapter_for(self, serialization_type: Any) -> FormatAdapter | None:
        """Get the adapter for a selector, or None if it is not recognized."""
        resolved = SerializationType.resolve(serialization_type)
        if resolved is None:
            return None
        return self._adapters.get(resolved)

    def serialize(
        self,
        value: Any,
        serialization_type: SerializationType = SerializationType.DEFAULT,
    ) -> str:
        """Serialize a value to text in the selected format.

        Args:
            value: Any supported value
            serialization_type: Wire format (DEFAULT is JSON)

        Returns:
            Encoded text, or "" for None and for unrecognized formats

        """
        if value is None:
            return ""

        adapter = self.adapter_for(serialization_type)
        if adapter is None:
            logger.debug(
                "Unrecognized serialization type %r, returning empty string",
                serialization_type,
            )
            return ""

        return adapter.write(value)

    def deserialize[T](
        self,
        value: str | None,
        target: type[T],
        serialization_type: SerializationType = SerializationType.DEFAULT,
    ) -> T:
        """Deserialize text in the selected format into the target type.

        Args:
            value: Encoded text
            target: Type (or type annotation such as list[int]) to decode into
            serialization_type: Wire format (DEFAULT is JSON)

        Returns:
            The decoded value, or the fallback value described on the class

        Raises:
            UnsupportedTypeError: If XML content is read into a target type
                the codecs cannot handle
            ConversionError: If XML content cannot be coerced to the target

        """
        if not value:
            return _zero_value(target)

        adapter = self.adapter_for(serialization_type)
        if adapter is None:
            logger.debug(
                "Unrecognized serialization type %r, returning zero value",
                serialization_type,
            )
            return _zero_value(target)

        try:
            data = adapter.read(value)
        except Exception as e:  # noqa: BLE001
            return _fallback(value, target, adapter, e)

        if not adapter.guards_conversion:
            return adapter.convert(data, extract_type(target))

        try:
            return adapter.convert(data, extract_type(target))
        except Exception as e:  # noqa: BLE001
            return _fallback(value, target, adapter, e)


def _zero_value(target: Any) -> Any:
    """Zero value of a target, or None when the codecs cannot handle it."""
    try:
        return zero_value(target)
    except UnsupportedTypeError:
        return None


def _fallback(
    value: str,
    target: Any,
    adapter: FormatAdapter,
    error: Exception,
) -> Any:
    """Value returned in place of a failed decode."""
    logger.debug(
        "Cannot decode %s input as %s, using fallback value: %s",
        adapter.name,
        getattr(target, "__name__", target),
        error,
    )
    if target is str:
        return value
    return _zero_value(target)


_default_dispatcher = FormatDispatcher()


def serialize(
    value: Any,
    serialization_type: SerializationType = SerializationType.DEFAULT,
) -> str:
    """Serialize a value with the default dispatcher."""
    return _default_dispatcher.serialize(value, serialization_type)


def deserialize[T](
    value: str | None,
    target: type[T],
    serialization_type: SerializationType = SerializationType.DEFAULT,
) -> T:
    """Deserialize text with the default dispatcher."""
    return _default_dispatcher.deserialize(value, target, serialization_type)
