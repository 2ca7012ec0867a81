"""Exception hierarchy for typeserial."""

from __future__ import annotations


class SerializationError(Exception):
    """Base class for all typeserial errors."""


class ConversionError(SerializationError, ValueError):
    """Decoded builtins cannot be converted to the requested target type."""


class UnsupportedTypeError(SerializationError, TypeError):
    """A value or target annotation cannot be handled by the codecs."""


class XMLFormatError(SerializationError, ValueError):
    """Well-formed XML that does not follow the typeserial element layout."""
