"""Format adapter base class."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar

from typeserial.codecs import from_builtins
from typeserial.config import DEFAULT_OPTIONS, SerializerOptions
from typeserial.schema import extract_type

if TYPE_CHECKING:
    from typeserial.types import TypeDef


class FormatAdapter(ABC):
    """Base class for one wire format.

    Writing turns a value into text. Reading is split in two stages so the
    dispatcher can apply its fallback policy to each one separately:

    - read: text → format-neutral builtins
    - convert: builtins → target type

    guards_conversion tells the dispatcher whether a failed convert stage
    falls back to a default value or propagates to the caller.
    """

    name: ClassVar[str]
    guards_conversion: ClassVar[bool] = True

    def __init__(self, options: SerializerOptions = DEFAULT_OPTIONS) -> None:
        self.options = options

    @abstractmethod
    def write(self, value: Any) -> str:
        """Encode a value to text."""
        ...

    @abstractmethod
    def read(self, text: str) -> Any:
        """Decode text to format-neutral builtins."""
        ...

    def convert(self, data: Any, typedef: TypeDef) -> Any:
        """Convert builtins produced by read() to the target type."""
        return from_builtins(data, typedef)

    def decode(self, text: str, target: Any) -> Any:
        """Read and convert in one step, without any fallback."""
        return self.convert(self.read(text), extract_type(target))
