"""Conversion between typed Python values and format-neutral builtins.

Every format adapter reads its wire format into plain builtins (dict, list,
str, int, float, bool, None) and writes them back out. This module bridges
those builtins and the caller's types:

- to_builtins: any supported value → builtins
- from_builtins: builtins + target type → typed value
- zero_value: the value returned when there is nothing to decode
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from collections.abc import Set as AbstractSet
from dataclasses import MISSING, Field, fields, is_dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, get_type_hints

from typeserial.errors import ConversionError, UnsupportedTypeError
from typeserial.registry import TypeCodecs
from typeserial.schema import extract_type
from typeserial.types import (
    AbstractSetType,
    AnyType,
    BoolType,
    BytesType,
    DataclassType,
    DateTimeType,
    DateType,
    DecimalType,
    DictType,
    DurationType,
    EnumType,
    ExternalType,
    FloatType,
    FrozenSetType,
    IntType,
    ListType,
    LiteralType,
    MappingType,
    NoneType,
    SequenceType,
    SetType,
    StrType,
    TimeType,
    TupleType,
    TypeDef,
    UnionType,
    VarTupleType,
    type_name,
)

_ZERO_FACTORIES: dict[type[TypeDef], Callable[[], Any]] = {
    IntType: int,
    FloatType: float,
    BoolType: bool,
    StrType: str,
    BytesType: bytes,
    DecimalType: Decimal,
    DurationType: timedelta,
    ListType: list,
    SequenceType: list,
    VarTupleType: tuple,
    TupleType: tuple,
    SetType: set,
    AbstractSetType: set,
    FrozenSetType: frozenset,
    DictType: dict,
    MappingType: dict,
}

# Wire form of booleans wherever text is the only representation
_TRUE = "true"
_FALSE = "false"

_CONVERSION_FAILURES = (ValueError, TypeError, ArithmeticError, LookupError)


def zero_value(target: Any) -> Any:
    """Return the zero value of a target type.

    Built-in scalars and containers yield their no-argument constructor result
    (0, 0.0, False, "", b"", [], {}, ...). Every other type yields None.
    """
    factory = _ZERO_FACTORIES.get(type(extract_type(target)))
    return factory() if factory is not None else None


def to_builtins(obj: Any) -> Any:
    """Convert a value to format-neutral Python builtins.

    Mapping keys become strings, since no supported format has non-string
    keys. Values the codecs don't know pass through unchanged and are left for
    the wire format encoder to accept or reject.
    """
    typ = type(obj)

    # 1. Registered codec (bytes, temporal types, Decimal, UUID, external types)
    if codec := TypeCodecs.get(typ):
        encode, _ = codec
        return to_builtins(encode(obj))

    # 2. Enum members are encoded by value
    if isinstance(obj, Enum):
        return to_builtins(obj.value)

    # 3. Dataclass instances become mappings of their public fields
    if is_dataclass(obj) and not isinstance(obj, type):
        return {
            f.name: to_builtins(getattr(obj, f.name))
            for f in _public_fields(type(obj))
        }

    # 4. Mappings
    if isinstance(obj, Mapping):
        return {_encode_key(k): to_builtins(v) for k, v in obj.items()}

    # 5. Sequences and sets become lists
    if isinstance(obj, AbstractSet):
        return [to_builtins(item) for item in obj]
    if isinstance(obj, Sequence) and not isinstance(obj, str | bytes | bytearray):
        return [to_builtins(item) for item in obj]

    # 6. Primitives pass through
    return obj


def _encode_key(key: Any) -> str:
    """Encode a mapping key to its string form."""
    if isinstance(key, str):
        return key
    if isinstance(key, bool):
        return _TRUE if key else _FALSE
    if key is None:
        return "null"
    if isinstance(key, int | float):
        return str(key)

    encoded = to_builtins(key)
    if encoded is not key and not isinstance(encoded, dict | list):
        return _encode_key(encoded)
    msg = f"Cannot use {type(key).__name__} as a mapping key"
    raise UnsupportedTypeError(msg)


def from_builtins(data: Any, target: Any, *, lenient: bool = False) -> Any:
    """Convert format-neutral builtins to an instance of the target type.

    Args:
        data: Builtins produced by a format reader
        target: Python type annotation or TypeDef to convert to
        lenient: Also coerce scalars from their text form ("42" → 42,
            "true" → True, 5 → "5"). Strict mode only accepts matching
            builtin kinds, except that an int is accepted for a float.

    Returns:
        The converted value

    Raises:
        ConversionError: If data does not fit the target type
        UnsupportedTypeError: If the target annotation cannot be handled

    """
    return _decode(data, extract_type(target), lenient=lenient)


def _mismatch(data: Any, typedef: TypeDef) -> ConversionError:
    msg = (
        f"Cannot convert {type(data).__name__} value {data!r:.60} "
        f"to {type_name(typedef)}"
    )
    return ConversionError(msg)


def _is_number(data: Any) -> bool:
    return isinstance(data, int | float) and not isinstance(data, bool)


def _decode(  # noqa: C901, PLR0911, PLR0912
    data: Any,
    typedef: TypeDef,
    *,
    lenient: bool,
) -> Any:
    """Decode a builtin value using the TypeDef to rebuild the Python type."""
    match typedef:
        case AnyType():
            return data
        case NoneType():
            if data is None or (lenient and data == "null"):
                return None
            raise _mismatch(data, typedef)
        case BoolType():
            return _decode_bool(data, typedef, lenient=lenient)
        case IntType():
            return _decode_int(data, typedef, lenient=lenient)
        case FloatType():
            if _is_number(data):
                return float(data)
            if lenient and isinstance(data, str):
                return _call(float, data.strip(), typedef)
            raise _mismatch(data, typedef)
        case StrType():
            if isinstance(data, str):
                return data
            if lenient and isinstance(data, bool):
                return _TRUE if data else _FALSE
            if lenient and _is_number(data):
                return str(data)
            raise _mismatch(data, typedef)
        case BytesType():
            if isinstance(data, bytes):
                return data
            return _decode_registered(bytes, data, typedef, accepts=(str,))
        case DecimalType():
            if isinstance(data, Decimal):
                return data
            if _is_number(data):
                data = str(data)
            return _decode_registered(Decimal, data, typedef, accepts=(str,))
        case DateTimeType():
            return _decode_registered(datetime, data, typedef, accepts=(str,))
        case DateType():
            return _decode_registered(date, data, typedef, accepts=(str,))
        case TimeType():
            return _decode_registered(time, data, typedef, accepts=(str,))
        case DurationType():
            if lenient and isinstance(data, str):
                data = _call(float, data.strip(), typedef)
            if not _is_number(data):
                raise _mismatch(data, typedef)
            return _decode_registered(
                timedelta, data, typedef, accepts=(int, float),
            )
        case ListType(element=element) | SequenceType(element=element):
            items = _as_list(data, typedef)
            return [_decode(item, element, lenient=lenient) for item in items]
        case VarTupleType(element=element):
            items = _as_list(data, typedef)
            return tuple(_decode(item, element, lenient=lenient) for item in items)
        case TupleType(elements=elements):
            items = _as_list(data, typedef)
            if len(items) != len(elements):
                raise _mismatch(data, typedef)
            return tuple(
                _decode(item, elem_type, lenient=lenient)
                for item, elem_type in zip(items, elements, strict=True)
            )
        case SetType(element=element) | AbstractSetType(element=element):
            items = _as_list(data, typedef)
            decoded = [_decode(item, element, lenient=lenient) for item in items]
            return _call(set, decoded, typedef)
        case FrozenSetType(element=element):
            items = _as_list(data, typedef)
            decoded = [_decode(item, element, lenient=lenient) for item in items]
            return _call(frozenset, decoded, typedef)
        case DictType(key=key, value=value) | MappingType(key=key, value=value):
            if not isinstance(data, dict):
                raise _mismatch(data, typedef)
            # Keys travel as strings in every format
            return {
                _decode(k, key, lenient=True): _decode(v, value, lenient=lenient)
                for k, v in data.items()
            }
        case LiteralType(values=values):
            return _decode_literal(data, typedef, values, lenient=lenient)
        case UnionType(options=options):
            return _decode_union(data, typedef, options, lenient=lenient)
        case EnumType(cls=cls):
            return _decode_enum(data, typedef, cls, lenient=lenient)
        case DataclassType(cls=cls):
            return _decode_dataclass(data, typedef, cls, lenient=lenient)
        case ExternalType(name=name):
            entry = TypeCodecs.get_by_name(name)
            if entry is None:
                msg = f"No codec registered for external type {typedef.module}.{name}"
                raise UnsupportedTypeError(msg)
            typ, decode = entry
            if isinstance(data, typ):
                return data
            return _call(decode, data, typedef)
        case _:
            msg = f"Unsupported TypeDef: {typedef!r}"
            raise UnsupportedTypeError(msg)


def _call(func: Callable[[Any], Any], data: Any, typedef: TypeDef) -> Any:
    """Apply a conversion function, reporting failures as ConversionError."""
    try:
        return func(data)
    except _CONVERSION_FAILURES as e:
        raise _mismatch(data, typedef) from e


def _decode_registered(
    typ: type,
    data: Any,
    typedef: TypeDef,
    *,
    accepts: tuple[type, ...],
) -> Any:
    if isinstance(data, typ):
        return data
    if isinstance(data, bool) or not isinstance(data, accepts):
        raise _mismatch(data, typedef)
    codec = TypeCodecs.get(typ)
    if codec is None:
        msg = f"No codec registered for {typ.__name__}"
        raise UnsupportedTypeError(msg)
    _, decode = codec
    return _call(decode, data, typedef)


def _decode_bool(data: Any, typedef: TypeDef, *, lenient: bool) -> bool:
    if isinstance(data, bool):
        return data
    if lenient and isinstance(data, str):
        text = data.strip().lower()
        if text in (_TRUE, "1"):
            return True
        if text in (_FALSE, "0"):
            return False
    raise _mismatch(data, typedef)


def _decode_int(data: Any, typedef: TypeDef, *, lenient: bool) -> int:
    if isinstance(data, int) and not isinstance(data, bool):
        return data
    if isinstance(data, float) and data.is_integer():
        return int(data)
    if lenient and isinstance(data, str):
        return _call(int, data.strip(), typedef)
    raise _mismatch(data, typedef)


def _as_list(data: Any, typedef: TypeDef) -> list[Any]:
    if not isinstance(data, list):
        raise _mismatch(data, typedef)
    return data


def _decode_literal(
    data: Any,
    typedef: TypeDef,
    values: tuple[Any, ...],
    *,
    lenient: bool,
) -> Any:
    for value in values:
        if type(data) is type(value) and data == value:
            return value
    if lenient and isinstance(data, str):
        for value in values:
            text = _encode_key(value)
            if text == data:
                return value
    raise _mismatch(data, typedef)


def _decode_union(
    data: Any,
    typedef: TypeDef,
    options: tuple[TypeDef, ...],
    *,
    lenient: bool,
) -> Any:
    if data is None and any(isinstance(o, NoneType | AnyType) for o in options):
        return None

    # Exact matches win over text coercion: str | int keeps 5 as an int
    passes = (False, True) if lenient else (False,)
    for lenient_pass in passes:
        for option in options:
            try:
                return _decode(data, option, lenient=lenient_pass)
            except ConversionError:
                continue
    raise _mismatch(data, typedef)


def _decode_enum(
    data: Any,
    typedef: TypeDef,
    cls: type[Enum],
    *,
    lenient: bool,
) -> Enum:
    if isinstance(data, cls):
        return data
    try:
        return cls(data)
    except (ValueError, TypeError):
        if lenient and isinstance(data, str):
            for member in cls:
                if _encode_key(member.value) == data or member.name == data:
                    return member
    raise _mismatch(data, typedef)


def _decode_dataclass(
    data: Any,
    typedef: TypeDef,
    cls: type,
    *,
    lenient: bool,
) -> Any:
    if not isinstance(data, dict):
        raise _mismatch(data, typedef)

    try:
        hints = get_type_hints(cls)
    except NameError as e:
        msg = f"Cannot resolve field annotations of {cls.__name__}: {e}"
        raise UnsupportedTypeError(msg) from e

    kwargs: dict[str, Any] = {}
    for field in _public_fields(cls):
        if not field.init:
            continue
        if field.name in data:
            field_type = extract_type(hints.get(field.name, Any))
            kwargs[field.name] = _decode(data[field.name], field_type, lenient=lenient)
        elif field.default is MISSING and field.default_factory is MISSING:
            msg = f"Missing required field '{field.name}' for {cls.__name__}"
            raise ConversionError(msg)

    try:
        return cls(**kwargs)
    except (TypeError, ValueError) as e:
        msg = f"Cannot construct {cls.__name__}: {e}"
        raise ConversionError(msg) from e


def _public_fields(cls: type) -> list[Field[Any]]:
    """Dataclass fields carried on the wire: those without a leading underscore.

    Raises:
        UnsupportedTypeError: If a private field is required by __init__

    """
    public: list[Field[Any]] = []
    for f in fields(cls):
        if not f.name.startswith("_"):
            public.append(f)
        elif f.init and f.default is MISSING and f.default_factory is MISSING:
            msg = f"{cls.__name__} has required private field '{f.name}'"
            raise UnsupportedTypeError(msg)
    return public
