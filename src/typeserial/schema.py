"""Type reflection: Python annotations to TypeDef."""

from __future__ import annotations

import datetime
import types
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from collections.abc import MutableSet as AbstractMutableSet
from collections.abc import Set as AbstractSet
from dataclasses import is_dataclass
from decimal import Decimal
from enum import Enum
from typing import (
    Annotated,
    Any,
    Literal,
    TypeAliasType,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from typeserial.errors import UnsupportedTypeError
from typeserial.registry import TypeCodecs
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
    substitute_type_params,
)

_SCALARS: dict[Any, TypeDef] = {
    int: IntType(),
    float: FloatType(),
    str: StrType(),
    bool: BoolType(),
    type(None): NoneType(),
    None: NoneType(),
    bytes: BytesType(),
    Decimal: DecimalType(),
    datetime.date: DateType(),
    datetime.time: TimeType(),
    datetime.datetime: DateTimeType(),
    datetime.timedelta: DurationType(),
}


def extract_type(py_type: Any) -> TypeDef:
    """Convert a Python type annotation to a TypeDef.

    Bare containers (list, dict, tuple, ...) are treated as containers of Any.

    Raises:
        UnsupportedTypeError: If the annotation has no TypeDef counterpart

    """
    if isinstance(py_type, TypeDef):
        return py_type

    if py_type is Any or py_type is object:
        return AnyType()

    if isinstance(py_type, TypeVar):
        bound = py_type.__bound__
        return extract_type(bound) if bound is not None else AnyType()

    # PEP 695 alias without parameters: type Alias = list[int]
    if isinstance(py_type, TypeAliasType):
        return extract_type(py_type.__value__)

    origin = get_origin(py_type)
    args = get_args(py_type)

    # Expand generic PEP 695 type aliases
    if isinstance(origin, TypeAliasType):
        type_params = origin.__type_params__
        if len(type_params) != len(args):
            msg = (
                f"Type alias {origin.__name__} expects {len(type_params)} "
                f"arguments but got {len(args)}"
            )
            raise UnsupportedTypeError(msg)
        substitutions = dict(zip(type_params, args, strict=True))
        substituted = substitute_type_params(origin.__value__, substitutions)
        return extract_type(substituted)

    if origin is Annotated:
        return extract_type(args[0])

    if (scalar := _lookup_scalar(py_type)) is not None:
        return scalar

    if origin is Literal:
        for val in args:
            if val is not None and not isinstance(val, str | int | bool):
                msg = f"Literal values must be str, int, bool or None, got {type(val)}"
                raise UnsupportedTypeError(msg)
        return LiteralType(values=args)

    if isinstance(py_type, types.UnionType) or origin is Union:
        return UnionType(tuple(extract_type(a) for a in args))

    if origin is tuple or py_type is tuple:
        if not args:
            return VarTupleType(element=AnyType())
        if len(args) == 2 and args[1] is Ellipsis:  # noqa: PLR2004
            return VarTupleType(element=extract_type(args[0]))
        return TupleType(elements=tuple(extract_type(arg) for arg in args))

    container = origin if origin is not None else py_type

    if container is list or container is MutableSequence:
        return ListType(element=_element(args))
    if container is Sequence:
        return SequenceType(element=_element(args))
    if container is set or container is AbstractMutableSet:
        return SetType(element=_element(args))
    if container is frozenset:
        return FrozenSetType(element=_element(args))
    if container is AbstractSet:
        return AbstractSetType(element=_element(args))
    if container is dict or container is MutableMapping:
        key, value = _key_value(args)
        return DictType(key=key, value=value)
    if container is Mapping:
        key, value = _key_value(args)
        return MappingType(key=key, value=value)

    if isinstance(py_type, type):
        # Registered codecs take precedence, matching to_builtins
        if TypeCodecs.get(py_type) is not None:
            return TypeCodecs.get_external_type(py_type)
        if issubclass(py_type, Enum):
            return EnumType(cls=py_type)
        if is_dataclass(py_type):
            return DataclassType(cls=py_type)

    msg = f"Cannot extract type from: {py_type!r}"
    raise UnsupportedTypeError(msg)


def _lookup_scalar(py_type: Any) -> TypeDef | None:
    try:
        return _SCALARS.get(py_type)
    except TypeError:
        # Unhashable annotation objects are never scalars
        return None


def _element(args: tuple[Any, ...]) -> TypeDef:
    return extract_type(args[0]) if args else AnyType()


def _key_value(args: tuple[Any, ...]) -> tuple[TypeDef, TypeDef]:
    if not args:
        return AnyType(), AnyType()
    if len(args) != 2:  # noqa: PLR2004
        msg = f"Mapping type must have key and value types, got {args!r}"
        raise UnsupportedTypeError(msg)
    return extract_type(args[0]), extract_type(args[1])
