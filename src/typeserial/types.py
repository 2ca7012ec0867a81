"""Runtime description of deserialization target types."""

from __future__ import annotations

import types
from dataclasses import dataclass
from enum import Enum
from typing import (
    Any,
    ClassVar,
    dataclass_transform,
    get_args,
    get_origin,
)


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class TypeDef:
    """Base for type definitions."""

    tag: ClassVar[str]

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Turn subclass into a frozen dataclass with a derived tag."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower()


class AnyType(TypeDef, tag="any"):
    """Unconstrained type: decoded builtins are returned as-is."""


class IntType(TypeDef, tag="int"):
    """Integer type."""


class FloatType(TypeDef, tag="float"):
    """Floating point type."""


class StrType(TypeDef, tag="str"):
    """String type."""


class BoolType(TypeDef, tag="bool"):
    """Boolean type."""


class NoneType(TypeDef, tag="none"):
    """None/null type."""


class BytesType(TypeDef, tag="bytes"):
    """Binary data type."""


class DecimalType(TypeDef, tag="decimal"):
    """Arbitrary precision decimal type."""


# Temporal types
class DateType(TypeDef, tag="date"):
    """Date type (year, month, day)."""


class TimeType(TypeDef, tag="time"):
    """Time type (hour, minute, second, microsecond)."""


class DateTimeType(TypeDef, tag="datetime"):
    """DateTime type (combined date and time)."""


class DurationType(TypeDef, tag="duration"):
    """Duration/timedelta type."""


class ListType(TypeDef, tag="list"):
    """List type: list[int] → ListType(element=IntType())."""

    element: TypeDef


class DictType(TypeDef, tag="dict"):
    """Dict type: dict[str, int] → DictType(key=StrType(), value=IntType())."""

    key: TypeDef
    value: TypeDef


class SetType(TypeDef, tag="set"):
    """Set type: set[int] → SetType(element=IntType())."""

    element: TypeDef


class FrozenSetType(TypeDef, tag="frozenset"):
    """Immutable set type: frozenset[int] → FrozenSetType(element=IntType())."""

    element: TypeDef


class TupleType(TypeDef, tag="tuple"):
    """Fixed-length tuple: tuple[int, str] → TupleType(elements=(...))."""

    elements: tuple[TypeDef, ...]


class VarTupleType(TypeDef, tag="vartuple"):
    """Homogeneous tuple: tuple[int, ...] → VarTupleType(element=IntType())."""

    element: TypeDef


# Abstract containers, decoded to their concrete builtin counterparts
class SequenceType(TypeDef, tag="sequence"):
    """Generic sequence type: Sequence[int] → SequenceType(element=IntType())."""

    element: TypeDef


class MappingType(TypeDef, tag="mapping"):
    """Generic mapping type.

    Mapping[str, int] -> MappingType(key=StrType(), value=IntType()).
    """

    key: TypeDef
    value: TypeDef


class AbstractSetType(TypeDef, tag="abstractset"):
    """Generic set type: collections.abc.Set[int] → AbstractSetType(IntType())."""

    element: TypeDef


class LiteralType(TypeDef, tag="literal"):
    """Literal enumeration: Literal["a", "b"] → LiteralType(values=("a", "b"))."""

    values: tuple[str | int | bool | None, ...]


class UnionType(TypeDef, tag="union"):
    """Union type: int | str → UnionType(options=(IntType(), StrType()))."""

    options: tuple[TypeDef, ...]


class EnumType(TypeDef, tag="enum"):
    """Enum subclass, encoded by member value."""

    cls: type[Enum]


class DataclassType(TypeDef, tag="dataclass"):
    """Dataclass, encoded as a mapping of its public fields."""

    cls: type


class ExternalType(TypeDef, tag="external"):
    """Registered external type, identified by module path and class name."""

    module: str
    name: str


def type_name(typedef: TypeDef) -> str:
    """Human-readable name of a TypeDef, used in error messages."""
    match typedef:
        case ListType(element=e) | SetType(element=e) | FrozenSetType(element=e):
            return f"{typedef.tag}[{type_name(e)}]"
        case SequenceType(element=e) | AbstractSetType(element=e):
            return f"{typedef.tag}[{type_name(e)}]"
        case VarTupleType(element=e):
            return f"tuple[{type_name(e)}, ...]"
        case DictType(key=k, value=v) | MappingType(key=k, value=v):
            return f"{typedef.tag}[{type_name(k)}, {type_name(v)}]"
        case TupleType(elements=elements):
            return f"tuple[{', '.join(type_name(e) for e in elements)}]"
        case UnionType(options=options):
            return " | ".join(type_name(o) for o in options)
        case LiteralType(values=values):
            return f"Literal[{', '.join(repr(v) for v in values)}]"
        case EnumType(cls=cls) | DataclassType(cls=cls):
            return cls.__name__
        case ExternalType(name=name):
            return name
        case _:
            return typedef.tag


def substitute_type_params(type_expr: Any, substitutions: dict[Any, Any]) -> Any:
    """Recursively substitute type parameters in a type expression."""
    if type_expr in substitutions:
        return substitutions[type_expr]

    origin = get_origin(type_expr)
    args = get_args(type_expr)

    if origin is None or not args:
        return type_expr

    new_args = tuple(substitute_type_params(arg, substitutions) for arg in args)

    # UnionType (| operator) needs special reconstruction
    if isinstance(type_expr, types.UnionType):
        result = new_args[0]
        for arg in new_args[1:]:
            result = result | arg
        return result

    return origin[new_args]
