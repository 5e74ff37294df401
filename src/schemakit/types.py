"""Field type markers and the resolved field-type variant.

A field's declared ``type`` is written with plain Python objects::

    {"type": String}          # primitive marker (String is str)
    {"type": ChildSchema}     # nested schema
    {"type": [String]}        # list of primitives
    {"type": [ChildSchema]}   # list of nested objects
    {"type": Decimal}         # any other class, checked with isinstance

At construction time the declaration is resolved into one of four frozen
variants (:class:`Primitive`, :class:`Nested`, :class:`ArrayOf`,
:class:`Instance`) so the validation engine can dispatch on them without
inspecting the raw declaration again.
"""

from __future__ import annotations

import math
import numbers
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from .schema import Schema

# Primitive markers
Array = list
Boolean = bool
Function = Callable
Number = numbers.Number
Object = dict
String = str


class Kind(Enum):
    """Primitive value kinds."""

    ARRAY = "array"
    BOOLEAN = "boolean"
    FUNCTION = "function"
    NUMBER = "number"
    OBJECT = "object"
    STRING = "string"


_MARKERS: dict[Any, Kind] = {
    Array: Kind.ARRAY,
    Boolean: Kind.BOOLEAN,
    Function: Kind.FUNCTION,
    Number: Kind.NUMBER,
    Object: Kind.OBJECT,
    String: Kind.STRING,
}


@dataclass(frozen=True)
class Primitive:
    kind: Kind


@dataclass(frozen=True)
class Nested:
    schema: Schema


@dataclass(frozen=True)
class Instance:
    cls: type


@dataclass(frozen=True)
class ArrayOf:
    element: Primitive | Nested | Instance


FieldType = Union[Primitive, Nested, ArrayOf, Instance]


class TypeResolutionError(TypeError):
    """Raised by :func:`resolve_type` for unusable declarations."""


def _resolve_scalar(declared: Any) -> Primitive | Nested | Instance | None:
    from .schema import Schema

    if isinstance(declared, Schema):
        return Nested(declared)
    try:
        kind = _MARKERS.get(declared)
    except TypeError:
        # Unhashable declarations are never markers
        kind = None
    if kind is not None:
        return Primitive(kind)
    if isinstance(declared, type):
        return Instance(declared)
    return None


def resolve_type(declared: Any) -> FieldType:
    """Resolve a declared field type into its variant.

    Args:
        declared: The raw ``type`` value of a field specification.

    Returns:
        The resolved :data:`FieldType`.

    Raises:
        TypeResolutionError: If the declaration is not a marker, a class,
            a Schema, or a single-element list wrapping one of those.
    """
    if declared is None:
        raise TypeResolutionError("type is missing")

    if isinstance(declared, (list, tuple)):
        if len(declared) != 1:
            raise TypeResolutionError("type[] must contain exactly one element type")
        element = _resolve_scalar(declared[0])
        if element is None:
            raise TypeResolutionError("type[] must contain a class or a schema")
        return ArrayOf(element)

    resolved = _resolve_scalar(declared)
    if resolved is None:
        raise TypeResolutionError(f"type = {declared!r} is not a valid type")
    return resolved


def is_kind(value: Any, kind: Kind) -> bool:
    """Check that ``value`` has the given primitive kind, without coercion."""
    if kind is Kind.ARRAY:
        return isinstance(value, (list, tuple))
    if kind is Kind.BOOLEAN:
        return isinstance(value, bool)
    if kind is Kind.FUNCTION:
        return callable(value)
    if kind is Kind.NUMBER:
        return isinstance(value, numbers.Number) and not isinstance(value, bool)
    if kind is Kind.OBJECT:
        return isinstance(value, Mapping)
    if kind is Kind.STRING:
        return isinstance(value, str)
    return False


def is_nan(value: Any) -> bool:
    if isinstance(value, float):
        return math.isnan(value)
    # NaN is the only number not equal to itself (Decimal("NaN"), numpy.nan, ...)
    return isinstance(value, numbers.Number) and value != value


def type_name(field_type: FieldType) -> str:
    """Human-readable name of a resolved type, used in error messages."""
    if isinstance(field_type, Primitive):
        return field_type.kind.value
    if isinstance(field_type, Nested):
        return "object"
    if isinstance(field_type, Instance):
        return field_type.cls.__name__
    return f"array of {type_name(field_type.element)}"
