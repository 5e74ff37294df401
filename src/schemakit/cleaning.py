"""Value cleaning and parsing.

Cleaning normalizes loosely-typed input before validation: strings are
trimmed and blank strings become ``None`` so that required/nullable checks
treat them as absent. Lists and mappings are cleaned recursively, in place.

Parsing converts the strings of form payloads to the declared field type.
"""

import re
from collections.abc import Callable, MutableMapping
from typing import Any

from .types import ArrayOf, FieldType, Kind, Nested, Primitive

_TRUE = re.compile(r"^(?:1|true)$", re.IGNORECASE)


def clean_value(value: Any, clean_string: Callable[[str], Any] | None = None) -> Any:
    """Clean a single value.

    Args:
        value: The value to clean.
        clean_string: Optional replacement for whitespace trimming, applied to
            every string found in ``value``.

    Returns:
        The cleaned value. Lists and mutable mappings are modified in place
        and returned; tuples are rebuilt.
    """
    if value is None:
        return None

    if isinstance(value, str):
        cleaned = clean_string(value) if clean_string else value.strip()
        if isinstance(cleaned, str) and len(cleaned) == 0:
            return None
        return cleaned

    if isinstance(value, list):
        for i, item in enumerate(value):
            value[i] = clean_value(item, clean_string)
        return value

    if isinstance(value, tuple):
        return tuple(clean_value(item, clean_string) for item in value)

    if isinstance(value, MutableMapping):
        for key in list(value.keys()):
            value[key] = clean_value(value[key], clean_string)
        return value

    return value


def _parse_number(text: str) -> Any:
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            continue
    return text


def parse_value(
    value: Any,
    field_type: FieldType,
    parse: Callable[[str], Any] | None = None,
) -> Any:
    """Convert a value read from a form payload to its field type.

    Args:
        value: The value to parse.
        field_type: Resolved type of the field, or of a list element.
        parse: Optional field-level converter, applied to strings instead
            of the built-in Boolean and Number conversions.

    Returns:
        The parsed value. Lists and nested mappings are parsed in place.
    """
    if isinstance(field_type, ArrayOf):
        if isinstance(value, list):
            for i, item in enumerate(value):
                value[i] = parse_value(item, field_type.element, parse)
        elif isinstance(value, tuple):
            value = tuple(parse_value(item, field_type.element, parse) for item in value)
        return value

    if isinstance(field_type, Nested):
        if isinstance(value, MutableMapping):
            field_type.schema.parse(value)
        return value

    if not isinstance(value, str):
        return value
    if parse is not None:
        return parse(value)
    if isinstance(field_type, Primitive):
        if field_type.kind is Kind.BOOLEAN:
            return _TRUE.match(value) is not None
        if field_type.kind is Kind.NUMBER:
            return _parse_number(value)
    return value
