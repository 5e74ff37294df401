"""Per-field validation.

:func:`validate_field` applies the constraints of a :class:`FieldSpec` to a
single value, in a fixed order:

presence -> type -> allowed/denied -> length -> min -> min words -> max ->
max words -> format -> pattern -> custom check

and raises a :class:`ValidationError` on the first violation. Each check
after the type check relies on the value having passed it.
"""

from __future__ import annotations

import logging
import operator
import re
from collections.abc import Callable, Mapping, Sized
from decimal import Decimal
from typing import TYPE_CHECKING, Any, NoReturn

from .errors import ErrorCode, ValidationError
from .patterns import FORMATS
from .types import (
    ArrayOf,
    Instance,
    Kind,
    Nested,
    Primitive,
    is_kind,
    is_nan,
    type_name,
)

if TYPE_CHECKING:
    from .models import FieldSpec, ValidationOptions

logger = logging.getLogger(__name__)

_FLOAT = re.compile(r"^[+-]?[0-9]+\.[0-9]+$")
_INTEGER = re.compile(r"^[+-]?[0-9]+$")


class _Missing:
    """Marker for a key absent from the validated object."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def compute(value: Any, *args: Any) -> Any:
    """Resolve a constraint that may be given as a function."""
    if callable(value):
        return value(*args)
    return value


def _fail(reason: ErrorCode, message: str, label: Any, **context: Any) -> NoReturn:
    logger.debug(f"Field '{label}' failed with {reason.value}: {message}")
    raise ValidationError(reason, message, {"field": label, **context})


def _contains(collection: Any, value: Any) -> bool:
    # True == 1 in Python; booleans only match booleans
    return any(
        item == value and isinstance(item, bool) is isinstance(value, bool)
        for item in collection
    )


def _compare(value: Any, bound: Any, op: Callable[[Any, Any], bool], label: Any) -> bool:
    try:
        return op(value, bound)
    except TypeError:
        _fail(
            ErrorCode.FIELD_TYPE,
            f'The field "{label}" cannot be compared with {bound!r}.',
            label,
            type=type(bound).__name__,
        )


def _nested_options(options: ValidationOptions) -> ValidationOptions:
    # Nested objects are parsed along with their parent
    if options.parse:
        return options.model_copy(update={"parse": False})
    return options


def _check_number(spec: FieldSpec, value: Any, label: Any) -> None:
    if is_nan(value):
        _fail(ErrorCode.FIELD_TYPE, f'The field "{label}" is not a number.', label, type="number")

    if spec.decimal is None:
        return
    decimal = compute(spec.decimal)
    text = str(value)
    if isinstance(value, (float, Decimal)):
        # Positional notation, str() writes 1e-05 and 1e+16 in exponent form
        text = format(Decimal(text), "f")
    if decimal is True and not _FLOAT.match(text):
        _fail(ErrorCode.FIELD_TYPE, f'The field "{label}" is not a float.', label, type="float")
    if decimal is False and not _INTEGER.match(text):
        _fail(
            ErrorCode.FIELD_TYPE, f'The field "{label}" is not an integer.', label, type="integer"
        )


def _check_elements(
    element: Primitive | Nested | Instance,
    items: Any,
    label: Any,
    options: ValidationOptions,
) -> None:
    for index, item in enumerate(items):
        if isinstance(element, Nested):
            valid = isinstance(item, Mapping)
        elif isinstance(element, Primitive):
            valid = is_kind(item, element.kind) and not (
                element.kind is Kind.NUMBER and is_nan(item)
            )
        else:
            valid = isinstance(item, element.cls)

        if not valid:
            _fail(
                ErrorCode.FIELD_TYPE,
                f'The field "{label}" contains values of incorrect type '
                f"(expected {type_name(element)} at index {index}).",
                label,
                type=type_name(element),
                index=index,
            )
        if isinstance(element, Nested):
            element.schema.validate(item, _nested_options(options))


def _check_type(
    spec: FieldSpec, value: Any, label: Any, required: bool, options: ValidationOptions
) -> bool:
    """Check the value against the declared type.

    Returns:
        False when the remaining checks must be skipped (empty list on a
        field that is not required), True otherwise.
    """
    field_type = spec.field_type

    if isinstance(field_type, Primitive):
        if not is_kind(value, field_type.kind):
            _fail(
                ErrorCode.FIELD_TYPE,
                f'The field "{label}" is not of type {field_type.kind.value}.',
                label,
                type=field_type.kind.value,
            )
        if field_type.kind is Kind.NUMBER:
            _check_number(spec, value, label)
        elif field_type.kind is Kind.ARRAY and len(value) == 0 and not required:
            return False

    elif isinstance(field_type, Nested):
        if not isinstance(value, Mapping):
            _fail(
                ErrorCode.FIELD_TYPE,
                f'The field "{label}" is not of type object.',
                label,
                type="object",
            )
        field_type.schema.validate(value, _nested_options(options))

    elif isinstance(field_type, ArrayOf):
        if not is_kind(value, Kind.ARRAY):
            _fail(
                ErrorCode.FIELD_TYPE,
                f'The field "{label}" is not of type array.',
                label,
                type="array",
            )
        if len(value) == 0 and not required:
            return False
        _check_elements(field_type.element, value, label, options)

    elif isinstance(field_type, Instance):
        if not isinstance(value, field_type.cls):
            _fail(
                ErrorCode.FIELD_TYPE,
                f'The field "{label}" is not an instance of {field_type.cls.__name__}.',
                label,
                type=field_type.cls.__name__,
            )

    return True


def _check_values(spec: FieldSpec, value: Any, label: Any) -> None:
    items = value if isinstance(value, (list, tuple)) else [value]

    if spec.allowed is not None:
        allowed = compute(spec.allowed)
        for item in items:
            if not _contains(allowed, item):
                _fail(
                    ErrorCode.FIELD_ALLOWED,
                    f'The field "{label}" must contain an allowed value ({allowed}).',
                    label,
                    allowed=allowed,
                )
    elif spec.denied is not None:
        denied = compute(spec.denied)
        for item in items:
            if _contains(denied, item):
                _fail(
                    ErrorCode.FIELD_DENIED,
                    f'The field "{label}" contains a denied value ({denied}).',
                    label,
                    denied=denied,
                )


def _check_length(spec: FieldSpec, value: Any, label: Any) -> None:
    if spec.length is None or not isinstance(value, Sized):
        return
    length = compute(spec.length)
    size = len(value)

    if isinstance(length, (list, tuple)):
        min_length = length[0] if len(length) > 0 else None
        max_length = length[1] if len(length) > 1 else None
        if min_length is not None and size < min_length:
            _fail(
                ErrorCode.FIELD_MIN_LENGTH,
                f'The field "{label}" must have a length greater than or equal to {min_length}.',
                label,
                min_length=min_length,
            )
        if max_length is not None and size > max_length:
            _fail(
                ErrorCode.FIELD_MAX_LENGTH,
                f'The field "{label}" must have a length lesser than or equal to {max_length}.',
                label,
                max_length=max_length,
            )
    elif size != length:
        _fail(
            ErrorCode.FIELD_LENGTH,
            f'The field "{label}" must have a length of {length}.',
            label,
            length=length,
        )


def _check_format(spec: FieldSpec, value: Any, label: Any) -> None:
    fmt = compute(spec.format)
    validator = FORMATS.get(fmt) if isinstance(fmt, str) else None
    if validator is None:
        _fail(
            ErrorCode.FIELD_FORMAT,
            f'The field "{label}" uses an unsupported format ({fmt}).',
            label,
            format=fmt,
        )
    if not validator(value):
        _fail(
            ErrorCode.FIELD_FORMAT,
            f'The field "{label}" does not match format ({fmt}).',
            label,
            format=fmt,
        )


def _check_pattern(spec: FieldSpec, value: Any, label: Any) -> None:
    pattern = compute(spec.regex)
    if isinstance(pattern, str):
        pattern = re.compile(pattern)
    if not pattern.search(str(value)):
        _fail(
            ErrorCode.FIELD_PATTERN,
            f'The field "{label}" does not match the pattern "{pattern.pattern}".',
            label,
            pattern=pattern.pattern,
        )


def validate_field(
    spec: FieldSpec,
    value: Any,
    options: ValidationOptions,
    context: Mapping[str, Any],
) -> Any:
    """Validate one value against its field specification.

    Args:
        spec: The field specification.
        value: The value to check, or :data:`MISSING` if the key is absent.
        options: Options of the current validation call.
        context: The object being validated, passed to dynamic ``required``,
            ``nullable``, ``label``, ``default_value``, ``prepare`` and
            ``check`` functions.

    Returns:
        The value after ``prepare`` and ``default_value`` were applied.

    Raises:
        ValidationError: On the first violated constraint.
    """
    label = compute(spec.label, context)

    if spec.prepare is not None:
        prepared = spec.prepare(None if value is MISSING else value, context)
        if not (value is MISSING and prepared is None):
            value = prepared

    required = bool(compute(spec.required, context))
    nullable = bool(compute(spec.nullable, context))

    if value is MISSING or value is None:
        if required and spec.default_value is not None:
            value = compute(spec.default_value, context)

    if value is MISSING or value is None:
        if required and not nullable:
            _fail(ErrorCode.FIELD_REQUIRED, f'The field "{label}" is required.', label)
        return value

    if not _check_type(spec, value, label, required, options):
        return value

    _check_values(spec, value, label)
    _check_length(spec, value, label)

    if spec.min is not None:
        minimum = compute(spec.min)
        if _compare(value, minimum, operator.lt, label):
            _fail(
                ErrorCode.FIELD_MIN,
                f'The field "{label}" must be greater than or equal to {minimum}.',
                label,
                min=minimum,
            )

    if spec.min_words is not None and isinstance(value, str):
        min_words = compute(spec.min_words)
        if len(value.split()) < min_words:
            _fail(
                ErrorCode.FIELD_MIN_WORDS,
                f'The field "{label}" must contain at least {min_words} words.',
                label,
                min_words=min_words,
            )

    if spec.max is not None:
        maximum = compute(spec.max)
        if _compare(value, maximum, operator.gt, label):
            _fail(
                ErrorCode.FIELD_MAX,
                f'The field "{label}" must be lesser than or equal to {maximum}.',
                label,
                max=maximum,
            )

    if spec.max_words is not None and isinstance(value, str):
        max_words = compute(spec.max_words)
        if len(value.split()) > max_words:
            _fail(
                ErrorCode.FIELD_MAX_WORDS,
                f'The field "{label}" must not contain more than {max_words} words.',
                label,
                max_words=max_words,
            )

    if spec.format is not None and isinstance(value, str):
        _check_format(spec, value, label)

    if spec.regex is not None:
        _check_pattern(spec, value, label)

    # Only an explicit False fails; other falsy results pass
    if spec.check is not None and spec.check(value, label, context) is False:
        _fail(ErrorCode.FIELD_INVALID, f'The field "{label}" is not valid.', label)

    return value
