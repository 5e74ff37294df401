"""Pydantic models for schemakit.

This module contains the field specification model, validated once when a
schema is built, and the per-call validation options model.
"""

from __future__ import annotations

import logging
import numbers
import re
from collections.abc import Mapping
from datetime import date, time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from .errors import SchemaDefinitionError
from .patterns import FORMATS
from .types import ArrayOf, FieldType, Kind, Primitive, TypeResolutionError, resolve_type

logger = logging.getLogger(__name__)


class SchemaKitModel(BaseModel):
    """Base model for all schemakit Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable so they can be shared between
      concurrent validations
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


def _normalize_keys(model: type[BaseModel], data: Mapping[str, Any]) -> dict[str, Any]:
    """Translate camelCase aliases into field names."""
    aliases = {info.alias: name for name, info in model.model_fields.items() if info.alias}
    return {aliases.get(key, key): value for key, value in data.items()}


class ValidationOptions(SchemaKitModel):
    """Options for a single validation or cleaning call.

    Attributes:
        clean: Run the cleaning pass before validating.
        ignore_unknown: Do not reject keys that have no declared field.
        ignore_missing: Skip fields whose key is absent from the object.
        remove_unknown: Delete undeclared keys while cleaning.
        parse: Convert form-payload strings to the field types after cleaning.

    Example:
        >>> options = ValidationOptions(ignore_missing=True)
        >>> options = ValidationOptions.model_validate({"ignoreUnknown": True})
    """

    clean: bool = True
    ignore_unknown: bool = Field(default=False, alias="ignoreUnknown")
    ignore_missing: bool = Field(default=False, alias="ignoreMissing")
    remove_unknown: bool = Field(default=True, alias="removeUnknown")
    parse: bool = False

    @classmethod
    def build(
        cls, options: ValidationOptions | Mapping[str, Any] | None = None, **overrides: Any
    ) -> ValidationOptions:
        """Build options from a model, a mapping and/or keyword overrides."""
        if isinstance(options, ValidationOptions):
            if not overrides:
                return options
            data = options.model_dump()
        else:
            data = _normalize_keys(cls, options or {})
        data.update(_normalize_keys(cls, overrides))
        return cls.model_validate(data)


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Number) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class FieldSpec(SchemaKitModel):
    """Contract of a single schema field.

    Field specifications are usually written as plain dictionaries and turned
    into ``FieldSpec`` instances by :class:`~schemakit.schema.Schema`. Both
    snake_case names and the camelCase aliases (``minWords``, ``maxWords``,
    ``regEx``, ``defaultValue``) are accepted. Unknown keys are kept and
    reported with a warning.

    Constraint values (``allowed``, ``denied``, ``decimal``, ``length``,
    ``min``, ``max``, ``min_words``, ``max_words``, ``regex``, ``format``)
    may be zero-argument callables evaluated at validation time. ``required``,
    ``nullable``, ``label`` and ``default_value`` callables receive the object
    being validated.

    Attributes:
        name: Field name, set by the owning schema.
        label: Display name used in errors; defaults to ``name``.
        type: Declared type, see :mod:`schemakit.types`.
        required: Whether a value must be present.
        nullable: Whether ``None`` is an acceptable value.
        decimal: ``True`` for floats only, ``False`` for integers only.
        allowed: Values the field may take.
        denied: Values the field may not take.
        length: Exact length, or ``[min, max]`` with optional bounds.
        min: Lower bound (number, string or date).
        max: Upper bound (number, string or date).
        min_words: Minimum number of words in a string.
        max_words: Maximum number of words in a string.
        regex: Pattern the value must match.
        format: Name of a built-in format (see :data:`schemakit.patterns.FORMATS`).
        check: Custom predicate ``check(value, label, context)``.
        default_value: Value used when a required field is missing.
        prepare: ``prepare(value, context)`` applied before any check.
        clean: Replaces whitespace trimming for string values.
        parse: Converts string values when parsing is enabled, replacing the
            built-in Boolean and Number conversions.

    Example:
        >>> spec = FieldSpec(name="age", type=Number, min=0, max=120)
        >>> spec.label
        'age'
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    name: str = ""
    label: Any = None
    type: Any = None
    required: Any = True
    nullable: Any = False
    decimal: Any = None
    allowed: Any = None
    denied: Any = None
    length: Any = None
    min: Any = None
    max: Any = None
    min_words: Any = Field(default=None, alias="minWords")
    max_words: Any = Field(default=None, alias="maxWords")
    regex: Any = Field(default=None, alias="regEx")
    format: Any = None
    check: Any = None
    default_value: Any = Field(default=None, alias="defaultValue")
    prepare: Any = None
    clean: Any = None
    parse: Any = None

    _field_type: FieldType = PrivateAttr()

    @classmethod
    def from_props(cls, name: str, props: FieldSpec | Mapping[str, Any]) -> FieldSpec:
        """Create a field specification for ``name`` from raw properties."""
        if isinstance(props, FieldSpec):
            props = props.props()
        elif not isinstance(props, Mapping):
            raise SchemaDefinitionError(name, "properties must be a mapping")
        data = _normalize_keys(cls, props)
        data["name"] = name
        return cls.model_validate(data)

    @model_validator(mode="before")
    @classmethod
    def set_default_label(cls, values: Any) -> Any:
        """Default the label to the field name."""
        if isinstance(values, dict) and values.get("label") is None:
            values = {**values, "label": values.get("name", "")}
        return values

    @model_validator(mode="after")
    def check_properties(self) -> FieldSpec:
        """Check the shape of every property.

        Raises:
            SchemaDefinitionError: If a property has an unexpected shape.
        """
        name = self.name

        for key in self.model_extra or {}:
            logger.warning(f'Unknown schema field property "{name}.{key}"')

        try:
            self._field_type = resolve_type(self.type)
        except TypeResolutionError as e:
            raise SchemaDefinitionError(name, str(e)) from e

        for key in ("allowed", "denied"):
            value = getattr(self, key)
            if value is not None and not (
                isinstance(value, (list, tuple, set, frozenset)) or callable(value)
            ):
                raise SchemaDefinitionError(name, f"{key} must be a list or function")

        for key in ("check", "prepare", "clean", "parse"):
            value = getattr(self, key)
            if value is not None and not callable(value):
                raise SchemaDefinitionError(name, f"{key} must be a function")

        for key in ("required", "nullable"):
            value = getattr(self, key)
            if not isinstance(value, bool) and not callable(value):
                raise SchemaDefinitionError(name, f"{key} must be a boolean or function")

        if self.decimal is not None and not (
            isinstance(self.decimal, bool) or callable(self.decimal)
        ):
            raise SchemaDefinitionError(name, "decimal must be a boolean or function")

        if not isinstance(self.label, str) and not callable(self.label):
            raise SchemaDefinitionError(name, "label must be a string or function")

        length = self.length
        if isinstance(length, (list, tuple)):
            if len(length) > 2:
                raise SchemaDefinitionError(name, "length must only have 2 values [min, max]")
            if not all(bound is None or _is_int(bound) for bound in length):
                raise SchemaDefinitionError(name, "length bounds must be integers or None")
        elif length is not None and not (_is_int(length) or callable(length)):
            raise SchemaDefinitionError(
                name, "length must be a function, a number or a list [min, max]"
            )

        for key in ("min", "max"):
            value = getattr(self, key)
            if value is not None and not (
                _is_number(value)
                or isinstance(value, (str, date, time))
                or callable(value)
            ):
                raise SchemaDefinitionError(
                    name, f"{key} must be a date, number, string or function"
                )

        for key in ("min_words", "max_words"):
            value = getattr(self, key)
            if value is not None and not (_is_int(value) or callable(value)):
                raise SchemaDefinitionError(name, f"{key} must be a number or function")

        regex = self.regex
        if isinstance(regex, str):
            try:
                re.compile(regex)
            except re.error as e:
                raise SchemaDefinitionError(name, f"regex is not a valid pattern: {e}") from e
        elif regex is not None and not (isinstance(regex, re.Pattern) or callable(regex)):
            raise SchemaDefinitionError(name, "regex must be a regular expression or function")

        fmt = self.format
        if isinstance(fmt, str):
            if fmt not in FORMATS:
                raise SchemaDefinitionError(name, f"format '{fmt}' is not supported")
        elif fmt is not None and not callable(fmt):
            raise SchemaDefinitionError(name, "format must be a string or function")

        return self

    @property
    def field_type(self) -> FieldType:
        """The resolved type of this field."""
        return self._field_type

    @property
    def is_array(self) -> bool:
        ft = self._field_type
        return isinstance(ft, ArrayOf) or (
            isinstance(ft, Primitive) and ft.kind is Kind.ARRAY
        )

    def merge(self, props: Mapping[str, Any]) -> FieldSpec:
        """Return a new specification with ``props`` merged over this one."""
        return FieldSpec.from_props(
            self.name, {**self.props(), **_normalize_keys(FieldSpec, props)}
        )

    def props(self) -> dict[str, Any]:
        """Return the explicitly set properties, suitable for rebuilding the field."""
        result = {key: getattr(self, key) for key in self.model_fields_set if key != "name"}
        # A label equal to the name is the default and follows renames
        if result.get("label") == self.name:
            del result["label"]
        result.update(self.model_extra or {})
        return result
