"""Schema definition and object validation."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, MutableMapping
from typing import Any

from .checks import MISSING, validate_field
from .cleaning import clean_value, parse_value
from .errors import ErrorCode, InvalidPathError, SchemaDefinitionError, ValidationError
from .models import FieldSpec, ValidationOptions
from .paths import ArrayIndex, parse_path
from .types import ArrayOf, Nested

logger = logging.getLogger(__name__)


def _nested_schema(spec: FieldSpec) -> Schema | None:
    """Schema held by a nested or list-of-schema field."""
    field_type = spec.field_type
    if isinstance(field_type, ArrayOf):
        field_type = field_type.element
    if isinstance(field_type, Nested):
        return field_type.schema
    return None


def _copy_property(value: Any) -> Any:
    """Copy the structure of a field property.

    Nested schemas are cloned and containers rebuilt; callables, classes and
    compiled patterns are kept by reference.
    """
    if isinstance(value, Schema):
        return value.clone()
    if isinstance(value, list):
        return [_copy_property(item) for item in value]
    if isinstance(value, tuple):
        return tuple(_copy_property(item) for item in value)
    if isinstance(value, dict):
        return {key: _copy_property(item) for key, item in value.items()}
    return value


class Schema:
    """Declarative description of a valid object.

    A schema maps field names to field specifications. Specifications are
    checked when the schema is built, so a schema that constructs without
    error can be used for any number of validations, including concurrent
    ones, as long as it is not modified (``add_field``, ``extend``,
    ``update``) at the same time.

    Example:
        >>> from schemakit import Number, Schema, String
        >>> from schemakit.patterns import EMAIL
        >>>
        >>> address = Schema({"city": {"type": String}, "zip": {"type": String, "length": 5}})
        >>> user = Schema({
        ...     "name": {"type": String, "length": [1, 50]},
        ...     "email": {"type": String, "regex": EMAIL},
        ...     "age": {"type": Number, "decimal": False, "min": 0, "required": False},
        ...     "address": {"type": address},
        ...     "tags": {"type": [String], "required": False},
        ... })
        >>> user.validate({"name": " Alice ", "email": "alice@example.com",
        ...                "address": {"city": "Paris", "zip": "75001"}})
    """

    def __init__(self, fields: Mapping[str, Any] | None = None):
        """Build a schema.

        Args:
            fields: Mapping of field name to field properties (a dict or a
                :class:`FieldSpec`).

        Raises:
            SchemaDefinitionError: If a field specification is malformed.
        """
        self._fields: dict[str, FieldSpec] = {}

        if fields is None:
            return
        if not isinstance(fields, Mapping):
            raise SchemaDefinitionError("", "Schema fields must be a mapping")
        for name, props in fields.items():
            self.add_field(name, props)

    def __repr__(self) -> str:
        return f"Schema({list(self._fields)})"

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def add_field(self, name: str, props: FieldSpec | Mapping[str, Any]) -> FieldSpec:
        """Add or replace a field."""
        spec = FieldSpec.from_props(name, props)
        self._fields[name] = spec
        return spec

    def get_fields(self) -> dict[str, FieldSpec]:
        """Return the fields in declaration order."""
        return dict(self._fields)

    def get_field(self, name: str) -> FieldSpec | None:
        """Return a field by name or bracketed path, see :meth:`resolve_field`."""
        return self.resolve_field(name)

    def clone(self) -> Schema:
        """Return an independent copy of the schema, nested schemas included.

        Functions (producers, checks, bound methods) are shared with the
        copy, so they keep reading live state.
        """
        return Schema({name: _copy_property(spec.props()) for name, spec in self._fields.items()})

    def extend(self, parent: Schema) -> Schema:
        """Add the fields of ``parent`` that are not declared on this schema.

        Fields already declared here are never overwritten.

        Returns:
            This schema.

        Raises:
            TypeError: If ``parent`` is not a Schema.
        """
        if not isinstance(parent, Schema):
            raise TypeError(f"Cannot extend a schema with {type(parent).__name__}")

        for name, spec in parent.clone()._fields.items():
            if name not in self._fields:
                self._fields[name] = spec
        return self

    def pick(self, field_names: Iterable[str]) -> Schema:
        """Return a new schema with only the given fields.

        Names that are not declared are ignored.
        """
        return Schema({name: self._fields[name] for name in field_names if name in self._fields})

    def _locate(self, path: str) -> tuple[Schema, str] | None:
        """Find the schema owning the field addressed by ``path``.

        Returns:
            ``(owner, field_name)``, or None if a segment names no field.
        """
        schema = self
        owner: Schema | None = None
        name = ""
        spec: FieldSpec | None = None

        for token in parse_path(path):
            if isinstance(token, ArrayIndex):
                if spec is None or not spec.is_array:
                    raise InvalidPathError(
                        path, f"Index [{token.index}] does not follow a list field"
                    )
                continue

            if spec is not None:
                nested = _nested_schema(spec)
                if nested is None:
                    raise InvalidPathError(path, f'Field "{name}" has no sub fields')
                schema = nested

            spec = schema._fields.get(token.name)
            if spec is None:
                return None
            owner, name = schema, token.name

        if owner is None:
            raise InvalidPathError(path, "No field name")
        return owner, name

    def resolve_field(self, path: str) -> FieldSpec | None:
        """Return the field addressed by a bracketed path.

        Args:
            path: A field name or a path such as ``"address[city]"``,
                ``"[address][city]"`` or ``"items[0][price]"``; numeric
                segments step into the schema of a list field.

        Returns:
            The field specification, or None if no such field is declared.

        Raises:
            InvalidPathError: If the path is malformed or descends into a
                field that has no nested schema.
        """
        location = self._locate(path)
        if location is None:
            return None
        owner, name = location
        return owner._fields[name]

    def update(self, path: str, props: Mapping[str, Any]) -> Schema:
        """Merge properties into an existing field, possibly a nested one.

        Returns:
            This schema.

        Raises:
            InvalidPathError: If the path does not address a declared field.
            SchemaDefinitionError: If the merged specification is malformed.
        """
        location = self._locate(path)
        if location is None:
            raise InvalidPathError(path, "Unknown field")
        owner, name = location
        owner._fields[name] = owner._fields[name].merge(props)
        return self

    def remove_unknown_fields(self, obj: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Delete keys that have no declared field, nested objects included."""
        for key in list(obj.keys()):
            spec = self._fields.get(key)
            if spec is None:
                logger.debug(f'Removing unknown field "{key}"')
                del obj[key]
                continue

            nested = _nested_schema(spec)
            if nested is None:
                continue
            value = obj[key]
            items = value if isinstance(value, (list, tuple)) else [value]
            for item in items:
                if isinstance(item, MutableMapping):
                    nested.remove_unknown_fields(item)
        return obj

    def parse(self, obj: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
        """Convert string values of declared fields to the field type, in place.

        Form payloads carry every value as a string. Boolean fields read
        ``"1"`` and ``"true"`` (any case) as True and any other string as
        False; Number fields read integer and float literals. A field's
        ``parse`` function, when set, is used instead. Nested objects and
        list elements are parsed with their own schema or element type.
        Strings that cannot be converted are left for the type check.

        Returns:
            The parsed object.
        """
        if not isinstance(obj, MutableMapping):
            return obj

        for name, spec in self._fields.items():
            if name in obj:
                obj[name] = parse_value(obj[name], spec.field_type, spec.parse)
        return obj

    def clean(
        self,
        obj: MutableMapping[str, Any],
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> MutableMapping[str, Any]:
        """Clean an object in place.

        Strings of declared fields are trimmed (or passed to the field's
        ``clean`` function) and blank strings become None, recursively
        through lists and mappings. Undeclared keys are deleted unless
        ``remove_unknown`` is False. Read-only mappings are returned as is.

        Returns:
            The cleaned object.
        """
        opts = ValidationOptions.build(options, **overrides)

        if not isinstance(obj, MutableMapping):
            return obj

        for key in list(obj.keys()):
            spec = self._fields.get(key)
            if spec is not None:
                obj[key] = clean_value(obj[key], spec.clean)
            elif opts.remove_unknown:
                logger.debug(f'Removing unknown field "{key}"')
                del obj[key]
        return obj

    def validate(
        self,
        obj: Mapping[str, Any],
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        """Validate an object against the schema.

        The object is cleaned in place first (unless ``clean`` is False), then
        parsed when ``parse`` is True. Values produced by ``prepare`` or
        ``default_value`` are written back to it.

        Args:
            obj: The object to validate.
            options: Validation options, as a model or a mapping.
            **overrides: Individual options, e.g. ``ignore_missing=True``.

        Raises:
            ValidationError: On the first violated constraint.
        """
        opts = ValidationOptions.build(options, **overrides)

        if not isinstance(obj, Mapping):
            raise ValidationError(
                ErrorCode.OBJECT_INVALID,
                f"Cannot validate {type(obj).__name__}, expected an object.",
                {"type": type(obj).__name__},
            )

        if not opts.ignore_unknown:
            for key in obj:
                if key not in self._fields:
                    raise ValidationError(
                        ErrorCode.FIELD_UNKNOWN, f'The field "{key}" is unknown.', {"field": key}
                    )

        if opts.clean:
            self.clean(obj, opts)
        if opts.parse:
            self.parse(obj)

        context = obj
        for name, spec in self._fields.items():
            value = obj.get(name, MISSING)
            if value is MISSING and opts.ignore_missing:
                continue

            result = validate_field(spec, value, opts, context)
            if result is not value and result is not MISSING and isinstance(obj, MutableMapping):
                obj[name] = result

    def is_valid(
        self,
        obj: Any,
        options: ValidationOptions | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> bool:
        """Return True if ``obj`` validates, False otherwise. Never raises."""
        try:
            self.validate(obj, options, **overrides)
        except ValidationError:
            return False
        except Exception as e:
            logger.warning(f"Unexpected error while validating object: {e}")
            return False
        return True
