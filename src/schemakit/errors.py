"""Error types for schemakit.

Validation failures are reported through a single exception class,
:class:`ValidationError`, which carries a machine-readable reason code from
the closed :class:`ErrorCode` enumeration, a human-readable message and a
context dictionary describing the offending field.

Problems with the schema itself are detected when the schema is built and
reported with :class:`SchemaDefinitionError`.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Reason codes attached to every :class:`ValidationError`."""

    FIELD_ALLOWED = "field-allowed"
    FIELD_DENIED = "field-denied"
    FIELD_FORMAT = "field-format"
    FIELD_INVALID = "field-invalid"
    FIELD_LENGTH = "field-length"
    FIELD_MAX = "field-max"
    FIELD_MAX_LENGTH = "field-max-length"
    FIELD_MAX_WORDS = "field-max-words"
    FIELD_MIN = "field-min"
    FIELD_MIN_LENGTH = "field-min-length"
    FIELD_MIN_WORDS = "field-min-words"
    FIELD_NULLABLE = "field-nullable"
    FIELD_PATTERN = "field-pattern"
    FIELD_REQUIRED = "field-required"
    FIELD_TYPE = "field-type"
    FIELD_UNKNOWN = "field-unknown"
    OBJECT_INVALID = "object-invalid"


class ValidationError(ValueError):
    """Raised when an object does not satisfy its schema.

    Attributes:
        reason: The :class:`ErrorCode` describing the violation.
        message: Human-readable description.
        context: Details about the violation. Field errors always include
            ``field`` (the field label); other keys depend on the reason,
            e.g. ``min``, ``max``, ``length``, ``allowed``, ``pattern``.

    Example:
        >>> try:
        ...     schema.validate({"age": 130})
        ... except ValidationError as e:
        ...     print(e.reason, e.context)
        ErrorCode.FIELD_MAX {'field': 'age', 'max': 120}
    """

    def __init__(
        self, reason: ErrorCode, message: str, context: dict[str, Any] | None = None
    ):
        self.reason = reason
        self.message = message
        self.context = context or {}
        super().__init__(message)

    @property
    def field(self) -> Any:
        """Label of the offending field, if any."""
        return self.context.get("field")

    def __repr__(self) -> str:
        return f"ValidationError({self.reason.value!r}, {self.message!r})"


class SchemaDefinitionError(TypeError):
    """Raised when a field specification is malformed."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}.{message}" if field else message)


class InvalidPathError(ValueError):
    """Raised when a bracketed field path cannot be parsed or resolved."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{message} in '{path}'")
