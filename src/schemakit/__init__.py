"""schemakit - declarative validation and cleaning of loosely-typed objects.

This package validates and normalizes data objects (parsed JSON, form
payloads) against a schema before they are persisted or processed further:

- Field types: primitives, nested schemas, lists of either, any class
- Presence rules: required / nullable, static or computed from the object
- Constraints: allowed/denied values, length, min/max, word counts,
  named formats, regular expressions and custom checks
- Cleaning: string trimming and blank-to-None normalization
- Parsing: form-payload strings converted to Boolean and Number values

## Key Components

### Core Classes
- `Schema`: Field map, composition helpers and the validation entry points
- `FieldSpec`: Contract of a single field, checked at construction
- `ValidationOptions`: Per-call options (clean, ignore_unknown, ...)
- `ValidationError`: Exception raised on the first violated constraint

### Type Markers
- `Array`, `Boolean`, `Function`, `Number`, `Object`, `String`

## Quick Examples

### Validation
```python
from schemakit import Number, Schema, String, ValidationError
from schemakit.patterns import EMAIL

schema = Schema({
    "name": {"type": String, "length": [1, 50]},
    "email": {"type": String, "regex": EMAIL},
    "age": {"type": Number, "decimal": False, "min": 0, "max": 120, "required": False},
    "status": {"type": String, "allowed": ["draft", "published"]},
})

payload = {"name": "  Alice ", "email": "alice@example.com", "status": "draft"}
schema.validate(payload)
# payload["name"] == "Alice"

try:
    schema.validate({"name": "Bob", "email": "bob@example.com", "status": "archived"})
except ValidationError as e:
    print(e.reason)   # ErrorCode.FIELD_ALLOWED
    print(e.context)  # {'field': 'status', 'allowed': ['draft', 'published']}
```

### Nested Schemas
```python
phone = Schema({"code": {"type": Number}, "number": {"type": String}})
contact = Schema({
    "phones": {"type": [phone], "length": [1, None]},
    "main": {"type": phone, "required": False},
})

contact.update("phones[0][number]", {"regex": r"^[0-9 ]+$"})
contact.resolve_field("main[code]")
```
"""

from .errors import ErrorCode, InvalidPathError, SchemaDefinitionError, ValidationError
from .models import FieldSpec, ValidationOptions
from .schema import Schema
from .types import Array, Boolean, Function, Number, Object, String

__all__ = [
    # Core
    "Schema",
    "FieldSpec",
    "ValidationOptions",
    # Errors
    "ErrorCode",
    "ValidationError",
    "SchemaDefinitionError",
    "InvalidPathError",
    # Type markers
    "Array",
    "Boolean",
    "Function",
    "Number",
    "Object",
    "String",
]

__version__ = "0.1.0"
