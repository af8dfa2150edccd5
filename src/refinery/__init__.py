"""refinery - composable, immutable schema validation.

A schema describes the shape a value should have. Evaluating input against
it yields either the cleaned value or every reason the input was rejected.

## Key Components

### Schemas
- `string()`, `number()`, `integer()`, `boolean()`, `coerce_date()`
- `array(items)`, `object_(fields)`, `optional(schema)`
- Every constraint, refinement or field edit returns a new schema

### Evaluation
- `safe_parse(schema, value)`: returns `ParseSuccess` or `ParseFailure`, never raises
- `parse(schema, value)`: returns the value or raises `ValidationError`

### Composition
- `refine(schema, predicate, message, path)`: add a post-validation check
- `extend(schema, fields)`, `omit(schema, names)`, `pick(schema, names)`

## Quick Examples

### Field stripping
```python
import refinery as r

user = r.object_({"id": r.string().min(1, "Missing ID"), "email": r.string().email()})
user.parse({"id": "1234", "email": "a@b.com", "extra": "x"})
# Returns: {"id": "1234", "email": "a@b.com"}
```

### Cross-field checks
```python
signup = r.object_(
    {"password": r.string(), "confirmPassword": r.string()}
).refine(
    lambda d: d["password"] == d["confirmPassword"],
    "Passwords don't match",
    path=["confirmPassword"],
)
result = signup.safe_parse({"password": "1234", "confirmPassword": "12345"})
# result.issues[0].path == ("confirmPassword",)
```
"""

from .converters import ValidationError, parse_datetime
from .core import extend, omit, parse, pick, refine, safe_parse
from .loaders import build_schema, load_schema, load_schema_from_file, schema_from_file
from .models import Issue, ParseFailure, ParseResult, ParseSuccess
from .schemas import (
    ArraySchema,
    BooleanSchema,
    DateSchema,
    NullableSchema,
    NumberSchema,
    ObjectSchema,
    OptionalSchema,
    Schema,
    StringSchema,
    array,
    boolean,
    coerce_date,
    integer,
    number,
    object_,
    optional,
    string,
)

__all__ = [
    # Results
    "Issue",
    "ParseResult",
    "ParseSuccess",
    "ParseFailure",
    "ValidationError",
    # Schema classes
    "Schema",
    "StringSchema",
    "NumberSchema",
    "BooleanSchema",
    "DateSchema",
    "ArraySchema",
    "ObjectSchema",
    "OptionalSchema",
    "NullableSchema",
    # Factories
    "string",
    "number",
    "integer",
    "boolean",
    "coerce_date",
    "array",
    "object_",
    "optional",
    # Operations
    "parse",
    "safe_parse",
    "refine",
    "extend",
    "omit",
    "pick",
    # Conversions and loaders
    "parse_datetime",
    "build_schema",
    "load_schema",
    "load_schema_from_file",
    "schema_from_file",
]
