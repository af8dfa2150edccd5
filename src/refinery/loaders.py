"""Schema loading utilities for refinery.

Schemas can be declared in YAML or JSON instead of Python:

```yaml
type: object
properties:
  password: {type: string, minLength: 1, messages: {minLength: Password too short}}
  confirmPassword: {type: string, minLength: 1}
equalFields:
  - {left: password, right: confirmPassword, message: "Passwords don't match"}
```
"""

import json
import logging
from pathlib import Path
from typing import Any, cast

import yaml
from pydantic import ValidationError as PydanticValidationError

from .models import EqualFieldsRuleModel, SchemaDefinitionModel
from .schemas import (
    ArraySchema,
    BooleanSchema,
    DateSchema,
    NumberSchema,
    ObjectSchema,
    Schema,
    StringSchema,
)

logger = logging.getLogger(__name__)


def load_schema(content: str, format: str = "yaml") -> dict[str, Any]:
    """Load schema from string content.

    Args:
        content: Schema content as string
        format: Format of the content ('yaml' or 'json')

    Returns:
        Schema dictionary

    Raises:
        ValueError: If format is not supported or parsing fails
    """
    if format == "yaml":
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ValueError(f"Failed to parse YAML: {e}") from e
    elif format == "json":
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON: {e}") from e
    else:
        raise ValueError(f"Unsupported format: {format}. Use 'yaml' or 'json'")

    if not isinstance(data, dict):
        raise ValueError("Schema document must be a mapping")
    return cast(dict[str, Any], data)


def load_schema_from_file(path: str | Path) -> dict[str, Any]:
    """Load schema from a YAML or JSON file.

    Args:
        path: Path to the schema file

    Returns:
        Schema dictionary

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported or parsing fails
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")

    if path.suffix.lower() in [".yaml", ".yml"]:
        format = "yaml"
    elif path.suffix.lower() == ".json":
        format = "json"
    else:
        raise ValueError(f"Unsupported file extension: {path.suffix}. Use .yaml, .yml, or .json")

    logger.debug(f"Loading schema definition from: {path}")
    content = path.read_text(encoding="utf-8")
    return load_schema(content, format=format)


def build_schema(definition: dict[str, Any] | SchemaDefinitionModel) -> Schema:
    """Build a schema from a declarative definition.

    Raises:
        ValueError: If the definition is invalid
    """
    if not isinstance(definition, SchemaDefinitionModel):
        try:
            definition = SchemaDefinitionModel.model_validate(definition)
        except PydanticValidationError as e:
            raise ValueError(f"Invalid schema definition: {e}") from e
    schema = _build(definition)
    if definition.description:
        schema = schema.describe(definition.description)
    return schema


def schema_from_file(path: str | Path) -> Schema:
    return build_schema(load_schema_from_file(path))


def _build(definition: SchemaDefinitionModel) -> Schema:
    messages = definition.messages

    if definition.type == "string":
        string = StringSchema()
        if definition.min_length is not None:
            string = string.min(definition.min_length, messages.get("minLength"))
        if definition.max_length is not None:
            string = string.max(definition.max_length, messages.get("maxLength"))
        if definition.pattern is not None:
            string = string.regex(definition.pattern, messages.get("pattern"))
        if definition.format == "email":
            string = string.email(messages.get("format"))
        elif definition.format == "uri":
            string = string.url(messages.get("format"))
        return string

    if definition.type in ("number", "integer"):
        number = NumberSchema()
        if definition.type == "integer":
            number = number.integer(messages.get("type"))
        if definition.minimum is not None:
            number = number.min(definition.minimum, messages.get("minimum"))
        if definition.maximum is not None:
            number = number.max(definition.maximum, messages.get("maximum"))
        if definition.exclusive_minimum is not None:
            number = number.gt(definition.exclusive_minimum, messages.get("exclusiveMinimum"))
        if definition.exclusive_maximum is not None:
            number = number.lt(definition.exclusive_maximum, messages.get("exclusiveMaximum"))
        if definition.multiple_of is not None:
            number = number.multiple_of(definition.multiple_of, messages.get("multipleOf"))
        return number

    if definition.type == "boolean":
        return BooleanSchema()

    if definition.type == "date":
        return DateSchema()

    if definition.type == "array":
        # check_consistency guarantees items for arrays
        items = cast(SchemaDefinitionModel, definition.items)
        array = ArraySchema(items=build_schema(items))
        if definition.min_items is not None:
            array = array.min(definition.min_items, messages.get("minItems"))
        if definition.max_items is not None:
            array = array.max(definition.max_items, messages.get("maxItems"))
        return array

    properties = definition.properties or {}
    required = set(properties) if definition.required is None else set(definition.required)
    fields = []
    for name, prop in properties.items():
        field_schema = build_schema(prop)
        fields.append((name, field_schema if name in required else field_schema.optional()))

    if definition.additional_properties is None:
        unknown_keys = "strip"
    elif definition.additional_properties:
        unknown_keys = "passthrough"
    else:
        unknown_keys = "strict"

    obj: Schema = ObjectSchema(fields=tuple(fields), unknown_keys=unknown_keys)
    for rule in definition.equal_fields or []:
        obj = obj.refine(_fields_equal(rule), _equal_message(rule), path=[rule.right])
    return obj


def _fields_equal(rule: EqualFieldsRuleModel) -> Any:
    def predicate(data: dict[str, Any]) -> bool:
        return data.get(rule.left) == data.get(rule.right)

    return predicate


def _equal_message(rule: EqualFieldsRuleModel) -> str:
    return rule.message or f"'{rule.right}' must match '{rule.left}'"
