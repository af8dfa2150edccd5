"""Pydantic models for refinery.

This module contains the result types produced by schema evaluation and the
declarative schema definition consumed by :mod:`refinery.loaders`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ._types import IssueCode, IssuePath

if TYPE_CHECKING:
    from .converters import ValidationError


class RefineryBaseModel(BaseModel):
    """Base model for all refinery Pydantic models.

    - extra="forbid": Rejects any fields not defined in the model
    - frozen=True: Makes instances immutable so results can be shared freely
    """

    model_config = ConfigDict(extra="forbid", frozen=True)


class Issue(RefineryBaseModel):
    """A single validation failure.

    Attributes:
        code: Machine-readable failure category.
        path: Location of the failure inside the input, e.g. ``("user", "email")``
            or ``("tags", 2)``. Empty for the root value.
        message: Human-readable description.

    Example:
        >>> Issue(code="custom", path=("confirmPassword",), message="Passwords don't match")
    """

    code: IssueCode
    path: IssuePath = ()
    message: str

    def with_prefix(self, *prefix: str | int) -> Issue:
        """Return a copy of this issue located under ``prefix``."""
        return self.model_copy(update={"path": (*prefix, *self.path)})

    def __str__(self) -> str:
        if not self.path:
            return self.message
        return f"{'.'.join(str(p) for p in self.path)}: {self.message}"


class ParseSuccess(RefineryBaseModel):
    """Successful evaluation carrying the validated value."""

    success: Literal[True] = True
    data: Any = None


class ParseFailure(RefineryBaseModel):
    """Failed evaluation carrying every issue in check order."""

    success: Literal[False] = False
    issues: tuple[Issue, ...] = Field(min_length=1)

    @property
    def error(self) -> ValidationError:
        """The equivalent exception, as :func:`refinery.parse` would raise it."""
        from .converters import ValidationError

        return ValidationError(self.issues)


ParseResult = ParseSuccess | ParseFailure


class EqualFieldsRuleModel(RefineryBaseModel):
    """Object-level rule requiring two fields to hold the same value.

    The issue is reported at ``right``, the field a user would correct.
    """

    left: str
    right: str
    message: str | None = None


class SchemaDefinitionModel(RefineryBaseModel):
    """Declarative schema definition, as written in YAML or JSON files.

    Attributes:
        type: The data type (string, number, integer, boolean, date, array, object).
        description: Optional description of the field.
        format: Optional string format (email, uri).
        pattern: Regular expression a string must match.
        min_length: Minimum length for strings.
        max_length: Maximum length for strings.
        minimum: Minimum value for numbers.
        maximum: Maximum value for numbers.
        exclusive_minimum: Exclusive minimum for numbers.
        exclusive_maximum: Exclusive maximum for numbers.
        multiple_of: Positive step a number must be a multiple of.
        min_items: Minimum items for arrays.
        max_items: Maximum items for arrays.
        items: Schema for array items.
        properties: Schema for object properties.
        required: Names of required properties. When omitted every property is required.
        additional_properties: ``False`` rejects unknown keys, ``True`` keeps them,
            unset strips them.
        messages: Custom messages keyed by constraint name (``minLength``, ``pattern``...).
        equal_fields: Object-level equality rules.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    type: Literal["string", "number", "integer", "boolean", "date", "array", "object"]
    description: str | None = None

    # String constraints
    format: Literal["email", "uri"] | None = None
    pattern: str | None = None
    min_length: int | None = Field(default=None, alias="minLength", ge=0)
    max_length: int | None = Field(default=None, alias="maxLength", ge=0)

    # Numeric constraints
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: int | float | None = Field(default=None, alias="exclusiveMaximum")
    multiple_of: int | float | None = Field(default=None, alias="multipleOf", gt=0)

    # Array constraints
    min_items: int | None = Field(default=None, alias="minItems", ge=0)
    max_items: int | None = Field(default=None, alias="maxItems", ge=0)
    items: SchemaDefinitionModel | None = None

    # Object constraints
    properties: dict[str, SchemaDefinitionModel] | None = None
    required: list[str] | None = None
    additional_properties: bool | None = Field(default=None, alias="additionalProperties")
    equal_fields: list[EqualFieldsRuleModel] | None = Field(default=None, alias="equalFields")

    messages: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_consistency(self) -> SchemaDefinitionModel:
        """Reject constraint combinations that cannot apply to the declared type."""
        if self.type == "array" and self.items is None:
            raise ValueError("Array definitions require 'items'")
        if self.type != "object" and (self.properties or self.required or self.equal_fields):
            raise ValueError(f"'properties' and 'required' only apply to objects, not {self.type}")
        declared = set(self.properties or {})
        unknown = [name for name in self.required or [] if name not in declared]
        if unknown:
            raise ValueError(f"Required properties not declared: {', '.join(unknown)}")
        for rule in self.equal_fields or []:
            if rule.left not in declared or rule.right not in declared:
                raise ValueError(
                    f"equalFields rule references undeclared property: {rule.left}, {rule.right}"
                )
        return self


SchemaDefinitionModel.model_rebuild()
