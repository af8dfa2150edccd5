"""Functional entry points for the schema engine.

These mirror the methods on :class:`~refinery.schemas.Schema` for callers
that prefer ``safe_parse(schema, value)`` over ``schema.safe_parse(value)``.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from ._types import Predicate
from .models import ParseResult
from .schemas import ObjectSchema, Schema

S = TypeVar("S", bound=Schema)


def parse(schema: Schema, value: Any) -> Any:
    """Validate ``value`` and return the cleaned result.

    Raises:
        ValidationError: Carrying every issue, when any check fails.
    """
    return schema.parse(value)


def safe_parse(schema: Schema, value: Any) -> ParseResult:
    """Validate ``value`` without raising.

    Returns:
        ``ParseSuccess`` with the cleaned value, or ``ParseFailure`` with the
        ordered issues.
    """
    return schema.safe_parse(value)


def refine(
    schema: S, predicate: Predicate, message: str = "Invalid input", path: Iterable[str | int] = ()
) -> S:
    return schema.refine(predicate, message, path)


def _require_object(schema: Schema, operation: str) -> ObjectSchema:
    if not isinstance(schema, ObjectSchema):
        raise TypeError(f"{operation}() requires an object schema, got {type(schema).__name__}")
    return schema


def extend(schema: Schema, fields: Mapping[str, Schema]) -> ObjectSchema:
    """Return a new object schema with ``fields`` added or replaced."""
    return _require_object(schema, "extend").extend(fields)


def omit(schema: Schema, names: Iterable[str] | Mapping[str, bool]) -> ObjectSchema:
    """Return a new object schema without the named fields."""
    return _require_object(schema, "omit").omit(names)


def pick(schema: Schema, names: Iterable[str] | Mapping[str, bool]) -> ObjectSchema:
    """Return a new object schema keeping only the named fields."""
    return _require_object(schema, "pick").pick(names)
