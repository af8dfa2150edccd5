"""Schema value objects for refinery.

Every schema is a frozen dataclass. Methods that add a constraint, a
refinement or a field never touch the receiver: they return a new schema
built with :func:`dataclasses.replace`, so a schema can be declared once at
import time and shared by any number of callers.

Evaluation happens in three stages:

1. the type check (is it a string? a mapping?). A failure here aborts:
   nothing after it runs.
2. constraint checks (length, pattern, bounds). Every failure is collected.
   Element failures inside arrays and objects abort like a type failure.
3. refinements, in the order they were added. Each runs on a value of the
   right type even when a constraint or an earlier refinement failed, so
   every failing check contributes its own issue.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, NamedTuple, TypeVar

from ._types import IssuePath, Predicate, UnknownKeys
from .converters import EMAIL_PATTERN, URI_PATTERN, ValidationError, describe_type, parse_datetime
from .models import Issue, ParseFailure, ParseResult, ParseSuccess

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for an object field absent from the input."""

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()

_S = TypeVar("_S", bound="Schema")


class _Outcome(NamedTuple):
    data: Any
    issues: list[Issue]
    # True when refinements must not run on data
    aborted: bool = False


def _invalid_type(expected: str, value: Any) -> Issue:
    if value is MISSING:
        return Issue(code="invalid_type", message="Required")
    return Issue(
        code="invalid_type", message=f"Expected {expected}, received {describe_type(value)}"
    )


@dataclass(frozen=True)
class Check:
    """A single constraint attached to a schema, e.g. ``Check("min", 1)``."""

    kind: str
    value: Any = None
    message: str | None = None
    flags: int = 0


@dataclass(frozen=True)
class Refinement:
    """A post-validation predicate with the issue it reports on failure."""

    predicate: Predicate
    message: str = "Invalid input"
    path: IssuePath = ()

    def check(self, value: Any) -> Issue | None:
        try:
            passed = self.predicate(value)
        except Exception as e:
            logger.debug(f"Refinement predicate raised {e!r}; treating as failed", exc_info=True)
            passed = False
        if passed:
            return None
        return Issue(code="custom", path=self.path, message=self.message)


@dataclass(frozen=True)
class Schema:
    """Base class for all schemas.

    Subclasses implement :meth:`_validate`; everything else (refinements,
    parse entry points, optional wrapping) is shared.
    """

    refinements: tuple[Refinement, ...] = field(default=(), kw_only=True)
    description: str | None = field(default=None, kw_only=True, compare=False)

    def _validate(self, value: Any) -> _Outcome:
        raise NotImplementedError

    def _run(self, value: Any) -> _Outcome:
        data, issues, aborted = self._validate(value)
        if aborted or data is MISSING:
            return _Outcome(data, issues, aborted)
        issues = list(issues)
        for refinement in self.refinements:
            issue = refinement.check(data)
            if issue is not None:
                issues.append(issue)
        return _Outcome(data, issues)

    def safe_parse(self, value: Any) -> ParseResult:
        """Evaluate ``value`` and return a result instead of raising."""
        data, issues, _ = self._run(value)
        if issues:
            return ParseFailure(issues=tuple(issues))
        return ParseSuccess(data=None if data is MISSING else data)

    def parse(self, value: Any) -> Any:
        """Evaluate ``value`` and return the validated data.

        Raises:
            ValidationError: With every issue found, if any check fails.
        """
        result = self.safe_parse(value)
        if isinstance(result, ParseFailure):
            raise ValidationError(result.issues)
        return result.data

    def refine(
        self: _S,
        predicate: Predicate,
        message: str = "Invalid input",
        path: Iterable[str | int] = (),
    ) -> _S:
        """Return a copy of this schema with an extra predicate.

        Args:
            predicate: Called with the validated value; a falsy result fails.
            message: Message of the issue reported on failure.
            path: Where the issue is reported, e.g. ``["confirmPassword"]``.
        """
        refinement = Refinement(predicate=predicate, message=message, path=tuple(path))
        return replace(self, refinements=(*self.refinements, refinement))

    def describe(self: _S, description: str) -> _S:
        return replace(self, description=description)

    def optional(self) -> OptionalSchema:
        return OptionalSchema(inner=self)

    def nullable(self) -> NullableSchema:
        return NullableSchema(inner=self)


@dataclass(frozen=True)
class _ConstrainedSchema(Schema):
    checks: tuple[Check, ...] = ()

    def _with(self, kind: str, value: Any = None, message: str | None = None, **extra: Any) -> Any:
        return replace(self, checks=(*self.checks, Check(kind, value, message, **extra)))


@dataclass(frozen=True)
class StringSchema(_ConstrainedSchema):
    """Accepts ``str`` values, optionally constrained by length and format."""

    def min(self, length: int, message: str | None = None) -> StringSchema:
        return self._with("min", length, message)

    def max(self, length: int, message: str | None = None) -> StringSchema:
        return self._with("max", length, message)

    def length(self, length: int, message: str | None = None) -> StringSchema:
        return self._with("length", length, message)

    def regex(self, pattern: str | re.Pattern[str], message: str | None = None) -> StringSchema:
        if isinstance(pattern, re.Pattern):
            return self._with("regex", pattern.pattern, message, flags=pattern.flags)
        re.compile(pattern)  # fail at declaration time on a bad pattern
        return self._with("regex", pattern, message)

    def email(self, message: str | None = None) -> StringSchema:
        return self._with("email", None, message)

    def url(self, message: str | None = None) -> StringSchema:
        return self._with("url", None, message)

    def _validate(self, value: Any) -> _Outcome:
        if not isinstance(value, str):
            return _Outcome(value, [_invalid_type("string", value)], aborted=True)
        issues = [issue for check in self.checks if (issue := self._check(check, value))]
        return _Outcome(value, issues)

    @staticmethod
    def _check(check: Check, value: str) -> Issue | None:
        size = len(value)
        if check.kind == "min" and size < check.value:
            return Issue(
                code="too_small",
                message=check.message
                or f"String must contain at least {check.value} character(s)",
            )
        if check.kind == "max" and size > check.value:
            return Issue(
                code="too_big",
                message=check.message or f"String must contain at most {check.value} character(s)",
            )
        if check.kind == "length" and size != check.value:
            return Issue(
                code="too_small" if size < check.value else "too_big",
                message=check.message or f"String must contain exactly {check.value} character(s)",
            )
        if check.kind == "regex" and not re.search(check.value, value, check.flags):
            return Issue(code="invalid_string", message=check.message or "Invalid")
        if check.kind == "email" and not EMAIL_PATTERN.match(value):
            return Issue(code="invalid_string", message=check.message or "Invalid email")
        if check.kind == "url" and not URI_PATTERN.match(value):
            return Issue(code="invalid_string", message=check.message or "Invalid url")
        return None


def _is_multiple(value: int | float, step: int | float) -> bool:
    if isinstance(value, int) and isinstance(step, int):
        return value % step == 0
    try:
        return math.isclose(math.remainder(value, step), 0, abs_tol=1e-9)
    except OverflowError:
        return False


@dataclass(frozen=True)
class NumberSchema(_ConstrainedSchema):
    """Accepts finite ``int`` and ``float`` values. Booleans are rejected."""

    def min(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._with("min", bound, message)

    def max(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._with("max", bound, message)

    def gt(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._with("gt", bound, message)

    def lt(self, bound: int | float, message: str | None = None) -> NumberSchema:
        return self._with("lt", bound, message)

    def integer(self, message: str | None = None) -> NumberSchema:
        return self._with("int", None, message)

    def multiple_of(self, step: int | float, message: str | None = None) -> NumberSchema:
        if step <= 0:
            raise ValueError(f"multiple_of requires a positive step, got {step}")
        return self._with("multiple_of", step, message)

    def _validate(self, value: Any) -> _Outcome:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value != value:
            return _Outcome(value, [_invalid_type("number", value)], aborted=True)
        if isinstance(value, float) and not math.isfinite(value):
            issue = Issue(code="not_finite", message="Number must be finite")
            return _Outcome(value, [issue], aborted=True)
        issues = [issue for check in self.checks if (issue := self._check(check, value))]
        return _Outcome(value, issues)

    @staticmethod
    def _check(check: Check, value: int | float) -> Issue | None:
        bound = check.value
        if check.kind == "min" and value < bound:
            return Issue(
                code="too_small",
                message=check.message or f"Number must be greater than or equal to {bound}",
            )
        if check.kind == "max" and value > bound:
            return Issue(
                code="too_big",
                message=check.message or f"Number must be less than or equal to {bound}",
            )
        if check.kind == "gt" and value <= bound:
            return Issue(
                code="too_small", message=check.message or f"Number must be greater than {bound}"
            )
        if check.kind == "lt" and value >= bound:
            return Issue(
                code="too_big", message=check.message or f"Number must be less than {bound}"
            )
        if check.kind == "int" and isinstance(value, float) and not value.is_integer():
            return Issue(
                code="invalid_type", message=check.message or "Expected integer, received float"
            )
        if check.kind == "multiple_of" and not _is_multiple(value, bound):
            return Issue(
                code="custom", message=check.message or f"Number must be a multiple of {bound}"
            )
        return None


@dataclass(frozen=True)
class BooleanSchema(Schema):
    def _validate(self, value: Any) -> _Outcome:
        if not isinstance(value, bool):
            return _Outcome(value, [_invalid_type("boolean", value)], aborted=True)
        return _Outcome(value, [])


@dataclass(frozen=True)
class DateSchema(_ConstrainedSchema):
    """Coerces its input to a ``datetime``.

    Conversion goes through :func:`refinery.converters.parse_datetime`; input
    it cannot interpret yields an ``invalid_date`` issue rather than an error.
    """

    def min(self, bound: datetime | date | str, message: str | None = None) -> DateSchema:
        return self._with("min", parse_datetime(bound), message)

    def max(self, bound: datetime | date | str, message: str | None = None) -> DateSchema:
        return self._with("max", parse_datetime(bound), message)

    def _validate(self, value: Any) -> _Outcome:
        if value is MISSING:
            return _Outcome(value, [_invalid_type("date", value)], aborted=True)
        try:
            converted = parse_datetime(value)
        except ValueError:
            issue = Issue(code="invalid_date", message="Invalid date")
            return _Outcome(value, [issue], aborted=True)
        issues = []
        for check in self.checks:
            if check.kind == "min" and converted < check.value:
                issues.append(
                    Issue(
                        code="too_small",
                        message=check.message
                        or f"Date must be greater than or equal to {check.value.isoformat()}",
                    )
                )
            elif check.kind == "max" and converted > check.value:
                issues.append(
                    Issue(
                        code="too_big",
                        message=check.message
                        or f"Date must be smaller than or equal to {check.value.isoformat()}",
                    )
                )
        return _Outcome(converted, issues)


@dataclass(frozen=True)
class ArraySchema(_ConstrainedSchema):
    """Accepts lists and tuples whose every element matches ``items``."""

    items: Schema = field(kw_only=True)

    def min(self, count: int, message: str | None = None) -> ArraySchema:
        return self._with("min", count, message)

    def max(self, count: int, message: str | None = None) -> ArraySchema:
        return self._with("max", count, message)

    def _validate(self, value: Any) -> _Outcome:
        if not isinstance(value, (list, tuple)):
            return _Outcome(value, [_invalid_type("array", value)], aborted=True)
        issues = []
        for check in self.checks:
            if check.kind == "min" and len(value) < check.value:
                issues.append(
                    Issue(
                        code="too_small",
                        message=check.message
                        or f"Array must contain at least {check.value} element(s)",
                    )
                )
            elif check.kind == "max" and len(value) > check.value:
                issues.append(
                    Issue(
                        code="too_big",
                        message=check.message
                        or f"Array must contain at most {check.value} element(s)",
                    )
                )
        result = []
        item_failed = False
        for index, item in enumerate(value):
            data, item_issues, _ = self.items._run(item)
            if item_issues:
                item_failed = True
                issues.extend(issue.with_prefix(index) for issue in item_issues)
            result.append(data)
        return _Outcome(result, issues, aborted=item_failed)


def _normalize_fields(fields: Any) -> tuple[tuple[str, Schema], ...]:
    pairs = tuple(fields.items()) if isinstance(fields, Mapping) else tuple(fields)
    for pair in pairs:
        if len(pair) != 2 or not isinstance(pair[0], str) or not isinstance(pair[1], Schema):
            raise TypeError(f"Object fields must map names to schemas, got {pair!r}")
    return pairs


@dataclass(frozen=True)
class ObjectSchema(Schema):
    """Accepts mappings and validates each declared field.

    Keys the schema does not declare are handled according to
    ``unknown_keys``: stripped from the output (the default), reported as an
    ``unrecognized_keys`` issue (``strict``), or copied through unvalidated
    (``passthrough``).

    Object-level refinements run on the stripped, validated dict, and only
    when every field passed. An unrecognized key alone does not stop them.
    """

    fields: tuple[tuple[str, Schema], ...] = ()
    unknown_keys: UnknownKeys = "strip"

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", _normalize_fields(self.fields))

    @property
    def shape(self) -> Mapping[str, Schema]:
        return MappingProxyType(dict(self.fields))

    def keys(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def extend(self, fields: Mapping[str, Schema]) -> ObjectSchema:
        """Return a schema with ``fields`` added.

        A name already declared keeps its position and takes the new schema.
        Object-level refinements are not carried over.
        """
        additions = dict(_normalize_fields(fields))
        merged = [(name, additions.pop(name, schema)) for name, schema in self.fields]
        merged.extend(additions.items())
        return ObjectSchema(fields=tuple(merged), unknown_keys=self.unknown_keys)

    def omit(self, names: Iterable[str] | Mapping[str, bool]) -> ObjectSchema:
        """Return a schema without the named fields.

        Names the schema does not declare are ignored. Object-level
        refinements are not carried over.
        """
        dropped = _selected(names)
        return ObjectSchema(
            fields=tuple(pair for pair in self.fields if pair[0] not in dropped),
            unknown_keys=self.unknown_keys,
        )

    def pick(self, names: Iterable[str] | Mapping[str, bool]) -> ObjectSchema:
        kept = _selected(names)
        return ObjectSchema(
            fields=tuple(pair for pair in self.fields if pair[0] in kept),
            unknown_keys=self.unknown_keys,
        )

    def strict(self) -> ObjectSchema:
        return replace(self, unknown_keys="strict")

    def strip(self) -> ObjectSchema:
        return replace(self, unknown_keys="strip")

    def passthrough(self) -> ObjectSchema:
        return replace(self, unknown_keys="passthrough")

    def _validate(self, value: Any) -> _Outcome:
        if not isinstance(value, Mapping):
            return _Outcome(value, [_invalid_type("object", value)], aborted=True)

        result: dict[str, Any] = {}
        issues: list[Issue] = []
        field_failed = False
        for name, schema in self.fields:
            data, field_issues, _ = schema._run(value.get(name, MISSING))
            issues.extend(issue.with_prefix(name) for issue in field_issues)
            field_failed = field_failed or bool(field_issues)
            if data is not MISSING:
                result[name] = data

        declared = set(self.keys())
        unknown = [key for key in value if key not in declared]
        if unknown and self.unknown_keys == "strict":
            listed = ", ".join(repr(key) for key in unknown)
            issues.append(
                Issue(code="unrecognized_keys", message=f"Unrecognized key(s) in object: {listed}")
            )
        elif self.unknown_keys == "passthrough":
            result.update((key, value[key]) for key in unknown)
        return _Outcome(result, issues, aborted=field_failed)


def _selected(names: Iterable[str] | Mapping[str, bool]) -> set[str]:
    if isinstance(names, str):
        return {names}
    if isinstance(names, Mapping):
        return {name for name, flag in names.items() if flag}
    return set(names)


@dataclass(frozen=True)
class OptionalSchema(Schema):
    """Lets an object field be absent. Present values must match ``inner``."""

    inner: Schema = field(kw_only=True)

    def _validate(self, value: Any) -> _Outcome:
        if value is MISSING:
            return _Outcome(value, [])
        return self.inner._run(value)


@dataclass(frozen=True)
class NullableSchema(Schema):
    """Accepts ``None`` in addition to whatever ``inner`` accepts."""

    inner: Schema = field(kw_only=True)

    def _validate(self, value: Any) -> _Outcome:
        if value is None:
            return _Outcome(value, [])
        return self.inner._run(value)


def string() -> StringSchema:
    return StringSchema()


def number() -> NumberSchema:
    return NumberSchema()


def integer() -> NumberSchema:
    return NumberSchema().integer()


def boolean() -> BooleanSchema:
    return BooleanSchema()


def coerce_date() -> DateSchema:
    return DateSchema()


def array(items: Schema) -> ArraySchema:
    return ArraySchema(items=items)


def object_(fields: Mapping[str, Schema] | None = None) -> ObjectSchema:
    return ObjectSchema(fields=_normalize_fields(fields or {}))


def optional(schema: Schema) -> OptionalSchema:
    return schema.optional()
