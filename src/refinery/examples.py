"""A catalog of example schemas and inputs.

Each entry pairs a schema with inputs that exercise it, covering basic types,
field stripping, pattern and refinement checks, cross-field validation, and
schema composition. ``refinery demo`` runs the catalog from the command line.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .converters import parse_datetime
from .models import ParseResult, RefineryBaseModel
from .schemas import Schema, coerce_date, number, object_, string

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Example:
    name: str
    title: str
    schema: Schema
    inputs: tuple[Any, ...]


class ExampleRunModel(RefineryBaseModel):
    """Outcome of evaluating one example input."""

    name: str
    title: str
    input: Any
    result: ParseResult


def is_date(value: str) -> bool:
    return coerce_date().safe_parse(value).success


def not_in_future(value: str) -> bool:
    return parse_datetime(value) <= datetime.now()


def passwords_match(data: dict[str, Any]) -> bool:
    return data["password"] == data["confirmPassword"]


USERNAME = object_({"username": string()})

RECORD = object_(
    {
        "id": string().min(1, "Missing ID"),
        "createdAt": number(),
        "email": string().email("Invalid email"),
    }
)

ISO_DATE = string().regex(
    r"^\d{4}-(0[1-9]|1[012])-(0[1-9]|[12][0-9]|3[01])$", "User format YYYY-MM-DD"
)

ANY_DATE = string().refine(is_date, "Invalid date")

PAST_DATE = string().refine(is_date, "Invalid date").refine(not_in_future, "Cannot use future date.")

SIGNUP = object_(
    {
        "password": string().min(1, "Password too short"),
        "confirmPassword": string().min(1, "Confirm password"),
    }
).refine(passwords_match, "Passwords don't match", path=["confirmPassword"])

FIRST = object_({"first": string()})
SECOND = FIRST.omit(["first"]).extend({"second": string()})

_PAIR = {"first": "First", "second": "Second"}

EXAMPLES: tuple[Example, ...] = (
    Example("string", "Basic string", string(), ("tuna", 12)),
    Example("object", "Object", USERNAME, ({"username": "Ludwig"}, {"username": 7})),
    Example(
        "strip",
        "Unknown keys are stripped",
        RECORD,
        (
            {
                "id": "1234",
                "createdAt": 1728547200000,
                "email": "test@example.com",
                "extra": "Should be removed",
            },
            {"id": "", "createdAt": "yesterday", "email": "nope"},
        ),
    ),
    Example("iso-date", "Date by pattern", ISO_DATE, ("2021-01-01", "10/10/2024", "2021-13-01")),
    Example(
        "any-date",
        "Date by refinement",
        ANY_DATE,
        ("10-10-2024", "10/10/2024", "2024-10-10", "October 10 2024", "10 October 2024", "soon"),
    ),
    Example("past-date", "Date not in the future", PAST_DATE, ("2021-01-01", "2999-01-01")),
    Example(
        "passwords",
        "Cross-field check",
        SIGNUP,
        (
            {"password": "1234", "confirmPassword": "12345"},
            {"password": "1234", "confirmPassword": "1234"},
        ),
    ),
    Example("omit-extend", "Original schema", FIRST, (_PAIR,)),
    Example("omit-extend-modified", "Omit 'first', extend with 'second'", SECOND, (_PAIR,)),
)


def get_example(name: str) -> Example:
    for example in EXAMPLES:
        if example.name == name:
            return example
    raise ValueError(f"Unknown example: {name}")


def run_examples(names: Iterable[str] | None = None) -> list[ExampleRunModel]:
    """Evaluate example inputs with ``safe_parse``.

    Args:
        names: Example names to run; all examples when omitted.

    Raises:
        ValueError: If a name is not in the catalog.
    """
    selected = EXAMPLES if names is None else tuple(get_example(name) for name in names)
    runs = []
    for example in selected:
        for value in example.inputs:
            result = example.schema.safe_parse(value)
            logger.debug(
                f"{example.name}: {value!r} -> {result.model_dump_json(exclude_none=True)}"
            )
            runs.append(
                ExampleRunModel(name=example.name, title=example.title, input=value, result=result)
            )
    return runs
