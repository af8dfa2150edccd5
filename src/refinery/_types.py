"""Type aliases shared across the refinery package."""

from collections.abc import Callable
from typing import Any, Literal

# A location inside a nested value: field names for objects, indices for arrays
PathElement = str | int
IssuePath = tuple[PathElement, ...]

IssueCode = Literal[
    "invalid_type",
    "too_small",
    "too_big",
    "invalid_string",
    "invalid_date",
    "not_finite",
    "unrecognized_keys",
    "custom",
]

UnknownKeys = Literal["strip", "strict", "passthrough"]

Predicate = Callable[[Any], Any]

__all__ = ["PathElement", "IssuePath", "IssueCode", "UnknownKeys", "Predicate"]
