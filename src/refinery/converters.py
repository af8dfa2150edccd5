"""Type conversion utilities and the validation exception for refinery."""

import math
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from typing import Any

from dateutil import parser as date_parser

from .models import Issue

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
URI_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:\S+$")


class ValidationError(ValueError):
    """Raised by ``parse`` when a value fails its schema.

    Attributes:
        issues: Every failure, in the order the checks ran.
    """

    def __init__(self, issues: Iterable[Issue]):
        self.issues = tuple(issues)
        super().__init__(self._summary())

    def _summary(self) -> str:
        if len(self.issues) == 1:
            return f"Validation failed: {self.issues[0]}"
        lines = [f"Validation failed with {len(self.issues)} issues:"]
        lines.extend(f"  - {issue}" for issue in self.issues)
        return "\n".join(lines)

    def flatten(self) -> dict[str, Any]:
        """Group messages for form-style reporting.

        Root-level issues go to ``form_errors``; everything else is keyed by
        the first element of its path.
        """
        form_errors: list[str] = []
        field_errors: dict[str, list[str]] = {}
        for issue in self.issues:
            if issue.path:
                field_errors.setdefault(str(issue.path[0]), []).append(issue.message)
            else:
                form_errors.append(issue.message)
        return {"form_errors": form_errors, "field_errors": field_errors}


def describe_type(value: Any) -> str:
    """Name the schema type of a Python value, for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float) and math.isnan(value):
        return "nan"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (datetime, date)):
        return "date"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _normalize(value: datetime) -> datetime:
    # Aware values are shifted to naive local time so they compare with datetime.now()
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def parse_datetime(value: Any) -> datetime:
    """Convert a value to a naive local ``datetime``.

    Accepts ``datetime`` and ``date`` objects, date strings in any format
    dateutil understands ("2024-10-10", "10/10/2024", "October 10 2024"),
    and numbers interpreted as milliseconds since the Unix epoch.

    Raises:
        ValueError: If the value cannot be interpreted as a date.
    """
    if isinstance(value, datetime):
        return _normalize(value)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, bool):
        raise ValueError("Booleans are not dates")
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Invalid timestamp: {value}")
        try:
            return datetime.fromtimestamp(value / 1000)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Invalid timestamp: {value}") from e
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty date string")
        try:
            return _normalize(date_parser.parse(text))
        except (OverflowError, OSError) as e:
            raise ValueError(f"Invalid date: {value}") from e
    raise ValueError(f"Cannot convert {describe_type(value)} to date")
