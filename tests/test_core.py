"""Tests for refinery.core and the ValidationError contract."""

import pytest

import refinery
from refinery import Issue, ParseFailure, ParseSuccess, ValidationError


@pytest.fixture
def profile():
    return refinery.object_(
        {
            "name": refinery.string().min(1),
            "age": refinery.integer().min(0),
        }
    ).refine(lambda d: d["age"] < 150, "Unrealistic age", path=["age"])


class TestParse:
    """Test parse and safe_parse entry points."""

    def test_parse_returns_cleaned_value(self, profile):
        assert refinery.parse(profile, {"name": "Ada", "age": 36, "x": 1}) == {
            "name": "Ada",
            "age": 36,
        }

    def test_parse_raises_with_all_issues(self, profile):
        with pytest.raises(ValidationError) as exc_info:
            refinery.parse(profile, {"name": "", "age": -1})
        error = exc_info.value
        assert [issue.path for issue in error.issues] == [("name",), ("age",)]
        assert "Validation failed with 2 issues" in str(error)
        assert isinstance(error, ValueError)

    def test_single_issue_message(self):
        with pytest.raises(ValidationError, match=r"^Validation failed: Expected string"):
            refinery.parse(refinery.string(), 1)

    def test_safe_parse_success(self, profile):
        result = refinery.safe_parse(profile, {"name": "Ada", "age": 36})
        assert isinstance(result, ParseSuccess)
        assert result.success is True

    def test_safe_parse_failure_matches_parse(self, profile):
        value = {"name": "Ada", "age": 200}
        result = refinery.safe_parse(profile, value)
        assert isinstance(result, ParseFailure)
        with pytest.raises(ValidationError) as exc_info:
            refinery.parse(profile, value)
        assert exc_info.value.issues == result.issues
        assert result.error.issues == result.issues

    def test_results_are_deterministic(self, profile):
        value = {"name": "", "age": "x"}
        assert refinery.safe_parse(profile, value) == refinery.safe_parse(profile, value)

    def test_failure_serializes_to_json(self):
        result = refinery.safe_parse(refinery.object_({"n": refinery.number()}), {"n": "1"})
        assert result.model_dump(mode="json") == {
            "success": False,
            "issues": [
                {
                    "code": "invalid_type",
                    "path": ["n"],
                    "message": "Expected number, received string",
                }
            ],
        }


class TestValidationError:
    """Test error formatting helpers."""

    def test_flatten(self):
        error = ValidationError(
            [
                Issue(code="custom", message="Form is incomplete"),
                Issue(code="too_small", path=("password",), message="Too short"),
                Issue(code="custom", path=("password",), message="Too common"),
                Issue(code="invalid_type", path=("tags", 0), message="Expected string"),
            ]
        )
        assert error.flatten() == {
            "form_errors": ["Form is incomplete"],
            "field_errors": {"password": ["Too short", "Too common"], "tags": ["Expected string"]},
        }

    def test_issue_str_includes_path(self):
        issue = Issue(code="custom", path=("user", 0, "email"), message="Bad")
        assert str(issue) == "user.0.email: Bad"

    def test_failure_requires_issues(self):
        with pytest.raises(ValueError):
            ParseFailure(issues=())


class TestFunctionalApi:
    def test_refine_function(self):
        schema = refinery.refine(refinery.string(), lambda s: s.isupper(), "Must be upper")
        assert schema.parse("OK") == "OK"
        assert not schema.safe_parse("no").success

    def test_schemas_are_immutable(self):
        schema = refinery.string()
        with pytest.raises(AttributeError):
            schema.checks = ()
