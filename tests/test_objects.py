"""Tests for object schemas: stripping, error collection and composition."""

from types import MappingProxyType

import pytest

from refinery import ObjectSchema, ParseFailure, array, extend, number, object_, omit, pick, string


@pytest.fixture
def record():
    return object_(
        {
            "id": string().min(1, "Missing ID"),
            "createdAt": number(),
            "email": string().email("Invalid email"),
        }
    )


class TestObjectValidation:
    """Test validation of mapping input."""

    def test_unknown_keys_are_stripped(self, record):
        data = {"id": "1234", "createdAt": 0, "email": "a@b.com", "extra": "x"}
        result = record.safe_parse(data)
        assert result.success
        assert result.data == {"id": "1234", "createdAt": 0, "email": "a@b.com"}
        # Input is left untouched
        assert "extra" in data

    def test_all_field_failures_are_collected(self, record):
        result = record.safe_parse({"id": "", "createdAt": "yesterday", "email": "nope"})
        assert isinstance(result, ParseFailure)
        assert [(issue.path, issue.message) for issue in result.issues] == [
            (("id",), "Missing ID"),
            (("createdAt",), "Expected number, received string"),
            (("email",), "Invalid email"),
        ]

    def test_missing_fields_are_required(self, record):
        result = record.safe_parse({"id": "1"})
        assert [(issue.code, issue.path, issue.message) for issue in result.issues] == [
            ("invalid_type", ("createdAt",), "Required"),
            ("invalid_type", ("email",), "Required"),
        ]

    def test_optional_fields_may_be_absent(self):
        schema = object_({"name": string(), "nickname": string().optional()})
        assert schema.parse({"name": "Ada"}) == {"name": "Ada"}
        assert schema.parse({"name": "Ada", "nickname": "A"}) == {"name": "Ada", "nickname": "A"}
        result = schema.safe_parse({"name": "Ada", "nickname": 3})
        assert result.issues[0].path == ("nickname",)

    def test_absent_optional_field_skips_its_refinements(self):
        schema = object_({"nick": string().optional().refine(lambda s: len(s) > 2, "short")})
        assert schema.parse({}) == {}
        assert schema.parse({"nick": "Ada"}) == {"nick": "Ada"}
        result = schema.safe_parse({"nick": "A"})
        assert [(i.path, i.message) for i in result.issues] == [(("nick",), "short")]

    def test_rejects_non_mappings(self, record):
        result = record.safe_parse(["id", "1234"])
        assert [issue.message for issue in result.issues] == ["Expected object, received array"]

    def test_nested_paths(self):
        schema = object_({"user": object_({"tags": array(string())})})
        result = schema.safe_parse({"user": {"tags": ["ok", 5]}})
        assert result.issues[0].path == ("user", "tags", 1)

    def test_strict_reports_unknown_keys(self):
        schema = object_({"username": string()}).strict()
        result = schema.safe_parse({"username": "Ludwig", "a": 1, "b": 2})
        assert [(issue.code, issue.message) for issue in result.issues] == [
            ("unrecognized_keys", "Unrecognized key(s) in object: 'a', 'b'")
        ]

    def test_passthrough_keeps_unknown_keys(self):
        schema = object_({"username": string()}).passthrough()
        assert schema.parse({"username": "Ludwig", "a": 1}) == {"username": "Ludwig", "a": 1}
        assert schema.strip().parse({"username": "Ludwig", "a": 1}) == {"username": "Ludwig"}


class TestObjectComposition:
    """Test extend, omit and pick."""

    def test_omit_then_extend(self):
        first = object_({"first": string()})
        modified = first.omit(["first"]).extend({"second": string()})
        data = {"first": "First", "second": "Second"}

        assert first.parse(data) == {"first": "First"}
        assert modified.parse(data) == {"second": "Second"}
        # The original schema is unchanged
        assert first.keys() == ("first",)

    def test_omit_extend_matches_direct_declaration(self):
        base = object_({"a": string(), "b": number()})
        derived = base.omit(["b"]).extend({"c": number()})
        assert derived == object_({"a": string(), "c": number()})

    def test_repeated_transforms_are_identical(self):
        base = object_({"a": string(), "b": number()})
        once = omit(base, ["b"]).extend({"c": number()})
        twice = omit(once, ["b"]).extend({"c": number()})
        assert once == twice

    def test_omit_accepts_flag_mapping_and_ignores_unknown_names(self):
        base = object_({"a": string(), "b": number()})
        assert base.omit({"a": True, "b": False, "zzz": True}).keys() == ("b",)

    def test_extend_replaces_in_place(self):
        base = object_({"a": string(), "b": number()})
        replaced = extend(base, {"a": number()})
        assert replaced.keys() == ("a", "b")
        assert replaced.parse({"a": 1, "b": 2}) == {"a": 1, "b": 2}

    def test_pick(self):
        base = object_({"a": string(), "b": number(), "c": number()})
        assert pick(base, ["c", "a"]).keys() == ("a", "c")

    def test_transforms_drop_object_refinements(self):
        base = object_({"a": number()}).refine(lambda d: d["a"] > 0, "Must be positive")
        assert not base.safe_parse({"a": -1}).success
        assert base.extend({"b": number().optional()}).parse({"a": -1}) == {"a": -1}

    def test_transforms_keep_unknown_key_policy(self):
        base = object_({"a": string()}).strict()
        assert base.extend({"b": string()}).unknown_keys == "strict"

    def test_composition_requires_object_schema(self):
        with pytest.raises(TypeError, match="requires an object schema"):
            omit(string(), ["a"])
        with pytest.raises(TypeError, match="requires an object schema"):
            extend(number(), {"a": string()})

    def test_invalid_fields_rejected_at_declaration(self):
        with pytest.raises(TypeError, match="must map names to schemas"):
            object_({"a": "string"})

    def test_shape_is_read_only(self):
        schema = object_({"a": string()})
        assert isinstance(schema.shape, MappingProxyType)
        assert isinstance(schema, ObjectSchema)
        with pytest.raises(TypeError):
            schema.shape["b"] = string()
