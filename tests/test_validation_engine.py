"""
Tests for the declarative request validator.

Tests cover:
- Every violation across facets is collected
- Dotted field paths through nested arrays
- Permissive vs forbidding facets for unknown keys
- Required/optional facets and fields
- Faults in a schema propagate instead of becoming validation errors
"""

import re

import pytest

from backend.validation import (
    ArrayRule,
    BooleanRule,
    EnumRule,
    FacetSchema,
    RequestSchema,
    StringRule,
    UuidRule,
    optional,
    required,
    validate_request,
)
from backend.validation.engine import check_value, describe_type

VALID_UUID = "3f1c2b9e-8a4d-4e2f-9b6a-1c2d3e4f5a6b"


def _fields(outcome):
    return [error.field for error in outcome.errors]


def _messages(outcome):
    return [error.message for error in outcome.errors]


class TestFacets:
    """Facet-level behavior."""

    def test_facet_without_schema_is_not_validated(self):
        schema = RequestSchema(params=FacetSchema(fields={"id": required(UuidRule())}))

        outcome = validate_request(schema, {
            "params": {"id": VALID_UUID},
            "body": {"anything": 123},
            "query": "not even an object",
        })

        assert outcome.ok
        assert outcome.data == {"params": {"id": VALID_UUID}}

    def test_missing_required_facet_reports_facet_path(self):
        schema = RequestSchema(body=FacetSchema(fields={"flag": required(BooleanRule())}))

        outcome = validate_request(schema, {"body": None})

        assert _fields(outcome) == ["body"]
        assert _messages(outcome) == ["Required"]

    def test_missing_optional_facet_is_skipped(self):
        schema = RequestSchema(
            query=FacetSchema(fields={"q": optional(StringRule())}, required=False)
        )

        outcome = validate_request(schema, {})

        assert outcome.ok
        assert outcome.data == {"query": None}

    def test_non_object_facet_is_rejected(self):
        schema = RequestSchema(body=FacetSchema(fields={}))

        outcome = validate_request(schema, {"body": [1, 2, 3]})

        assert _messages(outcome) == ["Expected object, received array"]

    def test_unknown_keys_are_dropped_by_default(self):
        schema = RequestSchema(body=FacetSchema(fields={"flag": required(BooleanRule())}))

        outcome = validate_request(schema, {"body": {"flag": True, "extra": "ignored"}})

        assert outcome.ok
        assert outcome.data["body"] == {"flag": True}

    def test_unknown_keys_rejected_when_facet_forbids_them(self):
        schema = RequestSchema(
            body=FacetSchema(fields={"flag": required(BooleanRule())}, extra="forbid")
        )

        outcome = validate_request(schema, {"body": {"flag": True, "a": 1, "b": 2}})

        assert _fields(outcome) == ["body"]
        assert _messages(outcome) == ["Unrecognized key(s) in object: 'a', 'b'"]

    def test_errors_from_all_facets_are_collected(self):
        schema = RequestSchema(
            params=FacetSchema(fields={"id": required(UuidRule(message="bad id"))}),
            body=FacetSchema(fields={"flag": required(BooleanRule())}),
            query=FacetSchema(fields={"kind": required(EnumRule(values=("A", "B")))}),
        )

        outcome = validate_request(schema, {
            "params": {"id": "nope"},
            "body": {"flag": "yes"},
            "query": {"kind": "C"},
        })

        assert sorted(_fields(outcome)) == ["body.flag", "params.id", "query.kind"]

    def test_request_facets_are_not_mutated(self):
        schema = RequestSchema(body=FacetSchema(fields={"name": required(StringRule(trim=True))}))
        body = {"name": "  Ravi  ", "other": 1}

        outcome = validate_request(schema, {"body": body})

        assert outcome.data["body"] == {"name": "Ravi"}
        assert body == {"name": "  Ravi  ", "other": 1}


class TestFieldRules:
    """Per-rule behavior."""

    def test_missing_required_field(self):
        schema = RequestSchema(body=FacetSchema(fields={"flag": required(BooleanRule())}))

        outcome = validate_request(schema, {"body": {}})

        assert _fields(outcome) == ["body.flag"]
        assert _messages(outcome) == ["Required"]

    def test_missing_optional_field_is_omitted_from_data(self):
        schema = RequestSchema(body=FacetSchema(fields={"flag": optional(BooleanRule())}))

        outcome = validate_request(schema, {"body": {}})

        assert outcome.ok
        assert outcome.data["body"] == {}

    def test_null_optional_field_is_a_type_error(self):
        schema = RequestSchema(body=FacetSchema(fields={"flag": optional(BooleanRule())}))

        outcome = validate_request(schema, {"body": {"flag": None}})

        assert _messages(outcome) == ["Expected boolean, received null"]

    def test_boolean_does_not_coerce(self):
        errors = []
        check_value(BooleanRule(), "true", ("body", "flag"), errors)
        check_value(BooleanRule(), 1, ("body", "flag"), errors)

        assert [e.message for e in errors] == [
            "Expected boolean, received string",
            "Expected boolean, received number",
        ]

    def test_string_reports_every_failing_constraint(self):
        rule = StringRule(min_length=5, pattern=r"^\d+$", pattern_message="digits only")
        errors = []

        check_value(rule, "ab", ("body", "code"), errors)

        assert [e.message for e in errors] == [
            "String must contain at least 5 character(s)",
            "digits only",
        ]

    def test_trim_applies_after_checks_by_default(self):
        errors = []

        cleaned = check_value(StringRule(min_length=2, trim=True), "  a  ", ("body", "name"), errors)

        assert cleaned == "a"
        assert errors == []

    def test_raw_length_counts_surrounding_whitespace(self):
        errors = []

        cleaned = check_value(StringRule(max_length=3, trim=True), "ab   ", ("body", "name"), errors)

        assert cleaned == "ab"
        assert [e.message for e in errors] == ["String must contain at most 3 character(s)"]

    def test_trim_before_checks(self):
        errors = []
        rule = StringRule(min_length=2, trim=True, trim_before_checks=True)

        cleaned = check_value(rule, "  a  ", ("body", "name"), errors)

        assert cleaned == "a"
        assert len(errors) == 1

    def test_enum_message_lists_allowed_values(self):
        errors = []

        check_value(EnumRule(values=("A", "B")), "C", ("query", "kind"), errors)

        assert errors[0].message == "Invalid enum value. Expected 'A' | 'B', received 'C'"

    def test_uuid_rule(self):
        errors = []
        rule = UuidRule(message="Invalid ID format")

        check_value(rule, VALID_UUID, ("params", "id"), errors)
        check_value(rule, VALID_UUID.upper(), ("params", "id"), errors)
        assert errors == []

        check_value(rule, "3f1c2b9e8a4d4e2f9b6a1c2d3e4f5a6b", ("params", "id"), errors)
        check_value(rule, VALID_UUID + "\n", ("params", "id"), errors)
        check_value(rule, 42, ("params", "id"), errors)
        assert [e.message for e in errors] == [
            "Invalid ID format",
            "Invalid ID format",
            "Expected string, received number",
        ]

    def test_array_item_errors_carry_index_in_path(self):
        schema = RequestSchema(body=FacetSchema(fields={
            "ids": required(ArrayRule(items=UuidRule(message="bad"), min_items=1)),
        }))

        outcome = validate_request(schema, {"body": {"ids": [VALID_UUID, "x", VALID_UUID, "y"]}})

        assert _fields(outcome) == ["body.ids.1", "body.ids.3"]

    def test_array_min_items(self):
        rule = ArrayRule(items=UuidRule(), min_items=1, min_items_message="need one")
        errors = []

        check_value(rule, [], ("body", "ids"), errors)
        check_value(rule, "not-a-list", ("body", "ids"), errors)

        assert [e.message for e in errors] == ["need one", "Expected array, received string"]

    @pytest.mark.parametrize("value,expected", [
        (None, "null"),
        (True, "boolean"),
        (3, "number"),
        (2.5, "number"),
        ("s", "string"),
        ({}, "object"),
        ([], "array"),
    ])
    def test_describe_type(self, value, expected):
        assert describe_type(value) == expected


class TestSchemaAsData:
    """Schemas can be loaded from plain dicts."""

    def test_schema_loads_from_dict(self):
        schema = RequestSchema.model_validate({
            "params": {"fields": {"id": {"rule": {"kind": "uuid", "message": "bad id"}}}},
            "body": {
                "fields": {
                    "ids": {
                        "rule": {"kind": "array", "items": {"kind": "uuid"}, "min_items": 1},
                    },
                    "note": {"rule": {"kind": "string", "max_length": 3}, "required": False},
                },
                "extra": "forbid",
            },
        })

        outcome = validate_request(schema, {
            "params": {"id": "nope"},
            "body": {"ids": [], "note": "long"},
        })

        assert sorted(_fields(outcome)) == ["body.ids", "body.note", "params.id"]

    def test_schemas_are_immutable(self):
        rule = StringRule(min_length=1)

        with pytest.raises(Exception):
            rule.min_length = 5  # type: ignore[misc]


class TestUnexpectedFaults:
    """Faults inside the validator are raised, never reported as field errors."""

    def test_bad_pattern_raises(self):
        schema = RequestSchema(body=FacetSchema(fields={
            "code": required(StringRule(pattern="(unclosed")),
        }))

        with pytest.raises(re.error):
            validate_request(schema, {"body": {"code": "abc"}})

    def test_unknown_rule_type_raises(self):
        with pytest.raises(TypeError):
            check_value(object(), "x", ("body", "x"), [])
