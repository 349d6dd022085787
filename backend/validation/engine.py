"""
Interpreter for declarative request schemas.

validate_request() walks a RequestSchema against the raw request facets and
collects every violated constraint across body, query and params. Shape
violations never raise; they are returned as FieldError entries. Any
exception escaping this module (bad regex, unknown rule type, ...) is a
fault in the schema or the interpreter, not a client error.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from backend.schemas.common import FieldError
from backend.validation.rules import (
    ArrayRule,
    BooleanRule,
    EnumRule,
    FacetSchema,
    FieldRule,
    RequestSchema,
    StringRule,
    UuidRule,
)

FACETS: Tuple[str, ...] = ("body", "query", "params")

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

_MISSING = object()

Path = Tuple[str, ...]


@dataclass
class ValidationOutcome:
    """
    Result of validating one request.

    Attributes:
        data: Validated facets. Unknown keys are dropped and trimmed strings
              carry their trimmed value. Facets without a schema are absent.
        errors: One entry per violated constraint, in discovery order.
    """
    data: Dict[str, Any] = field(default_factory=dict)
    errors: List[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def describe_type(value: Any) -> str:
    """Name a value's JSON type the way error messages report it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def _path(parts: Path) -> str:
    return ".".join(parts)


def _issue(errors: List[FieldError], path: Path, message: str) -> None:
    errors.append(FieldError(field=_path(path), message=message))


def _type_issue(errors: List[FieldError], path: Path, expected: str, value: Any) -> None:
    _issue(errors, path, f"Expected {expected}, received {describe_type(value)}")


def _check_string(rule: StringRule, value: Any, path: Path, errors: List[FieldError]) -> Any:
    if not isinstance(value, str):
        _type_issue(errors, path, "string", value)
        return value

    if rule.trim and rule.trim_before_checks:
        value = value.strip()

    if rule.min_length is not None and len(value) < rule.min_length:
        _issue(
            errors, path,
            rule.min_length_message
            or f"String must contain at least {rule.min_length} character(s)",
        )
    if rule.max_length is not None and len(value) > rule.max_length:
        _issue(
            errors, path,
            rule.max_length_message
            or f"String must contain at most {rule.max_length} character(s)",
        )
    if rule.pattern is not None and re.search(rule.pattern, value) is None:
        _issue(errors, path, rule.pattern_message or "Invalid")

    if rule.trim:
        value = value.strip()
    return value


def _check_boolean(rule: BooleanRule, value: Any, path: Path, errors: List[FieldError]) -> Any:
    if not isinstance(value, bool):
        _type_issue(errors, path, "boolean", value)
    return value


def _check_enum(rule: EnumRule, value: Any, path: Path, errors: List[FieldError]) -> Any:
    expected = " | ".join(f"'{v}'" for v in rule.values)
    if not isinstance(value, str):
        _issue(errors, path, rule.message or f"Expected {expected}, received {describe_type(value)}")
    elif value not in rule.values:
        _issue(
            errors, path,
            rule.message or f"Invalid enum value. Expected {expected}, received '{value}'",
        )
    return value


def _check_uuid(rule: UuidRule, value: Any, path: Path, errors: List[FieldError]) -> Any:
    if not isinstance(value, str):
        _type_issue(errors, path, "string", value)
    elif UUID_PATTERN.fullmatch(value) is None:
        _issue(errors, path, rule.message)
    return value


def _check_array(rule: ArrayRule, value: Any, path: Path, errors: List[FieldError]) -> Any:
    if not isinstance(value, (list, tuple)):
        _type_issue(errors, path, "array", value)
        return value

    if rule.min_items is not None and len(value) < rule.min_items:
        _issue(
            errors, path,
            rule.min_items_message
            or f"Array must contain at least {rule.min_items} element(s)",
        )

    return [
        check_value(rule.items, item, path + (str(index),), errors)
        for index, item in enumerate(value)
    ]


_CHECKERS: Dict[type, Callable[[Any, Any, Path, List[FieldError]], Any]] = {
    StringRule: _check_string,
    BooleanRule: _check_boolean,
    EnumRule: _check_enum,
    UuidRule: _check_uuid,
    ArrayRule: _check_array,
}


def check_value(rule: Any, value: Any, path: Path, errors: List[FieldError]) -> Any:
    """
    Check one value against one rule, appending violations to `errors`.

    Returns the cleaned value (e.g. trimmed string).

    Raises:
        TypeError: If `rule` is not a known rule variant.
    """
    checker = _CHECKERS.get(type(rule))
    if checker is None:
        raise TypeError(f"Unsupported rule type: {type(rule).__name__}")
    return checker(rule, value, path, errors)


def _check_fields(
    fields: Mapping[str, FieldRule],
    value: Mapping[str, Any],
    path: Path,
    errors: List[FieldError],
) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for name, field_rule in fields.items():
        raw = value.get(name, _MISSING)
        if raw is _MISSING:
            if field_rule.required:
                _issue(errors, path + (name,), "Required")
            continue
        cleaned[name] = check_value(field_rule.rule, raw, path + (name,), errors)
    return cleaned


def check_facet(
    schema: FacetSchema,
    value: Any,
    name: str,
    errors: List[FieldError],
) -> Optional[Dict[str, Any]]:
    """Validate one facet. Returns the cleaned facet, or None when it is absent."""
    path: Path = (name,)

    if value is None:
        if schema.required:
            _issue(errors, path, "Required")
        return None

    if not isinstance(value, Mapping):
        _type_issue(errors, path, "object", value)
        return None

    cleaned = _check_fields(schema.fields, value, path, errors)

    if schema.extra == "forbid":
        unknown = [key for key in value if key not in schema.fields]
        if unknown:
            keys = ", ".join(f"'{key}'" for key in unknown)
            _issue(errors, path, f"Unrecognized key(s) in object: {keys}")

    return cleaned


def validate_request(
    schema: RequestSchema,
    facets: Mapping[str, Any],
    order: Sequence[str] = FACETS,
) -> ValidationOutcome:
    """
    Validate the request facets against a schema.

    Args:
        schema: The declarative request schema
        facets: Raw facet values keyed by "body", "query", "params".
                A missing key is treated as an absent facet.
        order: Facet visiting order (affects only the order of errors)

    Returns:
        ValidationOutcome with cleaned data and every violation found.
    """
    outcome = ValidationOutcome()
    for name in order:
        facet_schema = schema.facet(name)  # type: ignore[arg-type]
        if facet_schema is None:
            continue
        outcome.data[name] = check_facet(facet_schema, facets.get(name), name, outcome.errors)
    return outcome
