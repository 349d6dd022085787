"""
Declarative request validation.

- rules: schema data model (RequestSchema, FacetSchema, FieldRule, Rule variants)
- engine: interpreter collecting every violation across body/query/params
- gate: FastAPI dependency and 400 error rendering
"""

from .engine import ValidationOutcome, validate_request
from .gate import RequestValidationFailed, validate, validation_failed_handler
from .rules import (
    ArrayRule,
    BooleanRule,
    EnumRule,
    FacetSchema,
    FieldRule,
    RequestSchema,
    StringRule,
    UuidRule,
    optional,
    required,
)

__all__ = [
    "ArrayRule",
    "BooleanRule",
    "EnumRule",
    "FacetSchema",
    "FieldRule",
    "RequestSchema",
    "RequestValidationFailed",
    "StringRule",
    "UuidRule",
    "ValidationOutcome",
    "optional",
    "required",
    "validate",
    "validate_request",
    "validation_failed_handler",
]
