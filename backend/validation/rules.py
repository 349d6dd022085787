"""
Declarative request schemas.

A RequestSchema describes the expected shape of the three request facets
(body, query, params). Each facet maps field names to a FieldRule, and each
FieldRule wraps exactly one Rule variant. Rule is a tagged union keyed on
`kind`, so a schema can be written in code or loaded from plain JSON:

    >>> RequestSchema.model_validate({
    ...     "params": {"fields": {"id": {"rule": {"kind": "uuid"}}}}
    ... })

Schemas carry no behaviour; backend.validation.engine interprets them.
"""

from typing import Annotated, Dict, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

FacetName = Literal["body", "query", "params"]
ExtraPolicy = Literal["ignore", "forbid"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class StringRule(_Frozen):
    """String value with optional length bounds and a regex pattern."""
    kind: Literal["string"] = "string"
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    pattern: Optional[str] = Field(None, description="Python regex tested with re.search")
    trim: bool = Field(False, description="Strip surrounding whitespace from the validated value")
    trim_before_checks: bool = Field(
        False, description="Check the stripped value instead of the raw one"
    )
    min_length_message: Optional[str] = None
    max_length_message: Optional[str] = None
    pattern_message: Optional[str] = None


class BooleanRule(_Frozen):
    """Strict boolean (no string or integer coercion)."""
    kind: Literal["boolean"] = "boolean"


class EnumRule(_Frozen):
    """String restricted to a fixed set of values."""
    kind: Literal["enum"] = "enum"
    values: Tuple[str, ...]
    message: Optional[str] = None


class UuidRule(_Frozen):
    """UUID-formatted string (8-4-4-4-12 hex groups)."""
    kind: Literal["uuid"] = "uuid"
    message: str = "Invalid uuid"


class ArrayRule(_Frozen):
    """List whose elements all satisfy `items`."""
    kind: Literal["array"] = "array"
    items: "Rule"
    min_items: Optional[int] = Field(None, ge=0)
    min_items_message: Optional[str] = None


Rule = Annotated[
    Union[StringRule, BooleanRule, EnumRule, UuidRule, ArrayRule],
    Field(discriminator="kind"),
]

ArrayRule.model_rebuild()


class FieldRule(_Frozen):
    """A Rule plus whether the field may be omitted."""
    rule: Rule
    required: bool = True


class FacetSchema(_Frozen):
    """
    Expected shape of one request facet.

    `extra` decides what happens to keys not listed in `fields`:
    "ignore" drops them silently, "forbid" reports them as a violation.
    """
    fields: Dict[str, FieldRule] = Field(default_factory=dict)
    required: bool = True
    extra: ExtraPolicy = "ignore"


class RequestSchema(_Frozen):
    """Expected shape of a whole request. A facet left as None is not validated."""
    body: Optional[FacetSchema] = None
    query: Optional[FacetSchema] = None
    params: Optional[FacetSchema] = None

    def facet(self, name: FacetName) -> Optional[FacetSchema]:
        return getattr(self, name)


def required(rule: Rule) -> FieldRule:
    return FieldRule(rule=rule, required=True)


def optional(rule: Rule) -> FieldRule:
    return FieldRule(rule=rule, required=False)
