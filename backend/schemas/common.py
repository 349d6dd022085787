"""
Shared response envelopes.

Every endpoint answers with the same top-level shape:
- success: {"success": true, "message": ..., "data": ...}
- failure: {"success": false, "message": ...} (plus "errors" for validation)
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class FieldError(BaseModel):
    """A single failing constraint, addressed by its dotted request path."""
    field: str = Field(..., description="Dot-joined path, e.g. 'body.phoneNumber'")
    message: str = Field(..., description="Human-readable reason")


class ErrorResponse(BaseModel):
    """Envelope for operational errors (AppError) and unexpected faults."""
    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Client-displayable error message")


class ValidationErrorResponse(ErrorResponse):
    """Envelope returned with HTTP 400 when request validation fails."""
    message: str = Field("Validation failed", description="Fixed validation message")
    errors: List[FieldError] = Field(..., description="Every violated constraint")

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "example": {
                "success": False,
                "message": "Validation failed",
                "errors": [
                    {"field": "body.phoneNumber", "message": "Invalid phone number format"}
                ]
            }
        }


class SuccessResponse(BaseModel):
    """Envelope for successful responses."""
    success: bool = Field(True, description="Always true for successful responses")
    message: str = Field(..., description="Human-readable outcome")
    data: Optional[Any] = Field(None, description="Response payload")
