"""
FastAPI integration for declarative request validation.

Usage:
    @router.put("/{id}/availability")
    async def update_availability(
        payload: Annotated[Dict[str, Any], Depends(validate(UPDATE_TECHNICIAN_AVAILABILITY))],
    ):
        technician_id = payload["params"]["id"]

On success the dependency hands the validated facets to the handler and the
request itself is left untouched. On failure it raises
RequestValidationFailed, which backend.main renders as HTTP 400.
"""

import json
from typing import Any, Awaitable, Callable, Dict, List

from fastapi import Request, status
from fastapi.responses import JSONResponse

from backend.schemas.common import FieldError, ValidationErrorResponse
from backend.utils.logging import get_logger
from backend.validation.engine import validate_request
from backend.validation.rules import RequestSchema

logger = get_logger(__name__)


class RequestValidationFailed(Exception):
    """Raised when one or more request fields violate their declared rules."""

    def __init__(self, errors: List[FieldError]):
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


async def read_facets(request: Request) -> Dict[str, Any]:
    """
    Collect body, query and path params from a request.

    An empty body is read as an empty object, so a missing body reports
    each required field rather than the body as a whole.

    Raises:
        RequestValidationFailed: If the body is not valid JSON.
    """
    body: Any = {}
    raw = await request.body()
    if raw.strip():
        try:
            body = json.loads(raw)
        except ValueError:
            raise RequestValidationFailed(
                [FieldError(field="body", message="Malformed JSON body")]
            )

    return {
        "body": body,
        "query": dict(request.query_params),
        "params": dict(request.path_params),
    }


def validate(schema: RequestSchema) -> Callable[[Request], Awaitable[Dict[str, Any]]]:
    """
    Build a FastAPI dependency that gates a route on `schema`.

    Args:
        schema: Declarative schema for the route's body/query/params

    Returns:
        Async dependency returning the validated facets as a dict
    """
    async def dependency(request: Request) -> Dict[str, Any]:
        facets = await read_facets(request)
        outcome = validate_request(schema, facets)

        if not outcome.ok:
            logger.info(
                f"Validation failed on {request.method} {request.url.path}: "
                f"{[error.field for error in outcome.errors]}"
            )
            raise RequestValidationFailed(outcome.errors)

        return outcome.data

    return dependency


async def validation_failed_handler(request: Request, exc: RequestValidationFailed) -> JSONResponse:
    """Render RequestValidationFailed as the 400 validation envelope."""
    content = ValidationErrorResponse(errors=exc.errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=content.model_dump(),
    )
