"""
FastAPI application entry point for the PG Community backend.

This module creates the FastAPI app instance, registers error handlers
and all routers.
"""

import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from backend.config import settings
from backend.routes.auth import router as auth_router
from backend.routes.health import router as health_router
from backend.routes.technicians import router as technicians_router
from backend.schemas.common import ErrorResponse
from backend.utils.errors import AppError
from backend.utils.logging import configure_logging
from backend.validation import RequestValidationFailed, validation_failed_handler

configure_logging()

logger = logging.getLogger(__name__)


def _get_cors_origins() -> list[str]:
    """
    Get allowed CORS origins.

    The frontend sends the auth cookie with every request, so credentials
    are allowed and the origin list must be explicit (never "*").

    Returns:
        List of allowed origin URLs.
    """
    origins = [origin.strip() for origin in settings.FRONTEND_URL.split(",") if origin.strip()]
    logger.info(f"CORS configured for {settings.ENVIRONMENT} with {len(origins)} allowed origins")
    return origins


# Create FastAPI app
app = FastAPI(
    title="PG Community API",
    description="Backend service for the PG community management app",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_exception_handler(RequestValidationFailed, validation_failed_handler)  # type: ignore[arg-type]


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render operational errors raised by services and auth dependencies."""
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(message=exc.message).model_dump(),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    """Last resort for faults: log with traceback, hide details from the client."""
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(message="Internal server error").model_dump(),
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(technicians_router)

logger.info("FastAPI app initialized successfully")
