"""
Schema for the public liveness probe.
"""

from pydantic import BaseModel, Field

SERVICE_NAME = "pg-community-backend"


class HealthResponse(BaseModel):
    """Body of GET /health. Answered without touching Supabase or the auth cookie."""

    status: str = Field("ok", description="Always 'ok' while the process serves requests")
    service: str = Field(SERVICE_NAME, description="Service identifier")
    environment: str = Field(..., description="Deployment environment from ENVIRONMENT")
    version: str = Field(..., description="API version reported in the OpenAPI document")

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "ok",
                "service": SERVICE_NAME,
                "environment": "production",
                "version": "0.1.0",
            }
        }
    }
