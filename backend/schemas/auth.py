"""
Pydantic schemas for auth endpoints.
"""

from pydantic import Field

from backend.schemas.common import SuccessResponse
from backend.schemas.users import CamelModel, UserRole


class AuthIdentity(CamelModel):
    """Identity carried by the auth cookie."""
    user_id: str = Field(..., description="User UUID from the token's userId claim")
    role: UserRole = Field(..., description="PG_OWNER or RESIDENT")


class AuthMeResponse(SuccessResponse):
    """
    Response for GET /api/auth/me.

    Used by the client on boot to confirm the session is still valid.
    """
    data: AuthIdentity
