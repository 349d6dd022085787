"""
Auth API endpoints.

Provides session operations for the cookie-based auth token:
- GET /api/auth/me - Get authenticated user identity
- GET /api/auth/logout - Clear the auth cookie

Login and registration are handled by the identity service that issues
the token.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from backend.auth.dependencies import AuthenticatedUser, get_authenticated_user
from backend.config import settings
from backend.schemas.auth import AuthIdentity, AuthMeResponse
from backend.schemas.common import SuccessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get(
    "/me",
    response_model=AuthMeResponse,
    status_code=status.HTTP_200_OK,
    summary="Get authenticated user identity",
    description="""
    Return the identity stored in the auth cookie.

    Use this for:
    - App boot to hydrate the client session
    - Confirming the token is still valid
    """
)
async def get_auth_me(
    auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
) -> AuthMeResponse:
    return AuthMeResponse(
        message="Authenticated",
        data=AuthIdentity(user_id=auth_user.user_id, role=auth_user.role),  # type: ignore[arg-type]
    )


@router.get(
    "/logout",
    response_model=SuccessResponse,
    status_code=status.HTTP_200_OK,
    summary="Log out",
    description="Clear the auth cookie. Succeeds whether or not a session exists.",
)
async def logout(response: Response) -> SuccessResponse:
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.is_production(),
    )
    logger.info("Auth cookie cleared")
    return SuccessResponse(message="Logged out successfully")
