"""
FastAPI dependency functions for authentication.

The auth token is an HS256 JWT issued by this backend at login and stored
in an HTTP-only cookie. Its payload carries `userId` and `role`.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, get_args

from fastapi import Request
from jwt import decode
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError

from backend.config import settings
from backend.schemas.users import UserRole
from backend.utils.errors import AppError

logger = logging.getLogger(__name__)

USER_ROLES = get_args(UserRole)


@dataclass
class AuthenticatedUser:
    """
    Represents an authenticated user.

    Attributes:
        user_id: The user's UUID from the token's 'userId' claim
        role: PG_OWNER or RESIDENT
    """
    user_id: str
    role: str

    @property
    def is_pg_owner(self) -> bool:
        return self.role == "PG_OWNER"


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify the token signature and expiry and return its payload.

    Raises:
        AppError: 401 if the token is expired or invalid
    """
    try:
        return decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_signature": True, "verify_exp": True},
        )
    except ExpiredSignatureError:
        logger.warning("Token has expired")
        raise AppError("Token expired", 401)
    except InvalidTokenError as e:
        logger.warning(f"Invalid token: {str(e)}")
        raise AppError("Invalid token", 401)


async def get_authenticated_user(request: Request) -> AuthenticatedUser:
    """
    Read the auth cookie and return the authenticated user.

    Raises:
        AppError: 401 if the cookie is missing or the token is invalid/expired

    Usage:
        @router.get("/protected")
        async def protected_route(
            auth_user: Annotated[AuthenticatedUser, Depends(get_authenticated_user)]
        ):
            ...
    """
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)

    if not token:
        logger.info("No token found in cookies")
        raise AppError("No token provided", 401)

    payload = decode_token(token)

    user_id = payload.get("userId")
    role = payload.get("role")

    if not user_id or role not in USER_ROLES:
        logger.error("Token payload missing userId or carrying unknown role")
        raise AppError("Invalid token", 401)

    return AuthenticatedUser(user_id=str(user_id), role=str(role))


def ensure_pg_owner(auth_user: AuthenticatedUser, action: str) -> None:
    """
    Reject non-owners with a message naming the attempted action.

    Raises:
        AppError: 403 with "Only PG owners can <action>"
    """
    if not auth_user.is_pg_owner:
        logger.warning(f"User {auth_user.user_id} ({auth_user.role}) tried to {action}")
        raise AppError(f"Only PG owners can {action}", 403)
