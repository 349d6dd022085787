"""
Supabase client factory.

The backend authenticates users itself (signed cookie JWT, see
backend/auth/dependencies.py), so database access goes through a server
key. Access control is enforced in the service layer by the verify_*
functions before any read or write on behalf of a user.
"""

import logging

from backend.config import settings
from supabase import Client, create_client

logger = logging.getLogger(__name__)


def get_supabase_client() -> Client:
    """
    Create a Supabase client for the configured project.

    Returns:
        A Supabase client authenticated with SUPABASE_KEY.

    Raises:
        ValueError: If SUPABASE_URL or SUPABASE_KEY is not configured.
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise ValueError(
            "SUPABASE_URL and SUPABASE_KEY must be configured to access the database."
        )

    client: Client = create_client(
        supabase_url=settings.SUPABASE_URL,
        supabase_key=settings.SUPABASE_KEY
    )

    logger.debug("Created Supabase client")

    return client
