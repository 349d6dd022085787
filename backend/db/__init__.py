"""
Database access layer for the PG Community backend.

Tables used by this service:
- technician, technician_pg_assignment
- pg_community, app_user
- issue, service_request (open task counts)

DO NOT define table schemas or migrations here.
"""

from .client import get_supabase_client

__all__ = ["get_supabase_client"]
