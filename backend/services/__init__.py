"""
Service layer for the PG Community backend.

Contains business logic that:
- Enforces ownership and access rules before touching data
- Talks to Supabase tables
- Raises AppError for failures a client can act on

Services act as the glue between routes (HTTP layer) and the database.
"""

from .technician_service import (
    assign_technician_to_pgs,
    create_technician,
    delete_technician,
    get_available_technicians_from_other_pgs,
    get_technician_by_id,
    get_technician_workload,
    get_technicians_by_owner,
    get_technicians_for_pg,
    remove_technician_from_pgs,
    update_technician,
    update_technician_availability,
    verify_pg_access,
    verify_pg_ownership,
    verify_technician_ownership,
)

__all__ = [
    "assign_technician_to_pgs",
    "create_technician",
    "delete_technician",
    "get_available_technicians_from_other_pgs",
    "get_technician_by_id",
    "get_technician_workload",
    "get_technicians_by_owner",
    "get_technicians_for_pg",
    "remove_technician_from_pgs",
    "update_technician",
    "update_technician_availability",
    "verify_pg_access",
    "verify_pg_ownership",
    "verify_technician_ownership",
]
