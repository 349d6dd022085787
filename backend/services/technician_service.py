"""
Technician service.

Handles technician CRUD, PG community assignments, workload statistics and
the ownership/access checks that guard them. Technicians are shared across
the PG communities of one owner through technician_pg_assignment rows.

Failures a client can act on raise AppError (403 access denied, 404 not
found, 400 blocked delete). Anything else propagates as an unexpected fault.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, cast

from supabase import Client

from backend.utils.errors import AppError

logger = logging.getLogger(__name__)

TECHNICIAN_SELECT = (
    "*, technician_pg_assignment(pg_community_id, pg_community(id, name, pg_code))"
)
TASK_SELECT = "id, title, priority_level, status, pg_community(id, name, pg_code)"

# Request field -> technician column
UPDATABLE_COLUMNS = {
    "name": "name",
    "phoneNumber": "phone_number",
    "speciality": "speciality",
    "isAvailable": "is_available",
}


def _rows(result: Any) -> List[Dict[str, Any]]:
    return cast(List[Dict[str, Any]], result.data or [])


async def _count_active_tasks(supabase_client: Client, technician_id: str) -> Tuple[int, int]:
    """Count unresolved issues and incomplete service requests for a technician."""
    issues = (
        supabase_client.table("issue")
        .select("id", count="exact")
        .eq("assigned_technician_id", technician_id)
        .neq("status", "RESOLVED")
        .execute()
    )
    services = (
        supabase_client.table("service_request")
        .select("id", count="exact")
        .eq("assigned_technician_id", technician_id)
        .neq("status", "COMPLETED")
        .execute()
    )
    return issues.count or 0, services.count or 0


async def _with_task_counts(supabase_client: Client, technician: Dict[str, Any]) -> Dict[str, Any]:
    active_issues, active_services = await _count_active_tasks(supabase_client, technician["id"])
    return {**technician, "active_issues": active_issues, "active_services": active_services}


async def _fetch_technicians(
    supabase_client: Client,
    technician_ids: Iterable[str],
    speciality: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Fetch technicians by id, ordered by name, with task counts attached."""
    ids = sorted(set(technician_ids))
    if not ids:
        return []

    query = supabase_client.table("technician").select(TECHNICIAN_SELECT).in_("id", ids)
    if speciality:
        query = query.eq("speciality", speciality)

    technicians = _rows(query.order("name").execute())
    return [await _with_task_counts(supabase_client, t) for t in technicians]


async def _technician_ids_for_pgs(supabase_client: Client, pg_community_ids: List[str]) -> Set[str]:
    if not pg_community_ids:
        return set()
    result = (
        supabase_client.table("technician_pg_assignment")
        .select("technician_id")
        .in_("pg_community_id", pg_community_ids)
        .execute()
    )
    return {str(row["technician_id"]) for row in _rows(result)}


async def _owned_pg_ids(supabase_client: Client, owner_id: str) -> List[str]:
    result = (
        supabase_client.table("pg_community")
        .select("id")
        .eq("owner_id", owner_id)
        .execute()
    )
    return [str(row["id"]) for row in _rows(result)]


def _only_assignments_to(technician: Dict[str, Any], pg_ids: Iterable[str]) -> Dict[str, Any]:
    allowed = set(pg_ids)
    assignments = technician.get("technician_pg_assignment") or []
    return {
        **technician,
        "technician_pg_assignment": [a for a in assignments if a.get("pg_community_id") in allowed],
    }


# --- Reads ---

async def get_technician_by_id(supabase_client: Client, technician_id: str) -> Dict[str, Any]:
    """
    Fetch a technician with all assignments and open task counts.

    Raises:
        AppError: 404 if the technician does not exist
    """
    logger.debug(f"Fetching technician {technician_id}")

    result = (
        supabase_client.table("technician")
        .select(TECHNICIAN_SELECT)
        .eq("id", technician_id)
        .execute()
    )
    rows = _rows(result)
    if not rows:
        logger.warning(f"Technician {technician_id} not found")
        raise AppError("Technician not found", 404)

    return await _with_task_counts(supabase_client, rows[0])


async def get_technicians_for_pg(
    supabase_client: Client,
    pg_community_id: str,
    speciality: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """List technicians assigned to a PG community, optionally filtered by speciality."""
    technician_ids = await _technician_ids_for_pgs(supabase_client, [pg_community_id])
    technicians = await _fetch_technicians(supabase_client, technician_ids, speciality)

    logger.info(f"Found {len(technicians)} technicians for PG {pg_community_id}")
    return technicians


async def get_technicians_by_owner(supabase_client: Client, owner_id: str) -> List[Dict[str, Any]]:
    """
    List every technician assigned to any of the owner's PG communities.

    Each technician's assignments are narrowed to the owner's communities.
    """
    owned = await _owned_pg_ids(supabase_client, owner_id)
    technician_ids = await _technician_ids_for_pgs(supabase_client, owned)
    technicians = await _fetch_technicians(supabase_client, technician_ids)

    logger.info(f"Found {len(technicians)} technicians for owner {owner_id}")
    return [_only_assignments_to(t, owned) for t in technicians]


async def get_available_technicians_from_other_pgs(
    supabase_client: Client,
    current_pg_id: str,
    owner_id: str,
) -> List[Dict[str, Any]]:
    """
    List technicians from the owner's other communities that could be imported.

    A technician qualifies when assigned to at least one other PG of the same
    owner and not yet assigned to `current_pg_id`.
    """
    owned = await _owned_pg_ids(supabase_client, owner_id)
    others = [pg_id for pg_id in owned if pg_id != current_pg_id]

    candidates = await _technician_ids_for_pgs(supabase_client, others)
    already_here = await _technician_ids_for_pgs(supabase_client, [current_pg_id])
    technicians = await _fetch_technicians(supabase_client, candidates - already_here)

    logger.info(
        f"Found {len(technicians)} importable technicians for PG {current_pg_id}"
    )
    return [_only_assignments_to(t, owned) for t in technicians]


async def get_technician_workload(supabase_client: Client, technician_id: str) -> Dict[str, Any]:
    """
    Build workload statistics for a technician.

    Returns:
        Dict with the technician, its open issues and services, and counts
    """
    technician = await get_technician_by_id(supabase_client, technician_id)

    issues = _rows(
        supabase_client.table("issue")
        .select(TASK_SELECT)
        .eq("assigned_technician_id", technician_id)
        .neq("status", "RESOLVED")
        .execute()
    )
    services = _rows(
        supabase_client.table("service_request")
        .select(TASK_SELECT)
        .eq("assigned_technician_id", technician_id)
        .neq("status", "COMPLETED")
        .execute()
    )

    return {
        "technician": technician,
        "issues": issues,
        "services": services,
        "workload": {
            "active_issues": len(issues),
            "active_services": len(services),
            "total_active_tasks": len(issues) + len(services),
            "assigned_pgs": len(technician.get("technician_pg_assignment") or []),
        },
    }


# --- Writes ---

async def create_technician(
    supabase_client: Client,
    name: str,
    phone_number: str,
    speciality: str,
    pg_community_id: str,
    is_available: Optional[bool] = None,
) -> Dict[str, Any]:
    """
    Create a technician and assign it to its first PG community.

    Args:
        supabase_client: Supabase client
        name: Technician full name (already trimmed by validation)
        phone_number: Contact number
        speciality: One of the technician speciality values
        pg_community_id: PG community the technician starts in
        is_available: Availability flag (defaults to True)

    Returns:
        The created technician with assignments and task counts
    """
    technician_data = {
        "name": name,
        "phone_number": phone_number,
        "speciality": speciality,
        "is_available": True if is_available is None else is_available,
    }

    logger.info(f"Creating technician for PG {pg_community_id}: speciality={speciality}")

    result = supabase_client.table("technician").insert(technician_data).execute()
    rows = _rows(result)
    if not rows:
        raise Exception("Failed to create technician: no data returned")

    technician_id = str(rows[0]["id"])

    supabase_client.table("technician_pg_assignment").insert({
        "technician_id": technician_id,
        "pg_community_id": pg_community_id,
    }).execute()

    logger.info(f"Technician created successfully: {technician_id}")
    return await get_technician_by_id(supabase_client, technician_id)


async def assign_technician_to_pgs(
    supabase_client: Client,
    technician_id: str,
    pg_community_ids: List[str],
) -> Dict[str, Any]:
    """
    Assign a technician to additional PG communities.

    Existing assignments are left as they are.

    Raises:
        AppError: 404 if the technician or any PG community does not exist
    """
    existing = _rows(
        supabase_client.table("technician").select("id").eq("id", technician_id).execute()
    )
    if not existing:
        raise AppError("Technician not found", 404)

    unique_ids = list(dict.fromkeys(pg_community_ids))
    communities = _rows(
        supabase_client.table("pg_community").select("id").in_("id", unique_ids).execute()
    )
    if len(communities) != len(unique_ids):
        raise AppError("One or more PG communities not found", 404)

    assignments = [
        {"technician_id": technician_id, "pg_community_id": pg_id} for pg_id in unique_ids
    ]
    supabase_client.table("technician_pg_assignment").upsert(
        assignments,
        on_conflict="technician_id,pg_community_id",
        ignore_duplicates=True,
    ).execute()

    logger.info(f"Technician {technician_id} assigned to {len(unique_ids)} PG communities")
    return await get_technician_by_id(supabase_client, technician_id)


async def remove_technician_from_pgs(
    supabase_client: Client,
    technician_id: str,
    pg_community_ids: List[str],
) -> Dict[str, Any]:
    """Detach a technician from the given PG communities."""
    (
        supabase_client.table("technician_pg_assignment")
        .delete()
        .eq("technician_id", technician_id)
        .in_("pg_community_id", pg_community_ids)
        .execute()
    )

    logger.info(f"Technician {technician_id} removed from {len(pg_community_ids)} PG communities")
    return await get_technician_by_id(supabase_client, technician_id)


async def update_technician_availability(
    supabase_client: Client,
    technician_id: str,
    is_available: bool,
) -> Dict[str, Any]:
    """Set the technician's availability flag."""
    return await update_technician(supabase_client, technician_id, {"isAvailable": is_available})


async def update_technician(
    supabase_client: Client,
    technician_id: str,
    updates: Dict[str, Any],
) -> Dict[str, Any]:
    """
    Apply a partial update to a technician.

    Args:
        supabase_client: Supabase client
        technician_id: Technician UUID
        updates: Validated request fields (camelCase); omitted fields are unchanged

    Raises:
        AppError: 404 if the technician does not exist
    """
    columns = {
        UPDATABLE_COLUMNS[key]: value
        for key, value in updates.items()
        if key in UPDATABLE_COLUMNS
    }

    if not columns:
        logger.info(f"No fields to update for technician {technician_id}")
        return await get_technician_by_id(supabase_client, technician_id)

    logger.info(f"Updating technician {technician_id}: fields={sorted(columns)}")

    result = (
        supabase_client.table("technician")
        .update(columns)
        .eq("id", technician_id)
        .execute()
    )
    if not _rows(result):
        raise AppError("Technician not found", 404)

    return await get_technician_by_id(supabase_client, technician_id)


async def delete_technician(supabase_client: Client, technician_id: str) -> None:
    """
    Delete a technician and its assignments.

    Raises:
        AppError: 404 if the technician does not exist,
                  400 if it still has open issues or services
    """
    technician = await get_technician_by_id(supabase_client, technician_id)

    total_active = technician["active_issues"] + technician["active_services"]
    if total_active > 0:
        logger.warning(
            f"Refusing to delete technician {technician_id}: {total_active} active tasks"
        )
        raise AppError("Cannot delete technician with active assignments", 400)

    supabase_client.table("technician_pg_assignment").delete().eq(
        "technician_id", technician_id
    ).execute()
    supabase_client.table("technician").delete().eq("id", technician_id).execute()

    logger.info(f"Technician {technician_id} deleted")


# --- Access checks ---

async def verify_pg_ownership(
    supabase_client: Client,
    pg_community_id: str,
    owner_id: str,
) -> Dict[str, Any]:
    """
    Ensure the PG community exists and belongs to `owner_id`.

    Raises:
        AppError: 403 otherwise
    """
    rows = _rows(
        supabase_client.table("pg_community")
        .select("*")
        .eq("id", pg_community_id)
        .eq("owner_id", owner_id)
        .execute()
    )
    if not rows:
        logger.warning(f"PG ownership check failed: pg={pg_community_id}, user={owner_id}")
        raise AppError("PG community not found or access denied", 403)
    return rows[0]


async def verify_technician_ownership(
    supabase_client: Client,
    technician_id: str,
    owner_id: str,
) -> None:
    """
    Ensure the technician is assigned to at least one of the owner's communities.

    Raises:
        AppError: 403 otherwise
    """
    owned = await _owned_pg_ids(supabase_client, owner_id)
    rows: List[Dict[str, Any]] = []
    if owned:
        rows = _rows(
            supabase_client.table("technician_pg_assignment")
            .select("technician_id")
            .eq("technician_id", technician_id)
            .in_("pg_community_id", owned)
            .execute()
        )
    if not rows:
        logger.warning(
            f"Technician ownership check failed: technician={technician_id}, user={owner_id}"
        )
        raise AppError("Technician not found or access denied", 403)


async def verify_pg_access(
    supabase_client: Client,
    pg_community_id: str,
    user_id: str,
    role: str,
) -> None:
    """
    Ensure the user may read a PG community: its owner, or one of its residents.

    Raises:
        AppError: 403 otherwise
    """
    if role == "PG_OWNER":
        await verify_pg_ownership(supabase_client, pg_community_id, user_id)
        return

    if role == "RESIDENT":
        rows = _rows(
            supabase_client.table("app_user")
            .select("id")
            .eq("id", user_id)
            .eq("pg_community_id", pg_community_id)
            .execute()
        )
        if not rows:
            raise AppError("Access denied to this PG community", 403)
        return

    raise AppError("Invalid user role", 403)
