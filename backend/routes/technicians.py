"""
Technician API endpoints.

Technicians are tradespeople (plumbers, electricians, ...) that PG owners
register once and assign to one or more of their PG communities. Residents
can list the technicians of the community they live in.

Every endpoint:
1. Authenticates via the auth cookie (get_authenticated_user)
2. Validates body/query/params against a declarative schema (validate)
3. Checks role and ownership in the service layer
4. Answers with the {"success", "message", "data"} envelope
"""

import logging
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, status

from backend.auth.dependencies import (
    AuthenticatedUser,
    ensure_pg_owner,
    get_authenticated_user,
)
from backend.db.client import get_supabase_client
from backend.schemas.common import SuccessResponse
from backend.schemas.technicians import (
    ASSIGN_TECHNICIAN,
    CREATE_TECHNICIAN,
    GET_AVAILABLE_TECHNICIANS,
    GET_TECHNICIAN_BY_ID,
    GET_TECHNICIANS_FOR_PG,
    REMOVE_TECHNICIAN,
    UPDATE_TECHNICIAN,
    UPDATE_TECHNICIAN_AVAILABILITY,
    TechnicianEnvelope,
    TechnicianListEnvelope,
    TechnicianResponse,
    TechnicianWorkloadEnvelope,
    TechnicianWorkloadResponse,
)
from backend.services.technician_service import (
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
from backend.validation import validate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/technician", tags=["technicians"])

CurrentUser = Annotated[AuthenticatedUser, Depends(get_authenticated_user)]


def _to_technician_response(row: Dict[str, Any]) -> TechnicianResponse:
    """Map a technician row (with embedded assignments) to the response model."""
    return TechnicianResponse(
        id=str(row.get("id")),
        name=row.get("name", ""),
        phone_number=row.get("phone_number", ""),
        speciality=row.get("speciality", "GENERAL"),
        is_available=bool(row.get("is_available", True)),
        pg_assignments=row.get("technician_pg_assignment") or [],
        active_issues=int(row.get("active_issues", 0)),
        active_services=int(row.get("active_services", 0)),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def _to_technician_list(rows: List[Dict[str, Any]]) -> List[TechnicianResponse]:
    return [_to_technician_response(row) for row in rows]


@router.post(
    "",
    response_model=TechnicianEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create technician",
    description="""
    Create a technician and assign it to one of the owner's PG communities.

    Security:
    - PG owners only
    - The target PG community must belong to the caller
    """
)
async def create_new_technician(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(CREATE_TECHNICIAN))],
) -> TechnicianEnvelope:
    ensure_pg_owner(auth_user, "create technicians")
    body = payload["body"]

    supabase_client = get_supabase_client()
    await verify_pg_ownership(supabase_client, body["pgCommunityId"], auth_user.user_id)

    technician = await create_technician(
        supabase_client=supabase_client,
        name=body["name"],
        phone_number=body["phoneNumber"],
        speciality=body["speciality"],
        pg_community_id=body["pgCommunityId"],
        is_available=body.get("isAvailable"),
    )

    return TechnicianEnvelope(
        message="Technician created successfully",
        data=_to_technician_response(technician),
    )


@router.get(
    "/pg/{pgCommunityId}",
    response_model=TechnicianListEnvelope,
    summary="List technicians of a PG community",
    description="""
    List technicians assigned to a PG community, ordered by name.

    Optional query parameter `speciality` filters by trade.

    Security:
    - The community's owner, or a resident of that community
    """
)
async def list_technicians_for_pg(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(GET_TECHNICIANS_FOR_PG))],
) -> TechnicianListEnvelope:
    pg_community_id = payload["params"]["pgCommunityId"]
    speciality = (payload.get("query") or {}).get("speciality")

    supabase_client = get_supabase_client()
    await verify_pg_access(supabase_client, pg_community_id, auth_user.user_id, auth_user.role)

    technicians = await get_technicians_for_pg(supabase_client, pg_community_id, speciality)

    return TechnicianListEnvelope(
        message="Technicians retrieved successfully",
        data=_to_technician_list(technicians),
    )


@router.get(
    "/owner/available/{pgCommunityId}",
    response_model=TechnicianListEnvelope,
    summary="List importable technicians",
    description="""
    List technicians working in the owner's other PG communities that are
    not yet assigned to this one.
    """
)
async def list_available_technicians(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(GET_AVAILABLE_TECHNICIANS))],
) -> TechnicianListEnvelope:
    ensure_pg_owner(auth_user, "view available technicians")
    pg_community_id = payload["params"]["pgCommunityId"]

    supabase_client = get_supabase_client()
    await verify_pg_ownership(supabase_client, pg_community_id, auth_user.user_id)

    technicians = await get_available_technicians_from_other_pgs(
        supabase_client, pg_community_id, auth_user.user_id
    )

    return TechnicianListEnvelope(
        message="Available technicians retrieved successfully",
        data=_to_technician_list(technicians),
    )


@router.get(
    "/owner/all",
    response_model=TechnicianListEnvelope,
    summary="List all of the owner's technicians",
)
async def list_owner_technicians(auth_user: CurrentUser) -> TechnicianListEnvelope:
    """List technicians across every PG community the caller owns."""
    ensure_pg_owner(auth_user, "view their technicians")

    supabase_client = get_supabase_client()
    technicians = await get_technicians_by_owner(supabase_client, auth_user.user_id)

    return TechnicianListEnvelope(
        message="Technicians retrieved successfully",
        data=_to_technician_list(technicians),
    )


@router.get(
    "/{id}",
    response_model=TechnicianEnvelope,
    summary="Get technician",
)
async def get_technician(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(GET_TECHNICIAN_BY_ID))],
) -> TechnicianEnvelope:
    """Fetch one technician; the caller must own one of its PG communities."""
    technician_id = payload["params"]["id"]

    supabase_client = get_supabase_client()
    technician = await get_technician_by_id(supabase_client, technician_id)
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)

    return TechnicianEnvelope(
        message="Technician retrieved successfully",
        data=_to_technician_response(technician),
    )


@router.put(
    "/{id}/availability",
    response_model=TechnicianEnvelope,
    summary="Update technician availability",
)
async def set_technician_availability(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(UPDATE_TECHNICIAN_AVAILABILITY))],
) -> TechnicianEnvelope:
    ensure_pg_owner(auth_user, "update technician availability")
    technician_id = payload["params"]["id"]

    supabase_client = get_supabase_client()
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)

    technician = await update_technician_availability(
        supabase_client, technician_id, payload["body"]["isAvailable"]
    )

    return TechnicianEnvelope(
        message="Technician availability updated successfully",
        data=_to_technician_response(technician),
    )


@router.post(
    "/{id}/assign",
    response_model=TechnicianEnvelope,
    summary="Assign technician to PG communities",
    description="""
    Assign a technician to additional PG communities.

    Security:
    - PG owners only
    - The caller must own the technician and every listed community
    """
)
async def assign_technician(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(ASSIGN_TECHNICIAN))],
) -> TechnicianEnvelope:
    ensure_pg_owner(auth_user, "assign technicians")
    technician_id = payload["params"]["id"]
    pg_community_ids = payload["body"]["pgCommunityIds"]

    supabase_client = get_supabase_client()
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)
    for pg_community_id in pg_community_ids:
        await verify_pg_ownership(supabase_client, pg_community_id, auth_user.user_id)

    technician = await assign_technician_to_pgs(supabase_client, technician_id, pg_community_ids)

    return TechnicianEnvelope(
        message="Technician assigned to PG communities successfully",
        data=_to_technician_response(technician),
    )


@router.delete(
    "/{id}/remove",
    response_model=TechnicianEnvelope,
    summary="Remove technician from PG communities",
)
async def unassign_technician(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(REMOVE_TECHNICIAN))],
) -> TechnicianEnvelope:
    ensure_pg_owner(auth_user, "remove technician assignments")
    technician_id = payload["params"]["id"]

    supabase_client = get_supabase_client()
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)

    technician = await remove_technician_from_pgs(
        supabase_client, technician_id, payload["body"]["pgCommunityIds"]
    )

    return TechnicianEnvelope(
        message="Technician removed from PG communities successfully",
        data=_to_technician_response(technician),
    )


@router.get(
    "/{id}/workload",
    response_model=TechnicianWorkloadEnvelope,
    summary="Get technician workload",
)
async def get_workload(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(GET_TECHNICIAN_BY_ID))],
) -> TechnicianWorkloadEnvelope:
    """Open issues and services assigned to a technician, with counts."""
    technician_id = payload["params"]["id"]

    supabase_client = get_supabase_client()
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)

    workload = await get_technician_workload(supabase_client, technician_id)

    return TechnicianWorkloadEnvelope(
        message="Technician workload retrieved successfully",
        data=TechnicianWorkloadResponse(
            technician=_to_technician_response(workload["technician"]),
            issues=workload["issues"],
            services=workload["services"],
            workload=workload["workload"],
        ),
    )


@router.delete(
    "/{id}",
    response_model=SuccessResponse,
    summary="Delete technician",
    description="""
    Delete a technician and all its assignments.

    Fails with 400 while the technician still has unresolved issues or
    incomplete services.
    """
)
async def remove_technician(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(GET_TECHNICIAN_BY_ID))],
) -> SuccessResponse:
    ensure_pg_owner(auth_user, "delete technicians")
    technician_id = payload["params"]["id"]

    supabase_client = get_supabase_client()
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)
    await delete_technician(supabase_client, technician_id)

    return SuccessResponse(message="Technician deleted successfully")


@router.put(
    "/{id}",
    response_model=TechnicianEnvelope,
    summary="Update technician",
    description="""
    Partially update a technician. Only fields present in the body change.
    """
)
async def edit_technician(
    auth_user: CurrentUser,
    payload: Annotated[Dict[str, Any], Depends(validate(UPDATE_TECHNICIAN))],
) -> TechnicianEnvelope:
    ensure_pg_owner(auth_user, "update technicians")
    technician_id = payload["params"]["id"]

    supabase_client = get_supabase_client()
    await verify_technician_ownership(supabase_client, technician_id, auth_user.user_id)

    technician = await update_technician(supabase_client, technician_id, payload["body"])

    return TechnicianEnvelope(
        message="Technician updated successfully",
        data=_to_technician_response(technician),
    )
