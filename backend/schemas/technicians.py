"""
Schemas for the technician endpoints.

Two kinds of schema live here:
- Request schemas: declarative RequestSchema values interpreted by
  backend.validation. Field names are the camelCase keys the frontend sends.
- Response models: Pydantic models serialized with camelCase aliases.
"""

from typing import List, Literal, Optional

from pydantic import Field

from backend.schemas.common import SuccessResponse
from backend.schemas.users import CamelModel
from backend.validation.rules import (
    ArrayRule,
    BooleanRule,
    EnumRule,
    FacetSchema,
    RequestSchema,
    StringRule,
    UuidRule,
    optional,
    required,
)

# Technician speciality enum (matches DB enum technician_field)
SPECIALITIES = (
    "PLUMBING",
    "ELECTRICAL",
    "CLEANING",
    "MAINTENANCE",
    "SECURITY",
    "GARDENING",
    "PAINTING",
    "CARPENTRY",
    "GENERAL",
)

Speciality = Literal[
    "PLUMBING",
    "ELECTRICAL",
    "CLEANING",
    "MAINTENANCE",
    "SECURITY",
    "GARDENING",
    "PAINTING",
    "CARPENTRY",
    "GENERAL",
]

# ASCII digits only
PHONE_PATTERN = r"^\+?[0-9\s\-()]+$"


# --- Field rules ---

NAME = StringRule(
    min_length=2,
    max_length=100,
    trim=True,
    min_length_message="Name must be at least 2 characters",
    max_length_message="Name must not exceed 100 characters",
)

PHONE_NUMBER = StringRule(
    min_length=10,
    max_length=15,
    pattern=PHONE_PATTERN,
    min_length_message="Phone number must be at least 10 digits",
    max_length_message="Phone number must not exceed 15 digits",
    pattern_message="Invalid phone number format",
)

SPECIALITY = EnumRule(values=SPECIALITIES)

IS_AVAILABLE = BooleanRule()

PG_COMMUNITY_ID = UuidRule(message="Invalid PG community ID format")

TECHNICIAN_ID = UuidRule(message="Invalid technician ID format")

PG_COMMUNITY_IDS = ArrayRule(
    items=PG_COMMUNITY_ID,
    min_items=1,
    min_items_message="At least one PG community ID is required",
)


# --- Request schemas ---

CREATE_TECHNICIAN = RequestSchema(
    body=FacetSchema(fields={
        "name": required(NAME),
        "phoneNumber": required(PHONE_NUMBER),
        "speciality": required(SPECIALITY),
        "isAvailable": optional(IS_AVAILABLE),
        "pgCommunityId": required(PG_COMMUNITY_ID),
    }),
)

ASSIGN_TECHNICIAN = RequestSchema(
    params=FacetSchema(fields={"id": required(TECHNICIAN_ID)}),
    body=FacetSchema(fields={"pgCommunityIds": required(PG_COMMUNITY_IDS)}),
)

# Same shape as assignment: the PG communities to detach from
REMOVE_TECHNICIAN = ASSIGN_TECHNICIAN

UPDATE_TECHNICIAN_AVAILABILITY = RequestSchema(
    params=FacetSchema(fields={"id": required(TECHNICIAN_ID)}),
    body=FacetSchema(fields={"isAvailable": required(IS_AVAILABLE)}),
)

GET_TECHNICIAN_BY_ID = RequestSchema(
    params=FacetSchema(fields={"id": required(UuidRule(message="Invalid ID format"))}),
)

GET_TECHNICIANS_FOR_PG = RequestSchema(
    params=FacetSchema(fields={"pgCommunityId": required(PG_COMMUNITY_ID)}),
    query=FacetSchema(fields={"speciality": optional(SPECIALITY)}, required=False),
)

GET_AVAILABLE_TECHNICIANS = RequestSchema(
    params=FacetSchema(fields={"pgCommunityId": required(PG_COMMUNITY_ID)}),
)

UPDATE_TECHNICIAN = RequestSchema(
    params=FacetSchema(fields={"id": required(TECHNICIAN_ID)}),
    body=FacetSchema(fields={
        "name": optional(NAME),
        "phoneNumber": optional(PHONE_NUMBER),
        "speciality": optional(SPECIALITY),
        "isAvailable": optional(IS_AVAILABLE),
    }),
)


# --- Response models ---

class PgCommunitySummary(CamelModel):
    """Condensed PG community embedded in technician responses."""
    id: str = Field(..., description="PG community UUID")
    name: str = Field(..., description="Community display name")
    pg_code: str = Field(..., description="Community join code")


class PgAssignmentResponse(CamelModel):
    """A technician's assignment to one PG community."""
    pg_community_id: str = Field(..., description="Assigned PG community UUID")
    pg_community: Optional[PgCommunitySummary] = Field(None, description="Community details")


class TechnicianResponse(CamelModel):
    """
    Technician record with its PG assignments and open task counts.

    Open tasks are issues not yet RESOLVED and services not yet COMPLETED.
    """
    id: str = Field(..., description="Technician UUID")
    name: str = Field(..., description="Full name")
    phone_number: str = Field(..., description="Contact number")
    speciality: Speciality = Field(..., description="Trade the technician handles")
    is_available: bool = Field(..., description="Whether the technician accepts new work")
    pg_assignments: List[PgAssignmentResponse] = Field(default_factory=list)
    active_issues: int = Field(0, description="Unresolved issues assigned")
    active_services: int = Field(0, description="Incomplete service requests assigned")
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")
    updated_at: Optional[str] = Field(None, description="ISO-8601 last update timestamp")


class TaskSummary(CamelModel):
    """An open issue or service request in a technician's queue."""
    id: str
    title: str
    priority_level: Optional[str] = None
    status: str
    pg_community: Optional[PgCommunitySummary] = None


class WorkloadStats(CamelModel):
    active_issues: int
    active_services: int
    total_active_tasks: int
    assigned_pgs: int


class TechnicianWorkloadResponse(CamelModel):
    technician: TechnicianResponse
    issues: List[TaskSummary] = Field(default_factory=list)
    services: List[TaskSummary] = Field(default_factory=list)
    workload: WorkloadStats


# --- Envelopes ---

class TechnicianEnvelope(SuccessResponse):
    data: TechnicianResponse


class TechnicianListEnvelope(SuccessResponse):
    data: List[TechnicianResponse]


class TechnicianWorkloadEnvelope(SuccessResponse):
    data: TechnicianWorkloadResponse
