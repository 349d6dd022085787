"""
Pydantic models for users and PG communities.

These are the records held by the client-side session stores
(backend/state). JSON uses camelCase keys; Python attributes are snake_case.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Matches the role claim carried in the auth token
UserRole = Literal["PG_OWNER", "RESIDENT"]


class CamelModel(BaseModel):
    """Base model serializing to camelCase while accepting either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RaisedIssue(CamelModel):
    id: str
    title: str
    description: str


class RequestedService(CamelModel):
    id: str
    service_name: str
    description: str


class Resident(CamelModel):
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    room_number: Optional[str] = None
    joined_at: str


class PgCommunity(CamelModel):
    """A PG (paying guest) community managed by an owner."""
    id: str
    name: str
    address: str
    description: Optional[str] = None
    pg_code: str = Field(..., description="Join code residents use to enter the community")
    owner_id: str
    created_at: str
    updated_at: str
    residents: Optional[List[Resident]] = None


class User(CamelModel):
    """The signed-in user, as hydrated from the auth endpoints."""
    id: str
    name: str
    email: str
    profile_picture: Optional[str] = None
    role: UserRole = "RESIDENT"
    owned_pg_communities: Optional[List[PgCommunity]] = None
    pg_community: Optional[PgCommunity] = None
    pg_community_id: Optional[str] = None
    raised_issues: Optional[List[RaisedIssue]] = None
    requested_services: Optional[List[RequestedService]] = None
