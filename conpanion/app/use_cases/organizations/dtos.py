"""
Organization Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class OrganizationResponse(BaseModel):
    id: str
    name: str
    slug: str
    role: str


class ProjectResponse(BaseModel):
    id: str
    organization_id: str
    name: str
    description: Optional[str] = None
    role: str


class MembershipResponse(BaseModel):
    scope: str
    scope_id: str
    user_id: str
    role: str
    status: str
    was_reactivated: bool = False
