"""
Membership Entities

Link a User to an Organization or a Project with a role.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import MembershipStatus, OrganizationRole, ProjectRole


class OrganizationMembership(SQLModel, table=True):
    """
    Organization membership - (organization_id, user_id) is unique.

    Business Rules:
    - Re-inviting a deactivated member reactivates the same row
    - Deactivation sets left_at, reactivation clears it
    """

    __tablename__ = "organization_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(foreign_key="organizations.id", nullable=False)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    role: OrganizationRole = Field(default=OrganizationRole.member)
    status: MembershipStatus = Field(default=MembershipStatus.active)
    invited_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    joined_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    left_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uq_organization_membership_scope_user",
            "organization_id",
            "user_id",
            unique=True,
        ),
        Index("idx_organization_membership_status", "status"),
    )


class ProjectMembership(SQLModel, table=True):
    """
    Project membership - (project_id, user_id) is unique.

    Business Rules:
    - Member must be an active member of the project's organization
    - Same reactivation rules as organization memberships
    """

    __tablename__ = "project_memberships"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", nullable=False)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)

    role: ProjectRole = Field(default=ProjectRole.member)
    status: MembershipStatus = Field(default=MembershipStatus.active)
    invited_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    joined_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    left_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_project_membership_scope_user", "project_id", "user_id", unique=True),
        Index("idx_project_membership_status", "status"),
    )
