"""
Organization and Project Entities

An organization owns projects; both are membership scopes.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow


class Organization(SQLModel, table=True):
    """
    Organization entity - top-level workspace.

    Business Rules:
    - Slug is unique
    - The founding user becomes its owner
    - No hard delete
    """

    __tablename__ = "organizations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(max_length=255, nullable=False)
    slug: str = Field(max_length=255, unique=True, index=True)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class Project(SQLModel, table=True):
    """
    Project entity - belongs to exactly one organization.
    """

    __tablename__ = "projects"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    organization_id: UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True
    )
    name: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None, max_length=2000)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
