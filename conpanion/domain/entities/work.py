"""
Work Domain Entities

Tasks, forms, entries and site diaries: the things people get assigned to
and comment on.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import EntityKind


class Task(SQLModel, table=True):
    """
    Task entity.

    Business Rules:
    - Field changes notify assignees other than the updater
    - created_at/updated_at never count as a change
    """

    __tablename__ = "tasks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)

    title: str = Field(max_length=255, nullable=False)
    description: Optional[str] = Field(default=None)
    status: str = Field(default="todo", max_length=50)
    priority: str = Field(default="medium", max_length=50)
    due_date: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    parent_task_id: Optional[UUID] = Field(default=None, foreign_key="tasks.id")

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class TaskMetadata(SQLModel, table=True):
    """Free-form key/value metadata attached to a task"""

    __tablename__ = "task_metadata"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    task_id: UUID = Field(foreign_key="tasks.id", nullable=False)
    title: str = Field(max_length=255, nullable=False)
    value: Optional[str] = Field(default=None)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uq_task_metadata_task_title", "task_id", "title", unique=True),
    )


class TaskComment(SQLModel, table=True):
    """Comment on a task; may mention users as @[uuid]"""

    __tablename__ = "task_comments"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    task_id: UUID = Field(foreign_key="tasks.id", nullable=False, index=True)
    user_id: UUID = Field(foreign_key="users.id", nullable=False)
    content: str = Field(nullable=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class Form(SQLModel, table=True):
    __tablename__ = "forms"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class FormEntry(SQLModel, table=True):
    __tablename__ = "form_entries"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    form_id: Optional[UUID] = Field(default=None, foreign_key="forms.id")
    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class SiteDiary(SQLModel, table=True):
    __tablename__ = "site_diaries"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    project_id: UUID = Field(foreign_key="projects.id", nullable=False, index=True)
    name: str = Field(max_length=255, nullable=False)

    created_by: Optional[UUID] = Field(default=None, foreign_key="users.id")
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))


class EntityAssignee(SQLModel, table=True):
    """
    Assignment of a user to an entity (task, form, entries, site diary).

    Business Rules:
    - (entity_type, entity_id, user_id) is unique
    - Self-assignment never notifies
    """

    __tablename__ = "entity_assignees"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    entity_type: EntityKind = Field(nullable=False)
    entity_id: UUID = Field(nullable=False)
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    assigned_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uq_entity_assignee", "entity_type", "entity_id", "user_id", unique=True
        ),
    )
