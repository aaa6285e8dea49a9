"""
Work Domain Use Case DTOs (Data Transfer Objects)
"""

from typing import List, Optional

from pydantic import BaseModel

from conpanion.domain.entities import Approval, Task


class TaskResponse(BaseModel):
    id: str
    project_id: str
    title: str
    description: Optional[str] = None
    status: str
    priority: str
    due_date: Optional[str] = None
    parent_task_id: Optional[str] = None
    assignee_ids: List[str] = []

    @classmethod
    def from_entity(cls, task: Task, assignee_ids=()) -> "TaskResponse":
        return cls(
            id=str(task.id),
            project_id=str(task.project_id),
            title=task.title,
            description=task.description,
            status=task.status,
            priority=task.priority,
            due_date=task.due_date.isoformat() if task.due_date else None,
            parent_task_id=str(task.parent_task_id) if task.parent_task_id else None,
            assignee_ids=[str(a) for a in assignee_ids],
        )


class TaskMetadataResponse(BaseModel):
    task_id: str
    key: str
    value: Optional[str] = None
    action: str


class CommentResponse(BaseModel):
    id: str
    parent_id: str
    user_id: str
    content: str
    created_at: str


class FormResponse(BaseModel):
    id: str
    project_id: str
    name: str
    assignee_ids: List[str] = []


class AssignmentResponse(BaseModel):
    entity_type: str
    entity_id: str
    user_id: str
    assigned: bool


class ApprovalResponseDTO(BaseModel):
    id: str
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    requester_id: str
    status: str
    due_date: Optional[str] = None
    approver_ids: List[str] = []

    @classmethod
    def from_entity(cls, approval: Approval, approver_ids=()) -> "ApprovalResponseDTO":
        return cls(
            id=str(approval.id),
            entity_type=approval.entity_type.value if approval.entity_type else None,
            entity_id=str(approval.entity_id) if approval.entity_id else None,
            requester_id=str(approval.requester_id),
            status=approval.status.value,
            due_date=approval.due_date.isoformat() if approval.due_date else None,
            approver_ids=[str(a) for a in approver_ids],
        )


class ApprovalActivityResponse(BaseModel):
    id: str
    approval_id: str
    user_id: str
    status: Optional[str] = None
    comment: Optional[str] = None
