"""
Work Domain Use Cases

Tasks, forms, assignments and approvals. Every mutation publishes a domain
event that the notification handlers react to.
"""

from .approvals_use_case import (
    AddApprovalCommentUseCase,
    AddApproverUseCase,
    ChangeApprovalStatusUseCase,
    CreateApprovalUseCase,
    RespondToApprovalUseCase,
)
from .assignments_use_case import (
    AssignEntityUseCase,
    CreateFormUseCase,
    UnassignEntityUseCase,
)
from .dtos import (
    ApprovalActivityResponse,
    ApprovalResponseDTO,
    AssignmentResponse,
    CommentResponse,
    FormResponse,
    TaskMetadataResponse,
    TaskResponse,
)
from .tasks_use_case import (
    AddTaskCommentUseCase,
    CreateTaskUseCase,
    DeleteTaskMetadataUseCase,
    SetTaskMetadataUseCase,
    UpdateTaskUseCase,
)

__all__ = [
    "CreateTaskUseCase",
    "UpdateTaskUseCase",
    "SetTaskMetadataUseCase",
    "DeleteTaskMetadataUseCase",
    "AddTaskCommentUseCase",
    "CreateFormUseCase",
    "AssignEntityUseCase",
    "UnassignEntityUseCase",
    "CreateApprovalUseCase",
    "AddApproverUseCase",
    "ChangeApprovalStatusUseCase",
    "AddApprovalCommentUseCase",
    "RespondToApprovalUseCase",
    "TaskResponse",
    "TaskMetadataResponse",
    "CommentResponse",
    "FormResponse",
    "AssignmentResponse",
    "ApprovalResponseDTO",
    "ApprovalActivityResponse",
]
