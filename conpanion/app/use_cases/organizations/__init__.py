"""
Organization Use Cases

Organizations, projects and their memberships.
"""

from .add_project_member_use_case import AddProjectMemberUseCase
from .create_organization_use_case import CreateOrganizationUseCase
from .create_project_use_case import CreateProjectUseCase
from .dtos import MembershipResponse, OrganizationResponse, ProjectResponse
from .remove_organization_member_use_case import RemoveOrganizationMemberUseCase

__all__ = [
    "CreateOrganizationUseCase",
    "CreateProjectUseCase",
    "RemoveOrganizationMemberUseCase",
    "AddProjectMemberUseCase",
    "OrganizationResponse",
    "ProjectResponse",
    "MembershipResponse",
]
