from abc import ABC, abstractmethod

from conpanion.app.repositories.approval_repository import IApprovalRepository
from conpanion.app.repositories.delivery_queue_repository import (
    IEmailQueueRepository,
    IPushQueueRepository,
)
from conpanion.app.repositories.invitation_repository import IInvitationRepository
from conpanion.app.repositories.membership_repository import (
    IOrganizationMembershipRepository,
    IProjectMembershipRepository,
)
from conpanion.app.repositories.notification_repository import (
    INotificationDeliveryRepository,
    INotificationRepository,
    INotificationTemplateRepository,
)
from conpanion.app.repositories.organization_repository import (
    IOrganizationRepository,
    IProjectRepository,
)
from conpanion.app.repositories.preference_repository import (
    INotificationPreferenceRepository,
    INotificationSettingsRepository,
)
from conpanion.app.repositories.push_subscription_repository import (
    IPushSubscriptionRepository,
)
from conpanion.app.repositories.user_repository import IUserRepository
from conpanion.app.repositories.work_repository import (
    IEntityAssigneeRepository,
    IFormEntryRepository,
    IFormRepository,
    ISiteDiaryRepository,
    ITaskCommentRepository,
    ITaskMetadataRepository,
    ITaskRepository,
)


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Identity & membership
    users: IUserRepository
    organizations: IOrganizationRepository
    projects: IProjectRepository
    organization_members: IOrganizationMembershipRepository
    project_members: IProjectMembershipRepository
    invitations: IInvitationRepository

    # Notifications
    notifications: INotificationRepository
    deliveries: INotificationDeliveryRepository
    templates: INotificationTemplateRepository
    preferences: INotificationPreferenceRepository
    notification_settings: INotificationSettingsRepository
    push_subscriptions: IPushSubscriptionRepository
    email_queue: IEmailQueueRepository
    push_queue: IPushQueueRepository

    # Work domain
    tasks: ITaskRepository
    task_metadata: ITaskMetadataRepository
    task_comments: ITaskCommentRepository
    forms: IFormRepository
    form_entries: IFormEntryRepository
    site_diaries: ISiteDiaryRepository
    assignees: IEntityAssigneeRepository
    approvals: IApprovalRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass

    @abstractmethod
    def savepoint(self):
        """Async context manager; on error only the work done inside it is undone"""
        pass
