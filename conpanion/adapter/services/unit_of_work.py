from sqlmodel.ext.asyncio.session import AsyncSession

from conpanion.adapter.repositories.approval_repository import ApprovalRepository
from conpanion.adapter.repositories.delivery_queue_repository import (
    EmailQueueRepository,
    PushQueueRepository,
)
from conpanion.adapter.repositories.invitation_repository import InvitationRepository
from conpanion.adapter.repositories.membership_repository import (
    OrganizationMembershipRepository,
    ProjectMembershipRepository,
)
from conpanion.adapter.repositories.notification_repository import (
    NotificationDeliveryRepository,
    NotificationRepository,
    NotificationTemplateRepository,
)
from conpanion.adapter.repositories.organization_repository import (
    OrganizationRepository,
    ProjectRepository,
)
from conpanion.adapter.repositories.preference_repository import (
    NotificationPreferenceRepository,
    NotificationSettingsRepository,
)
from conpanion.adapter.repositories.push_subscription_repository import (
    PushSubscriptionRepository,
)
from conpanion.adapter.repositories.user_repository import UserRepository
from conpanion.adapter.repositories.work_repository import (
    EntityAssigneeRepository,
    FormEntryRepository,
    FormRepository,
    SiteDiaryRepository,
    TaskCommentRepository,
    TaskMetadataRepository,
    TaskRepository,
)
from conpanion.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.organizations = OrganizationRepository(self.session)
        self.projects = ProjectRepository(self.session)
        self.organization_members = OrganizationMembershipRepository(self.session)
        self.project_members = ProjectMembershipRepository(self.session)
        self.invitations = InvitationRepository(self.session)

        self.notifications = NotificationRepository(self.session)
        self.deliveries = NotificationDeliveryRepository(self.session)
        self.templates = NotificationTemplateRepository(self.session)
        self.preferences = NotificationPreferenceRepository(self.session)
        self.notification_settings = NotificationSettingsRepository(self.session)
        self.push_subscriptions = PushSubscriptionRepository(self.session)
        self.email_queue = EmailQueueRepository(self.session)
        self.push_queue = PushQueueRepository(self.session)

        self.tasks = TaskRepository(self.session)
        self.task_metadata = TaskMetadataRepository(self.session)
        self.task_comments = TaskCommentRepository(self.session)
        self.forms = FormRepository(self.session)
        self.form_entries = FormEntryRepository(self.session)
        self.site_diaries = SiteDiaryRepository(self.session)
        self.assignees = EntityAssigneeRepository(self.session)
        self.approvals = ApprovalRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()

    def savepoint(self):
        return self.session.begin_nested()
