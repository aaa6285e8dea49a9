import secrets

import bcrypt
from libs.result import Error, Result, Return

from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities import NotificationSettings, User
from conpanion.domain.entities.invitation import normalize_email

from .dtos import SignupCommand, SignupResponse, UserInfo


def user_info(user: User) -> UserInfo:
    return UserInfo(
        id=str(user.id),
        email=user.email,
        display_name=user.display_name,
        email_confirmed=user.is_confirmed,
    )


class SignupUseCase:
    """
    Signup Use Case

    Business Logic:
    1. Reject an email that is already registered
    2. Hash password with bcrypt cost factor 12
    3. Create the User, unconfirmed, with a confirmation token
    4. Create default notification preferences and settings
    5. Commit transaction atomically

    Pending invitations are linked when the email is confirmed, not here.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: SignupCommand) -> Result[SignupResponse]:
        email = normalize_email(command.email)

        async with self.uow:
            existing_user = await self.uow.users.get_by_email(email)
            if existing_user:
                return Return.err(
                    Error("EMAIL_ALREADY_EXISTS", "Email already registered")
                )

            password_hash = bcrypt.hashpw(
                command.password.encode("utf-8"), bcrypt.gensalt(12)
            )

            user = await self.uow.users.create(
                User(
                    email=email,
                    password_hash=password_hash.decode("utf-8"),
                    first_name=command.first_name,
                    last_name=command.last_name,
                    confirmation_token=secrets.token_urlsafe(32),
                )
            )

            await self.uow.preferences.create_defaults(user.id)
            await self.uow.notification_settings.create(
                NotificationSettings(user_id=user.id)
            )

            await self.uow.commit()

            return Return.ok(
                SignupResponse(
                    user=user_info(user),
                    confirmation_token=user.confirmation_token,
                )
            )
