"""
Login Use Case

Handles user authentication and returns a JWT access token.
"""

import bcrypt

from libs.result import Error, Result, Return
from conpanion.api.utils.jwt import generate_jwt
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.domain.entities.invitation import normalize_email

from .dtos import LoginResponse
from .signup_use_case import user_info


class LoginUseCase:
    """
    Use case for user login and JWT issuance.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - Unknown email and wrong password give the same error
    - The email must be confirmed
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, email: str, password: str) -> Result[LoginResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_email(normalize_email(email or ""))

            # Always perform a hash check even if user not found
            if user is None:
                bcrypt.checkpw(b"dummy_password", bcrypt.hashpw(b"dummy", bcrypt.gensalt(4)))
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if not bcrypt.checkpw(password.encode(), user.password_hash.encode()):
                return Return.err(
                    Error("INVALID_CREDENTIALS", "Invalid email or password")
                )

            if not user.is_confirmed:
                return Return.err(
                    Error("EMAIL_NOT_CONFIRMED", "Confirm your email before signing in")
                )

            return Return.ok(
                LoginResponse(
                    access_token=generate_jwt(user.id, user.email),
                    user=user_info(user),
                )
            )
