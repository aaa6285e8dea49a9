from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from conpanion.api.error import ClientError, ServerError, unwrap
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.auth import (
    ConfirmEmailResponse,
    ConfirmEmailUseCase,
    LoginResponse,
    LoginUseCase,
    SignupCommand,
    SignupResponse,
    SignupUseCase,
)
from conpanion.depends import get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class SignupRequest(BaseModel):
    """
    Signup HTTP request payload

    Validates incoming HTTP request before converting to SignupCommand.
    """

    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=8, description="User password (min 8 chars)")
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)


class ConfirmEmailRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Email confirmation token")


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


@router.post(
    "/signup", status_code=status.HTTP_201_CREATED, response_model=SignupResponse
)
async def signup(
    request: SignupRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    User Signup

    Creates the account with default notification preferences. The email
    must be confirmed before login.

    Raises:
        - 409 Conflict: Email already exists
        - 422 Unprocessable Entity: Invalid input (handled by FastAPI)
        - 500 Internal Server Error: Server error
    """
    command = SignupCommand(
        email=request.email,
        password=request.password,
        first_name=request.first_name,
        last_name=request.last_name,
    )

    use_case = SignupUseCase(uow)
    result = await use_case.execute(command)

    if result.is_err():
        error = result.error
        if error.code == "EMAIL_ALREADY_EXISTS":
            raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
        raise ServerError(error)

    return result.value


@router.post("/confirm", response_model=ConfirmEmailResponse)
async def confirm_email(
    request: ConfirmEmailRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Confirm Email

    Marks the address as confirmed and links any pending invitations sent
    to it before the account existed.

    Raises:
        - 400 Bad Request: INVALID_TOKEN
    """
    return unwrap(await ConfirmEmailUseCase(uow).execute(request.token))


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Raises:
        - 401 Unauthorized: INVALID_CREDENTIALS
        - 403 Forbidden: EMAIL_NOT_CONFIRMED
    """
    return unwrap(await LoginUseCase(uow).execute(request.email, request.password))
