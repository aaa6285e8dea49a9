"""
Auth Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# ============================================================================
# Command DTOs
# ============================================================================


class SignupCommand(BaseModel):
    """Validated signup request"""

    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)


# ============================================================================
# Response DTOs
# ============================================================================


class UserInfo(BaseModel):
    id: str
    email: str
    display_name: str
    email_confirmed: bool


class SignupResponse(BaseModel):
    user: UserInfo
    confirmation_token: str


class ConfirmEmailResponse(BaseModel):
    user: UserInfo
    linked_invitations: int


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserInfo
