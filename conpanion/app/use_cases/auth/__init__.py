"""
Auth Use Cases

Account signup, email confirmation and login.
"""

from .confirm_email_use_case import ConfirmEmailUseCase
from .dtos import (
    ConfirmEmailResponse,
    LoginResponse,
    SignupCommand,
    SignupResponse,
    UserInfo,
)
from .login_use_case import LoginUseCase
from .signup_use_case import SignupUseCase

__all__ = [
    "SignupUseCase",
    "ConfirmEmailUseCase",
    "LoginUseCase",
    "SignupCommand",
    "SignupResponse",
    "ConfirmEmailResponse",
    "LoginResponse",
    "UserInfo",
]
