"""
User Entity

A person with an account. Profile fields double as display name for
notification text.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from ..base import utcnow


class User(SQLModel, table=True):
    """
    User entity - account and profile of a person.

    Business Rules:
    - Email is unique and stored lower-cased
    - Password stored as bcrypt hash
    - Pending invitations for the email are linked once the email is confirmed
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)

    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)

    confirmation_token: Optional[str] = Field(
        default=None, unique=True, index=True, max_length=64
    )
    email_confirmed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime)
    )

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    @property
    def display_name(self) -> str:
        full_name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return full_name or self.email

    @property
    def is_confirmed(self) -> bool:
        return self.email_confirmed_at is not None
