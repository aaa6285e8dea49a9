"""
Invitation Entity

Time-boxed, token-capability offer of organization or project membership.
"""

import re
import secrets
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from ..base import utcnow
from .enums import InvitationScope, InvitationStatus

INVITATION_TTL = timedelta(days=7)
RESEND_WINDOW = timedelta(hours=24)
MAX_RESENDS_PER_WINDOW = 3

TOKEN_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def generate_invitation_token() -> str:
    """128-bit random token, hex encoded"""
    return secrets.token_hex(16)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class Invitation(SQLModel, table=True):
    """
    Invitation entity - one table for both organization and project scope.

    Business Rules:
    - At most one pending invitation per (scope, scope_id, email)
    - Expires 7 days after issue or last resend
    - Resends are limited to 3 per rolling 24 hours
    - user_id stays null until the invitee's account is linked
    - Expired rows are flipped to expired by the cleanup sweep
    """

    __tablename__ = "invitations"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    scope: InvitationScope = Field(nullable=False)
    scope_id: UUID = Field(nullable=False, index=True)
    organization_id: UUID = Field(foreign_key="organizations.id", nullable=False)
    project_id: Optional[UUID] = Field(default=None, foreign_key="projects.id")

    email: str = Field(max_length=255, nullable=False, index=True)
    user_id: Optional[UUID] = Field(default=None, foreign_key="users.id", index=True)
    role: str = Field(max_length=20, nullable=False)

    token: str = Field(
        default_factory=generate_invitation_token, unique=True, index=True, max_length=32
    )
    status: InvitationStatus = Field(default=InvitationStatus.pending)
    invited_by: Optional[UUID] = Field(default=None, foreign_key="users.id")

    resend_count: int = Field(default=0, nullable=False)
    last_resend_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    invited_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    accepted_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    declined_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uq_invitation_pending_scope_email",
            "scope",
            "scope_id",
            "email",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
        Index("idx_invitation_expires_at", "expires_at"),
        Index("idx_invitation_status", "status"),
    )

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now

    def is_acceptable(self, now: datetime) -> bool:
        return self.status == InvitationStatus.pending and not self.is_expired(now)

    def resend_window_open(self, now: datetime) -> bool:
        return self.last_resend_at is not None and self.last_resend_at > now - RESEND_WINDOW

    def is_resend_rate_limited(self, now: datetime) -> bool:
        return self.resend_count >= MAX_RESENDS_PER_WINDOW and self.resend_window_open(now)

    def apply_resend(self, now: datetime) -> None:
        """Issue a fresh token and expiry, bumping the resend counter."""
        self.resend_count = self.resend_count + 1 if self.resend_window_open(now) else 1
        self.last_resend_at = now
        self.token = generate_invitation_token()
        self.expires_at = now + INVITATION_TTL
        self.updated_at = now
