from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from uuid import UUID

from conpanion.domain.entities import User


class IUserRepository(ABC):
    """User repository interface - application layer"""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address (case-insensitive)"""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        pass

    @abstractmethod
    async def get_by_ids(self, user_ids: List[UUID]) -> Dict[UUID, User]:
        """Get users by ID, keyed by ID"""
        pass

    @abstractmethod
    async def get_by_confirmation_token(self, token: str) -> Optional[User]:
        """Get user by email confirmation token"""
        pass

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user"""
        pass

    @abstractmethod
    async def update(self, user: User) -> User:
        """Update existing user"""
        pass
