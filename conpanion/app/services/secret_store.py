from abc import ABC, abstractmethod
from typing import Optional

DELIVERY_SERVICE_URL = "DELIVERY_SERVICE_URL"
DELIVERY_SERVICE_KEY = "DELIVERY_SERVICE_KEY"


class MissingSecretError(LookupError):
    pass


class ISecretStore(ABC):
    """Read-only access to deployment secrets"""

    @abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Get a secret value, None when absent"""
        pass

    def require(self, name: str) -> str:
        value = self.get(name)
        if not value:
            raise MissingSecretError(f"Secret {name} is not configured")
        return value
