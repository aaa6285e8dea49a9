from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from conpanion.domain.entities import DeliveryChannel


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one call to the external delivery function"""

    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    body: Any = None


class IDeliveryClient(ABC):
    """Client for the external email/push delivery functions"""

    @abstractmethod
    async def dispatch(self, channel: DeliveryChannel) -> DeliveryOutcome:
        """Ask the delivery function for a channel to drain its queue"""
        pass
