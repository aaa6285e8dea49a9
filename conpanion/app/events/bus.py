"""
Event bus

Handlers are side effects of a mutation, never part of it: each runs in its
own savepoint and a failing handler is logged and skipped.
"""

import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Type

from conpanion.app.services.unit_of_work import UnitOfWork

from .events import DomainEvent

logger = logging.getLogger(__name__)

Handler = Callable[[UnitOfWork, DomainEvent], Awaitable[None]]


class EventBus:
    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[Handler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: Handler) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event_type: Type[DomainEvent]) -> List[Handler]:
        return list(self._handlers.get(event_type, []))

    async def publish(self, uow: UnitOfWork, event: DomainEvent) -> None:
        for handler in self.handlers_for(type(event)):
            try:
                async with uow.savepoint():
                    await handler(uow, event)
            except Exception:
                logger.exception(
                    "Handler %s failed for %s", handler.__name__, type(event).__name__
                )
