from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from conpanion.app.events import (
    EntityAssigned,
    EventBus,
    MembershipCreated,
    default_event_bus,
)
from conpanion.app.events.handlers import NOTIFICATION_HANDLERS
from conpanion.domain.entities import EntityKind
from conpanion.domain.entity_ref import EntityRef


def _assigned():
    return EntityAssigned(
        entity=EntityRef(EntityKind.task, uuid4()), user_id=uuid4(), assigned_by=uuid4()
    )


@pytest.mark.asyncio
async def test_handlers_run_for_their_event_type_only(mock_uow):
    # Arrange
    bus = EventBus()
    assigned = AsyncMock()
    membership = AsyncMock()
    bus.subscribe(EntityAssigned, assigned)
    bus.subscribe(MembershipCreated, membership)
    event = _assigned()

    # Act
    await bus.publish(mock_uow, event)

    # Assert
    assigned.assert_awaited_once_with(mock_uow, event)
    membership.assert_not_called()
    mock_uow.savepoint.assert_called_once()


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_the_others(mock_uow):
    bus = EventBus()
    broken = AsyncMock(side_effect=RuntimeError("boom"))
    broken.__name__ = "broken"
    healthy = AsyncMock()
    bus.subscribe(EntityAssigned, broken)
    bus.subscribe(EntityAssigned, healthy)

    await bus.publish(mock_uow, _assigned())

    healthy.assert_awaited_once()
    mock_uow.commit.assert_not_called()


def test_default_bus_has_a_handler_for_every_registered_event():
    bus = default_event_bus()
    for event_type, handler in NOTIFICATION_HANDLERS:
        assert handler in bus.handlers_for(event_type)
