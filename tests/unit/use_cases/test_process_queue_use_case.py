from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from conpanion.app.services.delivery_client import DeliveryOutcome
from conpanion.app.use_cases.delivery import (
    ProcessEmailQueueUseCase,
    ProcessPushQueueUseCase,
    ProcessQueueUseCase,
    RetryFailedNotificationsUseCase,
)
from conpanion.domain.entities import (
    DeliveryChannel,
    DeliveryStatus,
    EmailQueueEntry,
    PushQueueEntry,
)


def _email_entry(retry_count=0):
    return EmailQueueEntry(
        notification_id=uuid4(),
        user_id=uuid4(),
        to_email="ann@example.com",
        subject="Task Updated",
        template_id="task_updated_template",
        retry_count=retry_count,
    )


@pytest.fixture
def client():
    client = MagicMock()
    client.dispatch = AsyncMock(return_value=DeliveryOutcome(ok=True, status_code=200))
    return client


@pytest.fixture
def queue_uow(mock_uow):
    mock_uow.email_queue = MagicMock()
    mock_uow.email_queue.list_due = AsyncMock(return_value=[])
    mock_uow.email_queue.update_many = AsyncMock()
    mock_uow.push_queue = MagicMock()
    mock_uow.push_queue.list_due = AsyncMock(return_value=[])
    mock_uow.push_queue.update_many = AsyncMock()
    mock_uow.deliveries = MagicMock()
    mock_uow.deliveries.create = AsyncMock()
    return mock_uow


@pytest.mark.asyncio
async def test_empty_queue_makes_no_call(queue_uow, client):
    result = await ProcessEmailQueueUseCase(queue_uow, client).execute(100)

    assert result.value.processed == 0
    client.dispatch.assert_not_called()


@pytest.mark.asyncio
async def test_successful_call_marks_batch_sent(queue_uow, client):
    # Arrange
    entries = [_email_entry(), _email_entry()]
    queue_uow.email_queue.list_due = AsyncMock(return_value=entries)

    # Act
    result = await ProcessEmailQueueUseCase(queue_uow, client).execute(100)

    # Assert
    assert result.value.processed == 2
    assert result.value.sent == 2
    assert all(entry.status == DeliveryStatus.sent for entry in entries)
    assert all(entry.sent_at is not None for entry in entries)
    client.dispatch.assert_awaited_once_with(DeliveryChannel.email)
    # processing is committed before the call, outcome after
    assert queue_uow.commit.await_count == 2
    deliveries = [call.args[0] for call in queue_uow.deliveries.create.await_args_list]
    assert [d.details["queue_entry_id"] for d in deliveries] == [str(e.id) for e in entries]


@pytest.mark.asyncio
async def test_failed_call_records_error_and_caps_retries(queue_uow, client):
    # Arrange
    entries = [_email_entry(retry_count=0), _email_entry(retry_count=5)]
    queue_uow.email_queue.list_due = AsyncMock(return_value=entries)
    client.dispatch = AsyncMock(
        return_value=DeliveryOutcome(ok=False, status_code=500, error="HTTP 500: boom")
    )

    # Act
    result = await ProcessEmailQueueUseCase(queue_uow, client).execute(100)

    # Assert
    assert result.value.failed == 2
    assert result.value.error == "HTTP 500: boom"
    assert [entry.retry_count for entry in entries] == [1, 5]
    assert all(entry.status == DeliveryStatus.failed for entry in entries)
    assert entries[0].error_message == "HTTP 500: boom"


@pytest.mark.asyncio
async def test_client_exception_is_a_failed_pass(queue_uow, client):
    entry = PushQueueEntry(
        notification_id=uuid4(), user_id=uuid4(), subscription_id=uuid4(), token="t"
    )
    queue_uow.push_queue.list_due = AsyncMock(return_value=[entry])
    client.dispatch = AsyncMock(side_effect=RuntimeError("no route"))

    result = await ProcessPushQueueUseCase(queue_uow, client).execute(50)

    assert result.is_ok()
    assert result.value.channel == "push"
    assert entry.status == DeliveryStatus.failed
    assert entry.error_message == "no route"


@pytest.mark.asyncio
async def test_retry_rearms_both_queues(queue_uow):
    queue_uow.email_queue.rearm_failed = AsyncMock(return_value=4)
    queue_uow.push_queue.rearm_failed = AsyncMock(return_value=1)

    result = await RetryFailedNotificationsUseCase(queue_uow).execute()

    assert result.value.email_requeued == 4
    assert result.value.push_requeued == 1
    email_args = queue_uow.email_queue.rearm_failed.call_args.args
    push_args = queue_uow.push_queue.rearm_failed.call_args.args
    assert email_args[1] == 3
    assert push_args[1] == 5
    queue_uow.commit.assert_awaited_once()


def test_base_queue_processor_requires_a_queue(queue_uow, client):
    with pytest.raises(TypeError):
        ProcessQueueUseCase(queue_uow, client)


def test_channel_processors_pick_their_own_queue(queue_uow, client):
    assert ProcessEmailQueueUseCase(queue_uow, client).queue() is queue_uow.email_queue
    assert ProcessPushQueueUseCase(queue_uow, client).queue() is queue_uow.push_queue
