"""
Delivery Use Cases

Queue draining, retries and status reports for email and push.
"""

from .dtos import DeliveryStatusResponse, QueueProcessResponse, RetryFailedResponse
from .process_queue_use_case import (
    ProcessEmailQueueUseCase,
    ProcessPushQueueUseCase,
    ProcessQueueUseCase,
)
from .report_delivery_status_use_case import ReportDeliveryStatusUseCase
from .retry_failed_notifications_use_case import RetryFailedNotificationsUseCase

__all__ = [
    "ProcessQueueUseCase",
    "ProcessEmailQueueUseCase",
    "ProcessPushQueueUseCase",
    "RetryFailedNotificationsUseCase",
    "ReportDeliveryStatusUseCase",
    "QueueProcessResponse",
    "RetryFailedResponse",
    "DeliveryStatusResponse",
]
