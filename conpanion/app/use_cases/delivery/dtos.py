"""
Delivery Use Case DTOs (Data Transfer Objects)
"""

from typing import Optional

from pydantic import BaseModel


class QueueProcessResponse(BaseModel):
    channel: str
    processed: int
    sent: int
    failed: int
    error: Optional[str] = None


class RetryFailedResponse(BaseModel):
    email_requeued: int
    push_requeued: int


class DeliveryStatusResponse(BaseModel):
    channel: str
    entry_id: str
    status: str
    retry_count: int
