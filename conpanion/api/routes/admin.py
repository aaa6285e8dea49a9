"""
Admin API Routes - Operator Endpoints

Job triggers, delivery status callbacks and system broadcasts. Used by the
delivery functions and by operators; authentication is via Admin API Key,
not user JWTs.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from libs.result import Error
from conpanion.api.error import ServerError, unwrap
from conpanion.api.utils.admin_auth import verify_admin_api_key
from conpanion.app.services.secret_store import MissingSecretError
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.delivery import (
    DeliveryStatusResponse,
    ReportDeliveryStatusUseCase,
)
from conpanion.app.use_cases.notifications import (
    CreateSystemNotificationUseCase,
    SystemNotificationResponse,
)
from conpanion.depends import get_delivery_client_provider, get_unit_of_work
from conpanion.domain.entities.enums import (
    DeliveryChannel,
    DeliveryStatus,
    NotificationPriority,
)
from conpanion.jobs import run_job

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_api_key)]
)


class DeliveryStatusRequest(BaseModel):
    status: DeliveryStatus
    error: Optional[str] = None


class SystemNotificationRequest(BaseModel):
    user_ids: List[UUID] = Field(..., min_length=1)
    message: str = Field(..., min_length=1)
    priority: NotificationPriority = NotificationPriority.medium
    data: Dict[str, Any] = {}


class JobRunResponse(BaseModel):
    job: str
    result: Dict[str, Any]


@router.post("/jobs/{job}", status_code=status.HTTP_200_OK, response_model=JobRunResponse)
async def trigger_job(
    job: str,
    uow: UnitOfWork = Depends(get_unit_of_work),
    client_provider=Depends(get_delivery_client_provider),
):
    """
    Run Job

    Runs one background job immediately, the same way the scheduler does.

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: NOT_FOUND (unknown job)
        - 500 Internal Server Error: DELIVERY_NOT_CONFIGURED, Server error
    """
    try:
        result = await run_job(job, uow, client_provider)
    except MissingSecretError as exc:
        raise ServerError(Error("DELIVERY_NOT_CONFIGURED", str(exc)))

    return JobRunResponse(job=job, result=unwrap(result).model_dump())


@router.post(
    "/deliveries/{channel}/{entry_id}", response_model=DeliveryStatusResponse
)
async def report_delivery_status(
    channel: DeliveryChannel,
    entry_id: UUID,
    request: DeliveryStatusRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Delivery Status Callback

    Raises:
        - 400 Bad Request: INVALID_INPUT (status other than sent/failed,
          or realtime channel)
        - 404 Not Found: NOT_FOUND
    """
    result = await ReportDeliveryStatusUseCase(uow).execute(
        channel, entry_id, request.status, error=request.error
    )
    return unwrap(result)


@router.post(
    "/notifications/system",
    status_code=status.HTTP_201_CREATED,
    response_model=SystemNotificationResponse,
)
async def create_system_notification(
    request: SystemNotificationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    result = await CreateSystemNotificationUseCase(uow).execute(
        request.user_ids, request.message, request.priority, request.data
    )
    return unwrap(result)
