from datetime import time
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from pydantic import BaseModel, Field

from conpanion.api.error import unwrap
from conpanion.app.services.unit_of_work import UnitOfWork
from conpanion.app.use_cases.notifications import (
    ListNotificationsUseCase,
    MarkAllNotificationsReadUseCase,
    MarkAllReadResponse,
    MarkNotificationReadUseCase,
    NotificationItem,
    NotificationPage,
    UnreadCountResponse,
    UnreadCountUseCase,
)
from conpanion.app.use_cases.preferences import (
    GetNotificationPreferencesUseCase,
    ListPushSubscriptionsUseCase,
    PreferenceItem,
    PreferencesResponse,
    PushSubscriptionItem,
    PushSubscriptionList,
    SettingsItem,
    SubscribePushUseCase,
    UnsubscribePushUseCase,
    UpdateNotificationPreferenceUseCase,
    UpdateNotificationSettingsUseCase,
)
from conpanion.depends import get_current_user_id, get_unit_of_work
from conpanion.domain.entities.enums import DevicePlatform, NotificationType

router = APIRouter(prefix="/notifications", tags=["Notifications"])


class UpdatePreferenceRequest(BaseModel):
    type: NotificationType
    email_enabled: Optional[bool] = None
    push_enabled: Optional[bool] = None
    in_app_enabled: Optional[bool] = None


class UpdateSettingsRequest(BaseModel):
    notifications_enabled: Optional[bool] = None
    quiet_hours_enabled: Optional[bool] = None
    quiet_hours_start: Optional[time] = None
    quiet_hours_end: Optional[time] = None
    timezone: Optional[str] = Field(None, description="IANA timezone name")


class SubscribePushRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)
    platform: DevicePlatform = DevicePlatform.web
    p256dh: Optional[str] = None
    auth: Optional[str] = None
    device_name: Optional[str] = None


class UnsubscribePushRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)


@router.get("", response_model=NotificationPage)
async def list_notifications(
    unread_only: bool = False,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Newest first, with the caller's total unread count"""
    result = await ListNotificationsUseCase(uow).execute(
        user_id, unread_only=unread_only, limit=limit, offset=offset
    )
    return unwrap(result)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await UnreadCountUseCase(uow).execute(user_id))


@router.post("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await MarkAllNotificationsReadUseCase(uow).execute(user_id))


@router.post("/{notification_id}/read", response_model=NotificationItem)
async def mark_read(
    notification_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 404 Not Found: NOT_FOUND (also when it belongs to someone else)
    """
    result = await MarkNotificationReadUseCase(uow).execute(notification_id, user_id)
    return unwrap(result)


@router.get("/preferences", response_model=PreferencesResponse)
async def get_preferences(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await GetNotificationPreferencesUseCase(uow).execute(user_id))


@router.put("/preferences", response_model=PreferenceItem)
async def update_preference(
    request: UpdatePreferenceRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Per-type channel switches. Omitted switches are left unchanged."""
    result = await UpdateNotificationPreferenceUseCase(uow).execute(
        user_id,
        request.type,
        email_enabled=request.email_enabled,
        push_enabled=request.push_enabled,
        in_app_enabled=request.in_app_enabled,
    )
    return unwrap(result)


@router.put("/settings", response_model=SettingsItem)
async def update_settings(
    request: UpdateSettingsRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Raises:
        - 400 Bad Request: INVALID_INPUT (unknown timezone, quiet hours
          enabled without a window)
    """
    result = await UpdateNotificationSettingsUseCase(uow).execute(
        user_id,
        notifications_enabled=request.notifications_enabled,
        quiet_hours_enabled=request.quiet_hours_enabled,
        quiet_hours_start=request.quiet_hours_start,
        quiet_hours_end=request.quiet_hours_end,
        timezone=request.timezone,
    )
    return unwrap(result)


@router.get("/push-subscriptions", response_model=PushSubscriptionList)
async def list_push_subscriptions(
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await ListPushSubscriptionsUseCase(uow).execute(user_id))


@router.post(
    "/push-subscriptions",
    status_code=status.HTTP_201_CREATED,
    response_model=PushSubscriptionItem,
)
async def subscribe_push(
    request: SubscribePushRequest,
    http_request: Request,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Register a device. Re-registering an endpoint updates and reactivates
    the existing subscription.
    """
    result = await SubscribePushUseCase(uow).execute(
        user_id,
        request.endpoint,
        platform=request.platform,
        p256dh=request.p256dh,
        auth=request.auth,
        user_agent=http_request.headers.get("user-agent"),
        device_name=request.device_name,
    )
    return unwrap(result)


@router.delete("/push-subscriptions", response_model=PushSubscriptionItem)
async def unsubscribe_push(
    request: UnsubscribePushRequest,
    user_id: UUID = Depends(get_current_user_id),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    return unwrap(await UnsubscribePushUseCase(uow).execute(user_id, request.endpoint))
