"""
Preference Use Cases

Notification preferences, settings and push subscriptions.
"""

from .dtos import (
    CleanupSubscriptionsResponse,
    PreferenceItem,
    PreferencesResponse,
    PushSubscriptionItem,
    PushSubscriptionList,
    SettingsItem,
)
from .preferences_use_case import (
    GetNotificationPreferencesUseCase,
    UpdateNotificationPreferenceUseCase,
    UpdateNotificationSettingsUseCase,
)
from .push_subscriptions_use_case import (
    CleanupInactiveSubscriptionsUseCase,
    ListPushSubscriptionsUseCase,
    SubscribePushUseCase,
    UnsubscribePushUseCase,
)

__all__ = [
    "GetNotificationPreferencesUseCase",
    "UpdateNotificationPreferenceUseCase",
    "UpdateNotificationSettingsUseCase",
    "SubscribePushUseCase",
    "UnsubscribePushUseCase",
    "ListPushSubscriptionsUseCase",
    "CleanupInactiveSubscriptionsUseCase",
    "PreferenceItem",
    "SettingsItem",
    "PreferencesResponse",
    "PushSubscriptionItem",
    "PushSubscriptionList",
    "CleanupSubscriptionsResponse",
]
