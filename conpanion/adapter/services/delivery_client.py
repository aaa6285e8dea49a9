"""
HTTP client for the hosted delivery functions.

The functions read the queue tables themselves; a call is only a trigger
carrying the service credential and an empty JSON body.
"""

import logging
from typing import Optional

import httpx

from conpanion.app.services.delivery_client import DeliveryOutcome, IDeliveryClient
from conpanion.domain.entities import DeliveryChannel

logger = logging.getLogger(__name__)

FUNCTION_PATHS = {
    DeliveryChannel.email: "/functions/v1/send-email-notification",
    DeliveryChannel.push: "/functions/v1/send-push-notification",
}

TIMEOUT_MESSAGE = "Request timeout"


class HttpDeliveryClient(IDeliveryClient):
    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self.transport = transport

    async def dispatch(self, channel: DeliveryChannel) -> DeliveryOutcome:
        path = FUNCTION_PATHS.get(channel)
        if path is None:
            raise ValueError(f"No delivery function for channel {channel.value}")

        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "Content-Type": "application/json",
        }
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.post(
                    f"{self.base_url}{path}", headers=headers, json={}
                )
        except httpx.TimeoutException:
            logger.warning("Delivery function %s timed out", path)
            return DeliveryOutcome(ok=False, error=TIMEOUT_MESSAGE)
        except httpx.RequestError as exc:
            logger.warning("Delivery function %s unreachable: %s", path, exc)
            return DeliveryOutcome(ok=False, error=str(exc) or type(exc).__name__)

        if response.status_code >= 400:
            error = f"HTTP {response.status_code}: {response.text[:500]}"
            logger.warning("Delivery function %s failed: %s", path, error)
            return DeliveryOutcome(
                ok=False, status_code=response.status_code, error=error
            )

        try:
            body = response.json()
        except ValueError:
            body = response.text
        return DeliveryOutcome(ok=True, status_code=response.status_code, body=body)
