import httpx
import pytest

from conpanion.adapter.services.delivery_client import HttpDeliveryClient
from conpanion.domain.entities import DeliveryChannel


def _client(handler) -> HttpDeliveryClient:
    return HttpDeliveryClient(
        base_url="https://functions.example.com/",
        service_key="service-key",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_posts_empty_body_with_bearer_key():
    # Arrange
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"processed": 3})

    # Act
    outcome = await _client(handler).dispatch(DeliveryChannel.email)

    # Assert
    assert outcome.ok is True
    assert outcome.body == {"processed": 3}
    assert seen["url"] == "https://functions.example.com/functions/v1/send-email-notification"
    assert seen["auth"] == "Bearer service-key"
    assert seen["body"] == b"{}"


@pytest.mark.asyncio
async def test_push_channel_uses_push_function():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        return httpx.Response(200, json={})

    await _client(handler).dispatch(DeliveryChannel.push)

    assert seen["path"] == "/functions/v1/send-push-notification"


@pytest.mark.asyncio
async def test_http_error_status_is_a_failed_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="unavailable")

    outcome = await _client(handler).dispatch(DeliveryChannel.email)

    assert outcome.ok is False
    assert outcome.status_code == 503
    assert outcome.error == "HTTP 503: unavailable"


@pytest.mark.asyncio
async def test_timeout_is_a_failed_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    outcome = await _client(handler).dispatch(DeliveryChannel.push)

    assert outcome.ok is False
    assert outcome.error == "Request timeout"


@pytest.mark.asyncio
async def test_connection_error_is_a_failed_outcome():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = await _client(handler).dispatch(DeliveryChannel.email)

    assert outcome.ok is False
    assert outcome.error == "connection refused"


@pytest.mark.asyncio
async def test_realtime_channel_has_no_function():
    with pytest.raises(ValueError):
        await _client(lambda request: httpx.Response(200)).dispatch(DeliveryChannel.realtime)
