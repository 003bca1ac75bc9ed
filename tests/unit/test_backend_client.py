from __future__ import annotations

import json

import httpx
import pytest

from whatsapp_relay.application.exceptions import BackendError
from whatsapp_relay.infrastructure.backend.http_client import HttpBackendClient
from tests.conftest import make_inbound


def _backend(handler) -> HttpBackendClient:
    transport = httpx.MockTransport(handler)
    return HttpBackendClient(
        "http://backend.test/",
        client=httpx.AsyncClient(transport=transport),
    )


@pytest.mark.asyncio
async def test_forward_posts_message_payload():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"reply": "Olá"})

    backend = _backend(handler)
    reply = await backend.forward(make_inbound(text="preço?", message_id="ABC", timestamp=1700000001))
    await backend.aclose()

    assert reply == "Olá"
    assert len(seen) == 1
    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://backend.test/api/whatsapp/message"
    assert json.loads(seen[0].content) == {
        "phone_number": "5511999990000",
        "message": "preço?",
        "message_id": "ABC",
        "timestamp": 1700000001,
    }


@pytest.mark.asyncio
async def test_forward_without_reply_returns_none():
    backend = _backend(lambda request: httpx.Response(200, json={"status": "queued"}))

    assert await backend.forward(make_inbound()) is None


@pytest.mark.asyncio
async def test_error_status_raises_backend_error():
    backend = _backend(lambda request: httpx.Response(500, json={"detail": "boom"}))

    with pytest.raises(BackendError, match="500"):
        await backend.forward(make_inbound())


@pytest.mark.asyncio
async def test_invalid_json_raises_backend_error():
    backend = _backend(lambda request: httpx.Response(200, text="<html>oops</html>"))

    with pytest.raises(BackendError, match="invalid backend response"):
        await backend.forward(make_inbound())


@pytest.mark.asyncio
async def test_non_string_reply_raises_backend_error():
    backend = _backend(lambda request: httpx.Response(200, json={"reply": {"text": "hi"}}))

    with pytest.raises(BackendError):
        await backend.forward(make_inbound())


@pytest.mark.asyncio
async def test_transport_error_raises_backend_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend = _backend(handler)

    with pytest.raises(BackendError, match="request failed"):
        await backend.forward(make_inbound())
