from __future__ import annotations

import pytest

from whatsapp_relay.application.dispatcher import EventDispatcher
from whatsapp_relay.domain.events.session_events import Connected, QrReceived


@pytest.mark.asyncio
async def test_dispatch_routes_by_event_type():
    dispatcher = EventDispatcher()
    received: list[str] = []

    async def on_qr(event: QrReceived) -> None:
        received.append(f"qr:{event.code}")

    async def on_connected(_event: Connected) -> None:
        received.append("connected")

    dispatcher.subscribe(QrReceived, on_qr)
    dispatcher.subscribe(Connected, on_connected)

    await dispatcher.dispatch(QrReceived(code="abc"))
    await dispatcher.dispatch(Connected())

    assert received == ["qr:abc", "connected"]


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    dispatcher = EventDispatcher()
    received: list[str] = []

    async def broken(_event: Connected) -> None:
        raise RuntimeError("boom")

    async def ok(_event: Connected) -> None:
        received.append("ok")

    dispatcher.subscribe(Connected, broken)
    dispatcher.subscribe(Connected, ok)

    await dispatcher.dispatch(Connected())

    assert received == ["ok"]


@pytest.mark.asyncio
async def test_unhandled_event_is_ignored():
    await EventDispatcher().dispatch(Connected())
