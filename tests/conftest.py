"""Shared test fixtures."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from whatsapp_relay.application.dispatcher import EventDispatcher
from whatsapp_relay.application.ports.messaging import EventSink
from whatsapp_relay.domain.entities.inbound_message import InboundMessage
from whatsapp_relay.services.session_manager import SessionManager

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def make_inbound(
    *,
    sender: str = "5511999990000",
    text: str = "oi",
    message_id: str = "3EB0ABCDEF",
    timestamp: int = 1_700_000_000,
) -> InboundMessage:
    return InboundMessage(sender=sender, text=text, message_id=message_id, timestamp=timestamp)


@dataclass
class FakeMessagingClient:
    """In-memory messaging client for unit tests."""
    connect_error: Exception | None = None
    send_error: Exception | None = None
    connect_calls: int = 0
    logout_calls: int = 0
    sent: list[tuple[str, str]] = field(default_factory=list)
    sink: EventSink | None = None

    async def connect(self, sink: EventSink) -> None:
        self.connect_calls += 1
        self.sink = sink
        if self.connect_error is not None:
            raise self.connect_error

    async def send_text(self, jid: str, text: str) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append((jid, text))

    async def logout(self) -> None:
        self.logout_calls += 1


@dataclass
class FakeBackend:
    reply: str | None = None
    error: Exception | None = None
    forwarded: list[InboundMessage] = field(default_factory=list)
    closed: bool = False

    async def forward(self, message: InboundMessage) -> str | None:
        self.forwarded.append(message)
        if self.error is not None:
            raise self.error
        return self.reply

    async def aclose(self) -> None:
        self.closed = True


@dataclass
class FixedClock:
    value: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.value


@pytest.fixture
def messaging() -> FakeMessagingClient:
    return FakeMessagingClient()


@pytest.fixture
def dispatcher() -> EventDispatcher:
    return EventDispatcher()


@pytest.fixture
def manager(messaging: FakeMessagingClient, dispatcher: EventDispatcher) -> SessionManager:
    return SessionManager(
        messaging,
        dispatcher,
        reconnect_delay=0.01,
        init_retry_delay=0.01,
    )
