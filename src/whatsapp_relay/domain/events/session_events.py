"""Events emitted by the messaging client and consumed by the session manager."""
from __future__ import annotations

from dataclasses import dataclass

from whatsapp_relay.domain.entities.inbound_message import InboundMessage
from whatsapp_relay.domain.entities.session_user import SessionUser


@dataclass(frozen=True, slots=True)
class Connecting:
    pass


@dataclass(frozen=True, slots=True)
class QrReceived:
    code: str


@dataclass(frozen=True, slots=True)
class Connected:
    user: SessionUser | None = None


@dataclass(frozen=True, slots=True)
class Disconnected:
    reason: str = ""
    logged_out: bool = False


@dataclass(frozen=True, slots=True)
class InitFailed:
    error: str


@dataclass(frozen=True, slots=True)
class MessageReceived:
    message: InboundMessage
    from_me: bool = False


SessionEvent = Connecting | QrReceived | Connected | Disconnected | InitFailed | MessageReceived
