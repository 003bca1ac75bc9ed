from __future__ import annotations

from typing import Any, Callable, Coroutine, Protocol

from whatsapp_relay.domain.events.session_events import SessionEvent

EventSink = Callable[[SessionEvent], Coroutine[Any, Any, None]]


class MessagingClient(Protocol):
    """Handle on the WhatsApp Web session owned by the third-party library."""

    async def connect(self, sink: EventSink) -> None: ...

    async def send_text(self, jid: str, text: str) -> None: ...

    async def logout(self) -> None: ...
