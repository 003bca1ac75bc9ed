"""In-process dispatcher routing session events to their handlers by type."""
from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine

from whatsapp_relay.domain.events.session_events import SessionEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any], Coroutine[Any, Any, None]]


class EventDispatcher:
    def __init__(self) -> None:
        self._handlers: dict[type, list[EventHandler]] = {}

    def subscribe(self, event_type: type, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    async def dispatch(self, event: SessionEvent) -> None:
        """Run every handler registered for the event's type, in order.

        A failing handler is logged and does not stop the others.
        """
        handlers = self._handlers.get(type(event), [])
        if not handlers:
            logger.debug("No handler for event %s", type(event).__name__)
            return
        for handler in handlers:
            try:
                await handler(event)
            except Exception:
                logger.exception("Error handling %s", type(event).__name__)
