"""Inbound relay: forwards received messages to the backend and replies."""
from __future__ import annotations

import logging

from whatsapp_relay.application.ports.backend import BackendClient
from whatsapp_relay.domain.events.session_events import MessageReceived
from whatsapp_relay.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class InboundRelay:
    def __init__(
        self,
        session: SessionManager,
        backend: BackendClient,
        fallback_reply: str,
    ) -> None:
        self._session = session
        self._backend = backend
        self._fallback_reply = fallback_reply

    async def handle(self, event: MessageReceived) -> None:
        if event.from_me:
            return

        message = event.message
        logger.info("Message received from %s: %s", message.sender, message.text)

        try:
            reply = await self._backend.forward(message)
            if reply:
                logger.info("Sending reply to %s", message.sender)
                await self._session.send(message.sender, reply)
        except Exception as exc:
            logger.error("Error processing message %s: %s", message.message_id, exc)
            await self._send_fallback(message.sender)

    async def _send_fallback(self, sender: str) -> None:
        try:
            result = await self._session.send(sender, self._fallback_reply)
        except Exception:
            logger.exception("Error sending fallback reply to %s", sender)
            return
        if not result.success:
            logger.error("Error sending fallback reply to %s: %s", sender, result.error)
