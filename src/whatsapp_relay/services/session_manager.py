"""Session manager: connection state machine around the messaging client."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable

from whatsapp_relay.application.dispatcher import EventDispatcher
from whatsapp_relay.application.dto.send_result import SendResult
from whatsapp_relay.application.exceptions import InvalidTransitionError, NotConnectedError
from whatsapp_relay.application.ports.messaging import MessagingClient
from whatsapp_relay.domain.entities.session_user import SessionUser
from whatsapp_relay.domain.events.session_events import (
    Connected,
    Connecting,
    Disconnected,
    InitFailed,
    QrReceived,
)
from whatsapp_relay.domain.value_objects.enums import ConnectionState
from whatsapp_relay.domain.value_objects.jid import to_jid

logger = logging.getLogger(__name__)

_S = ConnectionState

TRANSITIONS: dict[ConnectionState, frozenset[ConnectionState]] = {
    _S.DISCONNECTED: frozenset({_S.CONNECTING, _S.CONNECTED, _S.ERROR}),
    _S.CONNECTING: frozenset({_S.QR_GENERATED, _S.CONNECTED, _S.DISCONNECTED, _S.ERROR}),
    _S.QR_GENERATED: frozenset(
        {_S.QR_GENERATED, _S.CONNECTING, _S.CONNECTED, _S.DISCONNECTED, _S.ERROR}
    ),
    _S.CONNECTED: frozenset({_S.CONNECTING, _S.DISCONNECTED, _S.ERROR}),
    _S.ERROR: frozenset({_S.CONNECTING, _S.DISCONNECTED}),
}

_IN_PROGRESS = frozenset({_S.CONNECTING, _S.QR_GENERATED, _S.CONNECTED})


@dataclass
class SessionContext:
    """Process-lifetime view of the session, read by the HTTP layer."""

    state: ConnectionState = ConnectionState.DISCONNECTED
    qr: str | None = None
    user: SessionUser | None = None

    @property
    def connected(self) -> bool:
        return self.state == ConnectionState.CONNECTED


class SessionManager:
    def __init__(
        self,
        client: MessagingClient,
        dispatcher: EventDispatcher,
        *,
        context: SessionContext | None = None,
        reconnect_delay: float = 5.0,
        init_retry_delay: float = 10.0,
        max_reconnect_attempts: int | None = None,
        qr_renderer: Callable[[str], None] | None = None,
    ) -> None:
        self.context = context or SessionContext()
        self._client = client
        self._dispatcher = dispatcher
        self._reconnect_delay = reconnect_delay
        self._init_retry_delay = init_retry_delay
        self._max_reconnect_attempts = max_reconnect_attempts
        self._qr_renderer = qr_renderer

        self._restart_task: asyncio.Task[None] | None = None
        self._restart_attempts = 0
        self._started = False
        self._stopped = False

        dispatcher.subscribe(Connecting, self._on_connecting)
        dispatcher.subscribe(QrReceived, self._on_qr)
        dispatcher.subscribe(Connected, self._on_connected)
        dispatcher.subscribe(Disconnected, self._on_disconnected)
        dispatcher.subscribe(InitFailed, self._on_init_failed)

    @property
    def restart_pending(self) -> bool:
        return self._restart_task is not None and not self._restart_task.done()

    async def start(self) -> None:
        """Open the session with the library's stored credentials.

        No-op while a session is already connecting or connected. A failure
        to connect moves the state to ``error`` and schedules another attempt.
        """
        if self.context.state in _IN_PROGRESS:
            logger.debug("Session already %s, start skipped", self.context.state)
            return

        self._stopped = False
        self._started = True
        logger.info("Starting WhatsApp session...")
        await self._dispatcher.dispatch(Connecting())
        try:
            await self._client.connect(self._dispatcher.dispatch)
        except Exception as exc:
            logger.exception("WhatsApp initialisation failed")
            await self._dispatcher.dispatch(InitFailed(error=str(exc) or type(exc).__name__))

    async def stop(self) -> None:
        self._stopped = True
        if self._restart_task and not self._restart_task.done():
            self._restart_task.cancel()
            try:
                await self._restart_task
            except asyncio.CancelledError:
                pass
        self._restart_task = None

    async def shutdown(self) -> None:
        """Cancel pending restarts and log the session out."""
        await self.stop()
        if not self._started:
            return
        logger.info("Shutting down WhatsApp session...")
        try:
            await self._client.logout()
        except Exception:
            logger.exception("WhatsApp logout failed")

    async def send(self, recipient: str, text: str) -> SendResult:
        """Send a text message. Failures are returned, never raised."""
        try:
            if not self.context.connected:
                raise NotConnectedError()
            await self._client.send_text(to_jid(recipient), text)
        except Exception as exc:
            error = str(exc) or type(exc).__name__
            logger.error("Error sending message to %s: %s", recipient, error)
            return SendResult.failed(error)

        logger.info("Message sent to %s", recipient)
        return SendResult.ok()

    # -- state machine --------------------------------------------------------

    def transition(self, target: ConnectionState) -> None:
        current = self.context.state
        if target not in TRANSITIONS[current]:
            raise InvalidTransitionError(f"{current} -> {target}")
        self.context.state = target
        if target != ConnectionState.QR_GENERATED:
            self.context.qr = None
        logger.debug("Session state %s -> %s", current, target)

    def _try_transition(self, target: ConnectionState) -> bool:
        try:
            self.transition(target)
        except InvalidTransitionError as exc:
            logger.warning("Ignoring session event: invalid transition %s", exc.detail)
            return False
        return True

    async def _on_connecting(self, _event: Connecting) -> None:
        if self._try_transition(ConnectionState.CONNECTING):
            logger.info("Connecting to WhatsApp...")

    async def _on_qr(self, event: QrReceived) -> None:
        if not self._try_transition(ConnectionState.QR_GENERATED):
            return
        self.context.qr = event.code
        logger.info("QR code generated - scan it with WhatsApp")
        if self._qr_renderer is not None:
            try:
                self._qr_renderer(event.code)
            except Exception:
                logger.exception("Failed to render QR code")

    async def _on_connected(self, event: Connected) -> None:
        if not self._try_transition(ConnectionState.CONNECTED):
            return
        self.context.user = event.user
        self._restart_attempts = 0
        logger.info(
            "WhatsApp connected as %s",
            event.user.id if event.user else "unknown",
        )

    async def _on_disconnected(self, event: Disconnected) -> None:
        if not self._try_transition(ConnectionState.DISCONNECTED):
            return
        self.context.user = None
        should_reconnect = not event.logged_out
        logger.warning(
            "Connection closed: %s, reconnecting: %s",
            event.reason or "unknown",
            should_reconnect,
        )
        if should_reconnect:
            self._schedule_restart(self._reconnect_delay)

    async def _on_init_failed(self, event: InitFailed) -> None:
        if not self._try_transition(ConnectionState.ERROR):
            return
        self.context.user = None
        logger.error("WhatsApp initialisation error: %s", event.error)
        self._schedule_restart(self._init_retry_delay)

    # -- restarts -------------------------------------------------------------

    def _schedule_restart(self, delay: float) -> None:
        if self._stopped:
            return
        if (
            self._max_reconnect_attempts is not None
            and self._restart_attempts >= self._max_reconnect_attempts
        ):
            logger.error(
                "Giving up after %d reconnection attempts", self._restart_attempts,
            )
            return

        self._restart_attempts += 1
        if self._restart_task and not self._restart_task.done():
            self._restart_task.cancel()
        self._restart_task = asyncio.create_task(
            self._restart_after(delay), name="whatsapp-session-restart",
        )
        logger.info("Session restart #%d in %.1fs", self._restart_attempts, delay)

    async def _restart_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        self._restart_task = None
        await self.start()
