"""Messaging client backed by neonize (Python bindings over whatsmeow).

neonize owns the WhatsApp Web protocol, pairing, credential storage and
socket-level reconnects. This adapter only translates its callbacks into
session events and exposes the few calls the relay needs.

``NewAClient.connect()`` returns as soon as the Go session task is started;
that task (``connect_task``) is what tells whether the session is alive.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from neonize.aioze.client import NewAClient
from neonize.events import (
    ConnectedEv,
    ConnectFailureEv,
    DisconnectedEv,
    LoggedOutEv,
    MessageEv,
    StreamReplacedEv,
)
from neonize.proto.waCompanionReg.WAWebProtobufsCompanionReg_pb2 import DeviceProps
from neonize.utils import build_jid
from neonize.utils.enum import Presence

from whatsapp_relay.application.ports.messaging import EventSink
from whatsapp_relay.domain.entities.session_user import SessionUser
from whatsapp_relay.domain.events.session_events import (
    Connected,
    Disconnected,
    InitFailed,
    MessageReceived,
    QrReceived,
    SessionEvent,
)
from whatsapp_relay.domain.value_objects.jid import split_jid
from whatsapp_relay.infrastructure.whatsapp.message_parser import jid_to_str, to_inbound

logger = logging.getLogger(__name__)


def build_device_props(device_name: str) -> DeviceProps:
    """Name shown for this linked device in the phone's "Linked devices" list."""
    return DeviceProps(os=device_name, platformType=DeviceProps.CHROME)


class NeonizeMessagingClient:
    """Implements application.ports.messaging.MessagingClient."""

    def __init__(
        self,
        store_path: str,
        *,
        device_name: str = "CRM Turbo",
        mark_online: bool = True,
        client: Any | None = None,
    ) -> None:
        if client is None:
            Path(store_path).parent.mkdir(parents=True, exist_ok=True)
            client = NewAClient(store_path, props=build_device_props(device_name))
        self._client = client
        self._mark_online = mark_online
        self._sink: EventSink | None = None
        self._session_task: asyncio.Task[Any] | None = None
        self._pending: set[asyncio.Task[None]] = set()
        self._register_handlers()

    @property
    def running(self) -> bool:
        return self._session_task is not None and not self._session_task.done()

    async def connect(self, sink: EventSink) -> None:
        self._sink = sink
        if self.running:
            logger.debug("neonize session already running, connect skipped")
            return
        await self._client.connect()
        self._session_task = self._client.connect_task
        if self._session_task is not None:
            self._session_task.add_done_callback(self._on_session_done)

    async def send_text(self, jid: str, text: str) -> None:
        user, server = split_jid(jid)
        await self._client.send_message(build_jid(user, server), text)

    async def logout(self) -> None:
        await self._client.logout()

    async def _emit(self, event: SessionEvent) -> None:
        if self._sink is None:
            logger.debug("Dropping %s: no event sink", type(event).__name__)
            return
        await self._sink(event)

    def _on_session_done(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is None:
            logger.info("neonize session task finished")
            return
        logger.error("neonize session task failed: %s", exc)
        pending = asyncio.get_running_loop().create_task(
            self._emit(InitFailed(error=str(exc) or type(exc).__name__)),
            name="neonize-init-failed",
        )
        self._pending.add(pending)
        pending.add_done_callback(self._pending.discard)

    def _current_user(self) -> SessionUser | None:
        me = self._client.me
        if me is None:
            return None
        return SessionUser(id=jid_to_str(me.JID), name=me.PushName or None)

    async def _go_online(self) -> None:
        try:
            await self._client.send_presence(Presence.AVAILABLE)
        except Exception as exc:
            logger.warning("Could not mark session online: %s", exc)

    def _register_handlers(self) -> None:
        client = self._client

        @client.event.qr
        async def _on_qr(_: Any, data: bytes) -> None:
            code = data.decode() if isinstance(data, bytes) else str(data)
            await self._emit(QrReceived(code=code))

        @client.event(ConnectedEv)
        async def _on_connected(_: Any, __: ConnectedEv) -> None:
            await self._emit(Connected(user=self._current_user()))
            if self._mark_online:
                await self._go_online()

        @client.event(DisconnectedEv)
        async def _on_disconnected(_: Any, __: DisconnectedEv) -> None:
            await self._emit(Disconnected(reason="connection lost"))

        @client.event(StreamReplacedEv)
        async def _on_stream_replaced(_: Any, __: StreamReplacedEv) -> None:
            await self._emit(Disconnected(reason="stream replaced"))

        @client.event(ConnectFailureEv)
        async def _on_connect_failure(_: Any, ev: ConnectFailureEv) -> None:
            await self._emit(Disconnected(reason=f"connect failure: {ev.Reason}"))

        @client.event(LoggedOutEv)
        async def _on_logged_out(_: Any, ev: LoggedOutEv) -> None:
            await self._emit(Disconnected(reason=f"logged out: {ev.Reason}", logged_out=True))

        @client.event(MessageEv)
        async def _on_message(_: Any, ev: MessageEv) -> None:
            if not ev.HasField("Message"):
                return
            info = ev.Info
            source = info.MessageSource
            message = to_inbound(
                jid_to_str(source.Chat), info.ID, info.Timestamp, ev.Message,
            )
            await self._emit(MessageReceived(message=message, from_me=source.IsFromMe))
