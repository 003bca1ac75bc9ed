from __future__ import annotations

from typing import Protocol

from whatsapp_relay.domain.entities.inbound_message import InboundMessage


class BackendClient(Protocol):
    async def forward(self, message: InboundMessage) -> str | None: ...

    async def aclose(self) -> None: ...
