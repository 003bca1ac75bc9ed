"""Conversions from whatsmeow message protos to relay types."""
from __future__ import annotations

import time
from typing import Any

from whatsapp_relay.domain.entities.inbound_message import InboundMessage
from whatsapp_relay.domain.value_objects.jid import to_phone_number


def extract_text(message: Any) -> str:
    return message.conversation or message.extendedTextMessage.text or ""


def normalize_timestamp(raw: int | None) -> int:
    """Unix seconds; millisecond values are scaled down, missing ones replaced by now."""
    if not raw:
        return int(time.time())
    if raw > 10**12:
        return raw // 1000
    return raw


def to_inbound(chat_jid: str, message_id: str, timestamp: int | None, message: Any) -> InboundMessage:
    return InboundMessage(
        sender=to_phone_number(chat_jid),
        text=extract_text(message),
        message_id=message_id,
        timestamp=normalize_timestamp(timestamp),
    )


def jid_to_str(jid: Any) -> str:
    """Render a whatsmeow JID proto as ``user[:device]@server``."""
    user = f"{jid.User}:{jid.Device}" if jid.Device else jid.User
    return f"{user}@{jid.Server}"
