from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InboundMessage:
    sender: str
    text: str
    message_id: str
    timestamp: int
