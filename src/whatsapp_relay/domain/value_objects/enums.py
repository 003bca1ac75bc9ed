from __future__ import annotations

from enum import StrEnum


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    QR_GENERATED = "qr_generated"
    CONNECTED = "connected"
    ERROR = "error"
