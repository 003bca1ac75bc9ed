"""Helpers for WhatsApp addresses (JIDs)."""
from __future__ import annotations

USER_SERVER = "s.whatsapp.net"
USER_SUFFIX = f"@{USER_SERVER}"


def to_jid(recipient: str) -> str:
    """Full JIDs pass through; bare phone numbers get the user server suffix."""
    if "@" in recipient:
        return recipient
    return f"{recipient}{USER_SUFFIX}"


def to_phone_number(jid: str) -> str:
    return jid.replace(USER_SUFFIX, "")


def split_jid(jid: str) -> tuple[str, str]:
    user, _, server = to_jid(jid).partition("@")
    return user, server
