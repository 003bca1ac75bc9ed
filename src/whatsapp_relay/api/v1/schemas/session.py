from __future__ import annotations

from pydantic import BaseModel


class QrResponse(BaseModel):
    qr: str | None
    status: str


class SessionUserResponse(BaseModel):
    id: str
    name: str | None = None

    model_config = {"from_attributes": True}


class StatusResponse(BaseModel):
    connected: bool
    status: str
    user: SessionUserResponse | None
