from __future__ import annotations

from pydantic import BaseModel


class SendMessageRequest(BaseModel):
    phone_number: str | None = None
    message: str | None = None


class SendMessageResponse(BaseModel):
    success: bool
    error: str | None = None

    model_config = {"from_attributes": True}
