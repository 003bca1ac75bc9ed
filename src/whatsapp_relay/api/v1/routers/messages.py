from __future__ import annotations

from fastapi import APIRouter, Body

from whatsapp_relay.api.deps import SessionManagerDep
from whatsapp_relay.api.v1.schemas.message import SendMessageRequest, SendMessageResponse
from whatsapp_relay.application.exceptions import ValidationError

router = APIRouter(tags=["messages"])


@router.post(
    "/send",
    response_model=SendMessageResponse,
    response_model_exclude_none=True,
)
async def send_message(
    session: SessionManagerDep,
    body: SendMessageRequest | None = Body(None),
) -> SendMessageResponse:
    if body is None or not body.phone_number or not body.message:
        raise ValidationError("phone_number and message are required")

    result = await session.send(body.phone_number, body.message)
    return SendMessageResponse.model_validate(result, from_attributes=True)
