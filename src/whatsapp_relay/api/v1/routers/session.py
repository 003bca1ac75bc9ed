from __future__ import annotations

from fastapi import APIRouter

from whatsapp_relay.api.deps import SessionContextDep
from whatsapp_relay.api.v1.schemas.session import (
    QrResponse,
    SessionUserResponse,
    StatusResponse,
)

router = APIRouter(tags=["session"])


@router.get("/qr", response_model=QrResponse)
async def get_qr(context: SessionContextDep) -> QrResponse:
    return QrResponse(qr=context.qr, status=context.state.value)


@router.get("/status", response_model=StatusResponse)
async def get_status(context: SessionContextDep) -> StatusResponse:
    user = (
        SessionUserResponse.model_validate(context.user, from_attributes=True)
        if context.user
        else None
    )
    return StatusResponse(
        connected=context.connected,
        status=context.state.value,
        user=user,
    )
