from __future__ import annotations

from fastapi import APIRouter

from whatsapp_relay.api.deps import ClockDep, SessionContextDep
from whatsapp_relay.api.v1.schemas.health import HealthResponse
from whatsapp_relay.config import settings

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(context: SessionContextDep, clock: ClockDep) -> HealthResponse:
    return HealthResponse(
        service=settings.SERVICE_NAME,
        connection=context.state.value,
        timestamp=clock.now(),
    )
