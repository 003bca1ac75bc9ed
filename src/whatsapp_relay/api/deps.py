"""FastAPI dependency injection helpers."""
from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from whatsapp_relay.application.ports.clock import Clock
from whatsapp_relay.services.session_manager import SessionContext, SessionManager


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


SessionManagerDep = Annotated[SessionManager, Depends(get_session_manager)]


def get_session_context(session: SessionManagerDep) -> SessionContext:
    return session.context


SessionContextDep = Annotated[SessionContext, Depends(get_session_context)]


def get_clock(request: Request) -> Clock:
    return request.app.state.clock


ClockDep = Annotated[Clock, Depends(get_clock)]
