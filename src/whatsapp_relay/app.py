from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from whatsapp_relay.api.middleware.request_context import RequestContextMiddleware
from whatsapp_relay.api.v1.routers import health, messages, session
from whatsapp_relay.application.dispatcher import EventDispatcher
from whatsapp_relay.application.exceptions import ValidationError
from whatsapp_relay.application.ports.backend import BackendClient
from whatsapp_relay.application.ports.clock import Clock
from whatsapp_relay.application.ports.messaging import MessagingClient
from whatsapp_relay.config import settings
from whatsapp_relay.domain.events.session_events import MessageReceived
from whatsapp_relay.infrastructure.backend.http_client import HttpBackendClient
from whatsapp_relay.infrastructure.clock import SystemClock
from whatsapp_relay.infrastructure.whatsapp.qr_terminal import render_qr
from whatsapp_relay.services.relay_service import InboundRelay
from whatsapp_relay.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


def _build_messaging_client() -> MessagingClient:
    from whatsapp_relay.infrastructure.whatsapp.neonize_client import NeonizeMessagingClient

    return NeonizeMessagingClient(
        settings.AUTH_STORE_PATH,
        device_name=settings.DEVICE_NAME,
        mark_online=settings.MARK_ONLINE_ON_CONNECT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    logger.info("WhatsApp relay listening on port %d", settings.PORT)
    logger.info("Backend URL: %s", settings.BACKEND_URL)
    await app.state.session_manager.start()

    yield

    logger.info("Stopping WhatsApp relay...")
    await app.state.session_manager.shutdown()
    await app.state.backend.aclose()


def create_app(
    messaging_client: MessagingClient | None = None,
    backend_client: BackendClient | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    dispatcher = EventDispatcher()
    session_manager = SessionManager(
        messaging_client or _build_messaging_client(),
        dispatcher,
        reconnect_delay=settings.RECONNECT_DELAY_SECONDS,
        init_retry_delay=settings.INIT_RETRY_DELAY_SECONDS,
        max_reconnect_attempts=settings.MAX_RECONNECT_ATTEMPTS,
        qr_renderer=render_qr if settings.PRINT_QR_IN_TERMINAL else None,
    )
    backend = backend_client or HttpBackendClient(
        settings.BACKEND_URL,
        timeout=settings.BACKEND_TIMEOUT_SECONDS,
    )
    relay = InboundRelay(session_manager, backend, settings.FALLBACK_REPLY)
    dispatcher.subscribe(MessageReceived, relay.handle)

    app = FastAPI(
        title="WhatsApp Relay Service",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.session_manager = session_manager
    app.state.backend = backend
    app.state.clock = clock or SystemClock()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(session.router)
    app.include_router(messages.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"success": False, "error": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def _request_validation(_req: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
        detail = f"invalid request: {', '.join(fields)}" if fields else "invalid request"
        return JSONResponse(status_code=400, content={"success": False, "error": detail})
