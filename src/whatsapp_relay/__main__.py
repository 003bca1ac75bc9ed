"""Entrypoint: python -m whatsapp_relay"""
from __future__ import annotations

import logging

import uvicorn

from whatsapp_relay.api.middleware.request_context import RequestIdFilter
from whatsapp_relay.config import settings


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s [%(request_id)s]: %(message)s",
    )
    for handler in logging.getLogger().handlers:
        handler.addFilter(RequestIdFilter())


def main() -> None:
    configure_logging()
    uvicorn.run(
        "whatsapp_relay.app:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
