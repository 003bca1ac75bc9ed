"""HTTP client for the backend service that processes inbound messages."""
from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from whatsapp_relay.application.exceptions import BackendError
from whatsapp_relay.domain.entities.inbound_message import InboundMessage

logger = logging.getLogger(__name__)

MESSAGE_PATH = "/api/whatsapp/message"


class BackendReply(BaseModel):
    reply: str | None = None

    model_config = ConfigDict(extra="ignore")


class HttpBackendClient:
    """Implements application.ports.backend.BackendClient."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = f"{base_url.rstrip('/')}{MESSAGE_PATH}"
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def forward(self, message: InboundMessage) -> str | None:
        payload = {
            "phone_number": message.sender,
            "message": message.text,
            "message_id": message.message_id,
            "timestamp": message.timestamp,
        }
        try:
            response = await self._client.post(self._url, json=payload)
            response.raise_for_status()
            data = BackendReply.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            raise BackendError(f"backend returned {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise BackendError(f"backend request failed: {exc}") from exc
        except (ValueError, PydanticValidationError) as exc:
            raise BackendError(f"invalid backend response: {exc}") from exc

        logger.debug("Backend processed message %s", message.message_id)
        return data.reply

    async def aclose(self) -> None:
        await self._client.aclose()
