from __future__ import annotations

from pydantic import AliasChoices, ConfigDict, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    BACKEND_URL: str = Field(
        default="https://500-production-642e.up.railway.app",
        validation_alias=AliasChoices("BACKEND_URL", "FASTAPI_URL"),
    )
    BACKEND_TIMEOUT_SECONDS: float = 30.0

    HOST: str = "0.0.0.0"
    PORT: int = 3001

    SERVICE_NAME: str = "whatsapp-service"
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: list[str] = ["*"]

    AUTH_STORE_PATH: str = "auth_info/session.sqlite3"
    PRINT_QR_IN_TERMINAL: bool = True
    DEVICE_NAME: str = "CRM Turbo"
    MARK_ONLINE_ON_CONNECT: bool = True

    RECONNECT_DELAY_SECONDS: float = 5.0
    INIT_RETRY_DELAY_SECONDS: float = 10.0
    MAX_RECONNECT_ATTEMPTS: int | None = None

    FALLBACK_REPLY: str = (
        "Desculpe, houve um erro temporário. Tente novamente em alguns minutos."
    )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
