import logging
import os
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "postgresql://localhost:5432/golf_scoring"
DEFAULT_PORT = 8000


@dataclass(frozen=True)
class Settings:
    database_url: str
    scoring_pin: str
    golf_api_key: str
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    ssl_certfile: Optional[str] = None
    ssl_keyfile: Optional[str] = None


def _normalize_database_url(value: Optional[str]) -> str:
    if not value or not value.strip():
        return DEFAULT_DATABASE_URL
    normalized = value.strip()
    # Heroku-style URLs
    if normalized.startswith("postgres://"):
        return "postgresql://" + normalized[len("postgres://"):]
    return normalized


def _port_setting() -> int:
    # APP_PORT wins over the platform-provided PORT.
    for key in ("APP_PORT", "PORT"):
        value = os.getenv(key)
        if not value:
            continue
        try:
            return int(value)
        except ValueError:
            logger.warning("Ignoring %s=%s (not an integer)", key, value)
    return DEFAULT_PORT


def load_settings() -> Settings:
    return Settings(
        database_url=_normalize_database_url(os.getenv("DATABASE_URL")),
        scoring_pin=os.getenv("SCORING_PIN", "1234"),
        golf_api_key=os.getenv("GOLF_API_KEY", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        host=os.getenv("APP_HOST", "0.0.0.0"),
        port=_port_setting(),
        ssl_certfile=os.getenv("SSL_CERT_FILE") or None,
        ssl_keyfile=os.getenv("SSL_KEY_FILE") or None,
    )
