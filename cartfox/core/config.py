"""Environment-driven configuration objects for the cart client."""
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .exceptions import ConfigurationException

DEFAULT_MONEY_FORMAT = "{{amount}}"


def _str_to_bool(value: str | None, default: bool = False) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in {"true", "1", "yes", "y"}


def _get_float(key: str) -> float | None:
    raw = os.getenv(key, "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationException(f"{key} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationException(f"{key} must be positive, got {raw!r}")
    return value


@dataclass(slots=True)
class Settings:
    base_url: str
    request_timeout: float | None
    money_format: str
    log_level: str
    render_on_update: bool


def load_settings() -> Settings:
    """Load environment variables once and expose typed settings."""
    load_dotenv()

    base_url = os.getenv("CARTFOX_BASE_URL", "").strip()
    if not base_url:
        raise ConfigurationException("CARTFOX_BASE_URL environment variable is not set")

    return Settings(
        base_url=base_url.rstrip("/"),
        # No timeout unless asked for: a hung request stalls the queue.
        request_timeout=_get_float("CARTFOX_REQUEST_TIMEOUT"),
        money_format=os.getenv("CARTFOX_MONEY_FORMAT") or DEFAULT_MONEY_FORMAT,
        log_level=os.getenv("CARTFOX_LOG_LEVEL", "INFO"),
        render_on_update=_str_to_bool(os.getenv("CARTFOX_RENDER_ON_UPDATE"), default=True),
    )
