"""
Centralized configuration with environment variable overrides.

Clinic branding, backend location, and session limits are configurable
here. Nothing is hardcoded in the dialogue engine or backend client.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from src.logging_context import LOG_FORMAT, conversation_log_handler

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class ClinicConfig:
    """Clinic branding used in replies."""

    name: str = os.getenv("CLINIC_NAME", "DentalCare")
    bot_title: str = os.getenv("BOT_TITLE", "DentalCare Bot")
    booking_note: str = os.getenv("BOOKING_NOTE", "Reserva desde WhatsApp Bot")


@dataclass(frozen=True)
class BackendConfig:
    """Location and timeout of the clinic backend API."""

    base_url: str = os.getenv("API_BASE_URL", "http://localhost:8000/api/bot")
    timeout_seconds: float = _safe_float("BACKEND_TIMEOUT_SECONDS", "15.0")


@dataclass(frozen=True)
class SessionConfig:
    """Limits for the in-memory session store."""

    idle_ttl_seconds: int = _safe_int("SESSION_IDLE_TTL_SECONDS", "1800")
    max_sessions: int = _safe_int("MAX_SESSIONS", "10000")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    clinic: ClinicConfig = field(default_factory=ClinicConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)
    sessions: SessionConfig = field(default_factory=SessionConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.backend.base_url.startswith(("http://", "https://")):
        raise ValueError(
            f"API_BASE_URL must be an http(s) URL, got {config.backend.base_url!r}"
        )
    if config.backend.timeout_seconds <= 0:
        raise ValueError(
            f"BACKEND_TIMEOUT_SECONDS must be > 0, got {config.backend.timeout_seconds}"
        )
    if config.sessions.idle_ttl_seconds < 0:
        raise ValueError(
            f"SESSION_IDLE_TTL_SECONDS must be >= 0, got {config.sessions.idle_ttl_seconds}"
        )
    if config.sessions.max_sessions < 1:
        raise ValueError(
            f"MAX_SESSIONS must be >= 1, got {config.sessions.max_sessions}"
        )
    if not config.clinic.bot_title.strip():
        raise ValueError("BOT_TITLE must not be empty")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[conversation_log_handler()],
    )
    logger.info("Configuration loaded for '%s'", config.clinic.name)
    return config


# Singleton instance
settings = load_config()
