"""Configuration loader.

Reads environment variables and `.env` to configure the service.
"""

from __future__ import annotations

import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load variables from a .env file if present (project root).
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")


class ConfigError(RuntimeError):
    """Raised when a required configuration value is missing."""


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(name, default)


def _parse_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def _parse_int(value: Optional[str], default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _parse_float(value: Optional[str], default: float) -> float:
    try:
        return float(value) if value is not None else default
    except ValueError:
        return default


# ---- Site --------------------------------------------------------------------

# Listing site. Should not include a trailing path.
BASE_URL: str = _get_env("BASE_URL", "https://yutura.net")

# Path of the banned-channel listing; page N > 1 lives at <path><N>/.
BANNED_PATH: str = _get_env("BANNED_PATH", "/banned/")

# Number of listing pages to scan per run.
PAGES: int = _parse_int(_get_env("PAGES", "1"), 1)

# ---- Discord -----------------------------------------------------------------

# Discord webhook URL. Required for sending notifications.
DISCORD_WEBHOOK_URL: Optional[str] = _get_env("DISCORD_WEBHOOK_URL")

# Log the embeds instead of posting them; nothing is recorded in state.
DRY_RUN: bool = _parse_bool(_get_env("DRY_RUN", "false"), False)

# ---- HTTP --------------------------------------------------------------------

USER_AGENT: str = _get_env("USER_AGENT", "Mozilla/5.0 (compatible; YtBanWatch/1.0)")
ACCEPT_LANGUAGE: str = _get_env("ACCEPT_LANGUAGE", "ja,en;q=0.8")

HTTP_TIMEOUT_SECONDS: float = _parse_float(_get_env("HTTP_TIMEOUT_SECONDS", "30"), 30.0)

# Attempts per request (1 = no retries).
HTTP_MAX_ATTEMPTS: int = max(1, _parse_int(_get_env("HTTP_MAX_ATTEMPTS", "1"), 1))

# ---- Throttling (seconds) ----------------------------------------------------

LISTING_DELAY_SECONDS: float = _parse_float(_get_env("LISTING_DELAY_SECONDS", "1.5"), 1.5)
DETAIL_DELAY_SECONDS: float = _parse_float(_get_env("DETAIL_DELAY_SECONDS", "1.5"), 1.5)
ERROR_DELAY_SECONDS: float = _parse_float(_get_env("ERROR_DELAY_SECONDS", "2.0"), 2.0)

# ---- Storage & logging -------------------------------------------------------

# JSON file holding the ids of channels already notified.
STATE_PATH: str = _get_env("STATE_PATH", str(PROJECT_ROOT / "state.json"))

# Logging level: DEBUG, INFO, WARNING, ERROR.
LOG_LEVEL: str = _get_env("LOG_LEVEL", "INFO")

# ---- Validation --------------------------------------------------------------

def validate() -> None:
    """Validate required configuration parameters."""
    if not DISCORD_WEBHOOK_URL:
        raise ConfigError(
            "DISCORD_WEBHOOK_URL must be set. See .env.example for details."
        )


__all__ = [
    # Site
    "BASE_URL",
    "BANNED_PATH",
    "PAGES",
    # Discord
    "DISCORD_WEBHOOK_URL",
    "DRY_RUN",
    # HTTP
    "USER_AGENT",
    "ACCEPT_LANGUAGE",
    "HTTP_TIMEOUT_SECONDS",
    "HTTP_MAX_ATTEMPTS",
    # Throttling
    "LISTING_DELAY_SECONDS",
    "DETAIL_DELAY_SECONDS",
    "ERROR_DELAY_SECONDS",
    # Storage & logging
    "STATE_PATH",
    "LOG_LEVEL",
    # Helpers
    "ConfigError",
    "validate",
]
