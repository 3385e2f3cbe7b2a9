"""
CONFIG.PY — SINGLE SOURCE OF TRUTH

This module is the ONLY place allowed to read environment variables.

Credentials are required and have no defaults: if TESCO_USERNAME or
TESCO_PASSWORD is missing or blank the run fails before a browser is launched.
Every other key falls back to a documented default.

Config is loaded ONCE, on first access of ``config``, and cached in a single
frozen Config object. To use a config value, import:

    from grocery_slots.config import config

Do not access os.getenv directly from any other module.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv


PKG_ROOT = Path(__file__).resolve().parent
PROJECT_ROOT = PKG_ROOT.parent
STATE_DIR = Path.home() / ".grocery_slots"

# Load variables from .env if it exists; OS env overrides these automatically
load_dotenv(PROJECT_ROOT / ".env")

if os.getenv("DEBUG_CONFIG") == "1":
    print("[CONFIG] Loaded .env from:", PROJECT_ROOT / ".env")


logger = logging.getLogger(__name__)

REQUIRED_KEYS = [
    "TESCO_USERNAME",
    "TESCO_PASSWORD",
]

DEFAULTS: dict[str, str] = {
    "COOKIE_STORE_PATH": str(STATE_DIR / "tesco_cookies.json"),
    "LOCATION_ALLOWLIST": "crawley,gatwick,horsham",
    "BROWSER_HEADLESS": "true",
    "CHROME_EXECUTABLE": "",
    "NAV_TIMEOUT_MS": "60000",
    "JSON_LOG_FILE": "",
}

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


def _require(values: Mapping[str, str | None], key: str) -> str:
    value = values.get(key)
    if value is None:
        message = f"Missing required environment variable: {key}"
        logger.error(message)
        raise ConfigError(message)
    stripped = value.strip()
    if not stripped:
        message = f"Environment variable {key} cannot be blank"
        logger.error(message)
        raise ConfigError(message)
    return stripped


def _optional(values: Mapping[str, str | None], key: str) -> str:
    value = values.get(key)
    if value is None or not value.strip():
        return DEFAULTS[key]
    return value.strip()


def _parse_bool(value: str, *, key: str) -> bool:
    normalized = value.strip().lower()
    if normalized in TRUE_VALUES:
        return True
    if normalized in FALSE_VALUES:
        return False
    message = f"Config key {key} must be a boolean string; got {value!r}"
    logger.error(message)
    raise ConfigError(message)


def _parse_int(value: str, *, key: str) -> int:
    try:
        parsed = int(value.strip())
    except (TypeError, ValueError):
        message = f"Config key {key} must be an integer; got {value!r}"
        logger.error(message)
        raise ConfigError(message)
    if parsed <= 0:
        message = f"Config key {key} must be positive; got {value!r}"
        logger.error(message)
        raise ConfigError(message)
    return parsed


def _parse_list(value: str) -> list[str]:
    if not value:
        return []
    tokens = re.split(r"[,\n]", value)
    return [token.strip() for token in tokens if token and token.strip()]


@dataclass(slots=True, frozen=True)
class Config:
    tesco_username: str
    tesco_password: str
    cookie_store_path: str
    location_allowlist: list[str]
    browser_headless: bool
    chrome_executable: str
    nav_timeout_ms: int
    json_log_file: str

    @classmethod
    def load_from_env(cls, environ: Mapping[str, str | None] | None = None) -> Config:
        values = os.environ if environ is None else environ

        allowlist = _parse_list(_optional(values, "LOCATION_ALLOWLIST"))
        if not allowlist:
            message = "Config key LOCATION_ALLOWLIST must name at least one place"
            logger.error(message)
            raise ConfigError(message)

        return cls(
            tesco_username=_require(values, "TESCO_USERNAME"),
            tesco_password=_require(values, "TESCO_PASSWORD"),
            cookie_store_path=_optional(values, "COOKIE_STORE_PATH"),
            location_allowlist=[token.lower() for token in allowlist],
            browser_headless=_parse_bool(
                _optional(values, "BROWSER_HEADLESS"), key="BROWSER_HEADLESS"
            ),
            chrome_executable=_optional(values, "CHROME_EXECUTABLE"),
            nav_timeout_ms=_parse_int(_optional(values, "NAV_TIMEOUT_MS"), key="NAV_TIMEOUT_MS"),
            json_log_file=_optional(values, "JSON_LOG_FILE"),
        )


_config: Config | None = None


def get_config() -> Config:
    global _config
    if _config is None:
        _config = Config.load_from_env()
    return _config


def __getattr__(name: str) -> Any:
    if name == "config":
        return get_config()
    raise AttributeError(name)
