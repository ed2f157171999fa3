"""
Defaults and environment configuration.

Settings come from ``IMAGEFY_*`` environment variables, optionally provided
through a ``.env`` file; command-line flags take precedence over both.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_WIDTH = 1000
DEFAULT_HEIGHT = 1000
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    log_level: str = DEFAULT_LOG_LEVEL


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}.") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return value


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        width=_int_from_env("IMAGEFY_WIDTH", DEFAULT_WIDTH),
        height=_int_from_env("IMAGEFY_HEIGHT", DEFAULT_HEIGHT),
        log_level=os.getenv("IMAGEFY_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
