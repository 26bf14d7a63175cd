import logging
import os
from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class Settings:
    log_level: int
    timezone: Optional[ZoneInfo]


def load_settings() -> Settings:
    """Read function configuration from environment variables."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"Invalid LOG_LEVEL: {level_name}")

    tz_name = os.getenv("TIMEZONE")
    return Settings(
        log_level=level,
        timezone=ZoneInfo(tz_name) if tz_name else None,
    )
