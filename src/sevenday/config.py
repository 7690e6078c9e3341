"""Configuration management for sevenday."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

SEVENDAY_HOME = Path(os.environ.get("SEVENDAY_HOME", Path.home() / "sevenday"))
CONFIG_FILE = SEVENDAY_HOME / "config" / "sevenday.conf"
DATA_DIR = SEVENDAY_HOME / "data"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass
class Config:
    """sevenday configuration."""

    tasks_file: str = str(DATA_DIR / "tasks.json")
    timezone: str = ""
    log_level: str = "INFO"
    daily_refresh_time: str = "00:05"

    def refresh_hour_minute(self) -> tuple[int, int]:
        hour, minute = map(int, self.daily_refresh_time.split(":"))
        return hour, minute


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    if value[:1] in ('"', "'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _valid_time(value: str) -> bool:
    try:
        hour, minute = map(int, value.split(":"))
    except ValueError:
        return False
    return 0 <= hour < 24 and 0 <= minute < 60


def load_config(path: Path | None = None) -> Config:
    """Load configuration from sevenday.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "tasks_file":
                config.tasks_file = str(Path(value).expanduser())
            case "timezone":
                config.timezone = value
            case "log_level":
                if value.upper() in _LOG_LEVELS:
                    config.log_level = value.upper()
                else:
                    logger.warning(f"Invalid LOG_LEVEL: {value}")
            case "daily_refresh_time":
                if _valid_time(value):
                    config.daily_refresh_time = value
                else:
                    logger.warning(f"Invalid DAILY_REFRESH_TIME format: {value}")
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config
