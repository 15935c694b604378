"""Configuration management for dayplan."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .core.errors import InvalidInput
from .core.slots import SlotCalendar

logger = logging.getLogger(__name__)

DAYPLAN_HOME = Path(os.environ.get("DAYPLAN_HOME", Path.home() / "dayplan"))
CONFIG_FILE = DAYPLAN_HOME / "config" / "dayplan.conf"
DATA_DIR = DAYPLAN_HOME / "data"


@dataclass
class Config:
    """dayplan configuration."""

    db_path: str = ""
    day_start: int = 8
    day_end: int = 24
    slots: list[str] = field(default_factory=list)
    timezone: str = "Europe/Amsterdam"
    log_level: str = "WARNING"

    def database_path(self) -> Path:
        """Resolve the SQLite path, falling back to the data dir."""
        if self.db_path:
            return Path(self.db_path).expanduser()
        return DATA_DIR / "tasks.sqlite3"

    def calendar(self) -> SlotCalendar:
        """Build the slot calendar. Explicit slots win over day_start/day_end."""
        try:
            if self.slots:
                return SlotCalendar(tuple(self.slots))
            return SlotCalendar.hourly(self.day_start, self.day_end)
        except InvalidInput as e:
            logger.warning(f"Invalid slot configuration, using defaults: {e}")
            return SlotCalendar()


def _strip_value(value: str) -> str:
    """Strip quotes and inline comments from a config value."""
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_hour(key: str, value: str, default: int) -> int:
    try:
        return int(value.split(":")[0])
    except ValueError:
        logger.warning(f"Invalid {key.upper()} value {value!r}, using {default}")
        return default


def load_config(config_file: Path | None = None) -> Config:
    """Load configuration from dayplan.conf file."""
    config = Config()
    config_file = config_file or CONFIG_FILE

    if not config_file.exists():
        return config

    for line in config_file.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "db_path":
                config.db_path = value
            case "day_start":
                config.day_start = _parse_hour(key, value, config.day_start)
            case "day_end":
                config.day_end = _parse_hour(key, value, config.day_end)
            case "slots":
                config.slots = [s.strip() for s in value.split(",") if s.strip()]
            case "timezone":
                config.timezone = value
            case "log_level":
                config.log_level = value.upper()
            case _:
                logger.warning(f"Unknown config key: {key}")

    return config
