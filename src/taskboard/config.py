"""Configuration management for Taskboard."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TASKBOARD_HOME = Path(os.environ.get("TASKBOARD_HOME", Path.home() / "taskboard"))
CONFIG_FILE = TASKBOARD_HOME / "config" / "taskboard.conf"
DATA_DIR = TASKBOARD_HOME / "data"

GROUP_BY_MODES = ("none", "date", "type", "status", "importance", "assignee")


@dataclass
class Config:
    """Taskboard configuration."""

    store: str = "file"
    task_file: str = ""
    api_base_url: str = "http://localhost:8787"
    api_token: str = ""
    max_minutes_per_day: int = 480
    group_by: str = "date"
    show_empty_days: bool = True

    @property
    def task_path(self) -> Path:
        if self.task_file:
            return Path(self.task_file).expanduser()
        return DATA_DIR / "tasks.json"


def _parse_bool(value: str) -> bool:
    return value.lower() in ("1", "true", "yes", "on")


def load_config(path: Path | None = None) -> Config:
    """Load configuration from taskboard.conf file."""
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
        value = value.strip()

        # Handle quoted values with inline comments: "value" # comment
        if value[:1] in ('"', "'"):
            end_quote = value.find(value[0], 1)
            value = value[1:end_quote] if end_quote != -1 else value[1:]
        elif "#" in value:
            value = value.split("#")[0].strip()

        match key:
            case "store":
                if value in ("file", "api"):
                    config.store = value
                else:
                    logger.warning(f"Unknown STORE '{value}', using '{config.store}'")
            case "task_file":
                config.task_file = value
            case "api_base_url":
                config.api_base_url = value
            case "api_token":
                config.api_token = value
            case "max_minutes_per_day":
                try:
                    config.max_minutes_per_day = int(value)
                except ValueError:
                    logger.warning(f"Invalid MAX_MINUTES_PER_DAY '{value}', using {config.max_minutes_per_day}")
            case "group_by":
                if value in GROUP_BY_MODES:
                    config.group_by = value
                else:
                    logger.warning(f"Unknown GROUP_BY '{value}', using '{config.group_by}'")
            case "show_empty_days":
                config.show_empty_days = _parse_bool(value)

    return config
