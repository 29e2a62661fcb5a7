"""Centralized settings for the schema repair command."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from schemarepair.core.config import ConfigError, get_config_flag, get_config_value

DEFAULT_SCHEMA_PATH = Path("prisma/schema.prisma")
DEFAULT_RULES_PATH = Path(__file__).resolve().parents[1] / "repair" / "rules.yaml"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(slots=True)
class RepairSettings:
    schema_path: Path = DEFAULT_SCHEMA_PATH
    rules_path: Path = DEFAULT_RULES_PATH
    backup: bool = False
    log_level: str = "INFO"


def _log_level(raw: str | None) -> str:
    level = (raw or "INFO").strip().upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {raw!r}")
    return level


@lru_cache
def get_repair_settings() -> RepairSettings:
    schema_path = get_config_value("SCHEMA_PATH")
    rules_path = get_config_value("SCHEMA_REPAIR_RULES")
    return RepairSettings(
        schema_path=Path(schema_path) if schema_path else DEFAULT_SCHEMA_PATH,
        rules_path=Path(rules_path) if rules_path else DEFAULT_RULES_PATH,
        backup=get_config_flag("SCHEMA_REPAIR_BACKUP", default=False),
        log_level=_log_level(get_config_value("LOG_LEVEL")),
    )
