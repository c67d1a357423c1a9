from __future__ import annotations

import logging
import os
from dataclasses import dataclass

_TRUE_VALUES = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "n", "off"})


@dataclass(frozen=True, slots=True)
class LoggingSettings:
    """Root logging setup for a discovery mock process.

    - ``LOG_LEVEL``: any stdlib level name (default ``INFO``)
    - ``LOG_CONSOLE_ENABLED``: JSON lines on stderr (default on)
    - ``LOG_FILE``: also append JSON lines to this file (default off)
    """

    level: int
    console_enabled: bool
    log_file: str | None

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        return cls(
            level=_parse_level(_env("LOG_LEVEL") or "INFO"),
            console_enabled=_parse_bool(
                "LOG_CONSOLE_ENABLED", _env("LOG_CONSOLE_ENABLED"), True
            ),
            log_file=_env("LOG_FILE"),
        )


def load_logging_settings() -> LoggingSettings:
    return LoggingSettings.from_env()


def _env(name: str) -> str | None:
    """Stripped value of ``name``, or None when unset or blank."""
    value = os.getenv(name, "").strip()
    return value or None


def _parse_level(level_name: str) -> int:
    level = logging.getLevelNamesMapping().get(level_name.upper())
    if level is None:
        raise ValueError(f"Invalid LOG_LEVEL: {level_name!r}")
    return level


def _parse_bool(name: str, value: str | None, default: bool) -> bool:
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid bool env var {name}={value!r}")
