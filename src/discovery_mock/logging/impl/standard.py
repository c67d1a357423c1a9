from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from ..protocol import LoggingConfiguratorProtocol
from ..settings import LoggingSettings

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RECORD_FIELDS = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
}

_CONFIGURED_MARKER = "_discovery_mock_logging_configured"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` fields merged in."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        entry.update(
            (name, value)
            for name, value in vars(record).items()
            if name not in _RECORD_FIELDS
        )
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)
        return json.dumps(entry, ensure_ascii=True, default=str)


class StandardLoggingConfigurator(LoggingConfiguratorProtocol):
    def __init__(self, settings: LoggingSettings) -> None:
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(getattr(logging.getLogger(), _CONFIGURED_MARKER, False))

    def configure(self) -> None:
        if self.is_configured:
            return
        root = logging.getLogger()
        root.setLevel(self._settings.level)
        formatter = JsonFormatter()
        for handler in self._handlers():
            handler.setLevel(self._settings.level)
            handler.setFormatter(formatter)
            root.addHandler(handler)
        setattr(root, _CONFIGURED_MARKER, True)

    def _handlers(self) -> list[logging.Handler]:
        handlers: list[logging.Handler] = []
        if self._settings.console_enabled:
            handlers.append(logging.StreamHandler())
        if self._settings.log_file:
            path = Path(self._settings.log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(
                logging.FileHandler(path, encoding="utf-8", delay=True)
            )
        return handlers
