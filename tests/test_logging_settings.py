import json
import logging
import os
from unittest.mock import patch

import pytest

from discovery_mock import LoggingSettings, configure_logging
from discovery_mock.logging import LoggingConfiguratorProtocol
from discovery_mock.logging.impl.standard import JsonFormatter


def test_settings_defaults():
    with patch.dict(os.environ, {}, clear=True):
        settings = LoggingSettings.from_env()

    assert settings.level == logging.INFO
    assert settings.console_enabled is True
    assert settings.log_file is None


def test_settings_from_environment(tmp_path):
    log_file = str(tmp_path / "mock.log")
    env = {
        "LOG_LEVEL": "debug",
        "LOG_CONSOLE_ENABLED": "off",
        "LOG_FILE": log_file,
    }
    with patch.dict(os.environ, env, clear=True):
        settings = LoggingSettings.from_env()

    assert settings.level == logging.DEBUG
    assert settings.console_enabled is False
    assert settings.log_file == log_file


@pytest.mark.parametrize(
    "env",
    [{"LOG_LEVEL": "LOUD"}, {"LOG_CONSOLE_ENABLED": "maybe"}],
)
def test_invalid_settings_raise(env):
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(ValueError):
            LoggingSettings.from_env()


def test_json_formatter_includes_extras():
    record = logging.LogRecord(
        name="discovery_mock.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="heartbeat for %s",
        args=("worker-1",),
        exc_info=None,
    )
    record.app_name = "WORKER"

    payload = json.loads(JsonFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "discovery_mock.test"
    assert payload["message"] == "heartbeat for worker-1"
    assert payload["app_name"] == "WORKER"


def test_configure_logging_writes_json_to_file(tmp_path):
    log_file = tmp_path / "logs" / "mock.log"
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        if hasattr(root, "_discovery_mock_logging_configured"):
            delattr(root, "_discovery_mock_logging_configured")
        configurator = configure_logging(
            LoggingSettings(
                level=logging.INFO,
                console_enabled=False,
                log_file=str(log_file),
            )
        )
        assert isinstance(configurator, LoggingConfiguratorProtocol)
        assert configurator.is_configured
        # A second call must not add handlers again.
        handler_count = len(root.handlers)
        configure_logging()
        assert len(root.handlers) == handler_count

        logging.getLogger("discovery_mock.test").info("registered %s", "demo")
        for handler in root.handlers:
            handler.flush()

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "registered demo"
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers = saved_handlers
        root.setLevel(saved_level)
        if hasattr(root, "_discovery_mock_logging_configured"):
            delattr(root, "_discovery_mock_logging_configured")
