import os
from unittest.mock import patch

import pytest

from discovery_mock import MockServerConfig, load_config


def test_defaults_without_environment():
    with patch.dict(os.environ, {}, clear=True):
        cfg = load_config()

    assert cfg.host == "127.0.0.1"
    assert cfg.port == 0
    assert cfg.base_path == "/eureka/v2/"
    assert cfg.log_level == "warning"
    assert cfg.startup_timeout_s == 5.0


def test_values_from_environment():
    env = {
        "DISCOVERY_MOCK_HOST": "0.0.0.0",
        "DISCOVERY_MOCK_PORT": "8761",
        "DISCOVERY_MOCK_BASE_PATH": "registry",
        "DISCOVERY_MOCK_SERVER_LOG_LEVEL": "debug",
        "DISCOVERY_MOCK_STARTUP_TIMEOUT_S": "2.5",
    }
    with patch.dict(os.environ, env, clear=True):
        cfg = load_config()

    assert cfg.host == "0.0.0.0"
    assert cfg.port == 8761
    assert cfg.base_path == "/registry/"
    assert cfg.log_level == "debug"
    assert cfg.startup_timeout_s == 2.5


def test_invalid_numbers_fall_back_to_defaults():
    env = {
        "DISCOVERY_MOCK_PORT": "not-a-port",
        "DISCOVERY_MOCK_STARTUP_TIMEOUT_S": "soon",
    }
    with patch.dict(os.environ, env, clear=True):
        cfg = load_config()

    assert cfg.port == 0
    assert cfg.startup_timeout_s == 5.0


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", "/"),
        ("/", "/"),
        ("eureka", "/eureka/"),
        ("/eureka/v2", "/eureka/v2/"),
        ("  /eureka/v2/  ", "/eureka/v2/"),
    ],
)
def test_base_path_is_normalized(raw, expected):
    assert MockServerConfig(base_path=raw).base_path == expected


def test_config_is_frozen():
    cfg = MockServerConfig(port=1234)
    with pytest.raises(AttributeError):
        cfg.port = 1
