"""Discovery mock server configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


def _get_env(key: str, default: str) -> str:
    """Get environment variable with default value."""
    return os.getenv(key, default)


def _get_env_int(key: str, default: int) -> int:
    """Get integer environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_float(key: str, default: float) -> float:
    """Get float environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _normalize_base_path(path: str) -> str:
    stripped = path.strip().strip("/")
    if not stripped:
        return "/"
    return f"/{stripped}/"


@dataclass(frozen=True, slots=True)
class MockServerConfig:
    """Configuration for the embedded discovery mock server."""

    # Interface the server binds to
    host: str = field(
        default_factory=lambda: _get_env("DISCOVERY_MOCK_HOST", "127.0.0.1")
    )

    # Port to bind; 0 lets the OS pick a free one
    port: int = field(
        default_factory=lambda: _get_env_int("DISCOVERY_MOCK_PORT", 0)
    )

    # Path prefix the registry API is served under
    base_path: str = field(
        default_factory=lambda: _get_env(
            "DISCOVERY_MOCK_BASE_PATH", "/eureka/v2/"
        )
    )

    # uvicorn log level
    log_level: str = field(
        default_factory=lambda: _get_env(
            "DISCOVERY_MOCK_SERVER_LOG_LEVEL", "warning"
        )
    )

    # Seconds to wait for the server to accept connections
    startup_timeout_s: float = field(
        default_factory=lambda: _get_env_float(
            "DISCOVERY_MOCK_STARTUP_TIMEOUT_S", 5.0
        )
    )

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "base_path", _normalize_base_path(self.base_path)
        )


def load_config() -> MockServerConfig:
    """Load server configuration from environment."""
    return MockServerConfig()
