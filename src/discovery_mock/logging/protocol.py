from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class LoggingConfiguratorProtocol(Protocol):
    """Installs the mock's JSON log handlers on the root logger."""

    @property
    def is_configured(self) -> bool:
        """Whether handlers from an earlier call are already installed."""
        ...

    def configure(self) -> None:
        """Install handlers; a no-op once ``is_configured`` is true."""
        ...
