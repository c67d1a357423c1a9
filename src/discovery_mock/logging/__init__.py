"""Internal logging package. Not part of the public API."""

from .factory import build_logging_configurator, configure_logging
from .protocol import LoggingConfiguratorProtocol
from .settings import LoggingSettings, load_logging_settings

__all__ = [
    "LoggingConfiguratorProtocol",
    "LoggingSettings",
    "build_logging_configurator",
    "configure_logging",
    "load_logging_settings",
]
