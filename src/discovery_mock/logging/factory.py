from __future__ import annotations

import logging

from .impl.standard import StandardLoggingConfigurator
from .protocol import LoggingConfiguratorProtocol
from .settings import LoggingSettings, load_logging_settings

_LOGGER = logging.getLogger(__name__)


def build_logging_configurator(
    settings: LoggingSettings | None = None,
) -> LoggingConfiguratorProtocol:
    """Build the JSON configurator from ``settings`` or the ``LOG_*`` env."""
    return StandardLoggingConfigurator(settings or load_logging_settings())


def configure_logging(
    settings: LoggingSettings | None = None,
) -> LoggingConfiguratorProtocol:
    """Configure root logging for a discovery mock process.

    ``run()`` and test setup may both call this; only the first call
    installs handlers.
    """
    configurator = build_logging_configurator(settings)
    if configurator.is_configured:
        _LOGGER.debug("Logging already configured, keeping existing handlers")
        return configurator
    configurator.configure()
    _LOGGER.debug(
        "Configured discovery mock logging at level %s",
        logging.getLevelName(logging.getLogger().level),
    )
    return configurator
