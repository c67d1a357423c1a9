"""Public API entry point for discovery_mock.

Use this module for supported imports. Subpackages are internal.
"""

from .config import MockServerConfig, load_config
from .core import (
    DiscoveryMockError,
    InvalidRegistrationError,
    InvalidStatusError,
    ServerLifecycleError,
    UnsupportedMediaTypeError,
)
from .faults import (
    FAIL_HEARTBEAT_RESPONSE_CODE_KEY,
    RetryCounter,
    RetryLedger,
    TriggerDirective,
    TriggerKind,
)
from .http import (
    DispatchRequest,
    DispatchResponse,
    MockDiscoveryServer,
    RequestDispatcher,
    create_app,
    run,
)
from .logging import LoggingSettings, configure_logging
from .registry import (
    Application,
    HeartbeatRecord,
    InMemoryRegistry,
    InstanceStatus,
    RegistryStoreProtocol,
    ServiceInstance,
)

__all__ = [
    # Config
    "MockServerConfig",
    "load_config",
    # Errors
    "DiscoveryMockError",
    "InvalidRegistrationError",
    "InvalidStatusError",
    "ServerLifecycleError",
    "UnsupportedMediaTypeError",
    # Registry
    "Application",
    "HeartbeatRecord",
    "InMemoryRegistry",
    "InstanceStatus",
    "RegistryStoreProtocol",
    "ServiceInstance",
    # Fault injection
    "FAIL_HEARTBEAT_RESPONSE_CODE_KEY",
    "RetryCounter",
    "RetryLedger",
    "TriggerDirective",
    "TriggerKind",
    # HTTP
    "DispatchRequest",
    "DispatchResponse",
    "MockDiscoveryServer",
    "RequestDispatcher",
    "create_app",
    "run",
    # Logging
    "LoggingSettings",
    "configure_logging",
]
