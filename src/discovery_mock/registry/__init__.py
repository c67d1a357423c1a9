from .heartbeats import HeartbeatRecord, heartbeat_app_key
from .memory_registry import InMemoryRegistry
from .protocol import (
    Application,
    InstanceStatus,
    RegistryStoreProtocol,
    ServiceInstance,
    normalize_app_name,
)

__all__ = [
    "Application",
    "HeartbeatRecord",
    "InMemoryRegistry",
    "InstanceStatus",
    "RegistryStoreProtocol",
    "ServiceInstance",
    "heartbeat_app_key",
    "normalize_app_name",
]
