"""Registry data model and store protocol definitions."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol, runtime_checkable

from ..core.errors import InvalidStatusError


class InstanceStatus(Enum):
    """Instance status as reported to discovery clients."""

    UP = "UP"
    DOWN = "DOWN"
    STARTING = "STARTING"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | None) -> "InstanceStatus":
        """Parse a status name, raising InvalidStatusError when unknown.

        Matching ignores case and surrounding whitespace, so ``up`` and
        `` UP `` are both accepted as ``UP``.
        """
        if value is None:
            raise InvalidStatusError("status value is required")
        try:
            return cls(value.strip().upper())
        except ValueError as exc:
            raise InvalidStatusError(
                f"unknown instance status: {value!r}"
            ) from exc


def normalize_app_name(name: str) -> str:
    return name.upper()


@dataclass(slots=True)
class ServiceInstance:
    """One running instance of an application.

    Identity fields are set once; only ``status`` changes after creation.
    """

    instance_id: str
    host_name: str
    app_name: str
    vip_address: str | None = None
    secure_vip_address: str | None = None
    ip_addr: str | None = None
    port: int = 7001
    secure_port: int = 7002
    home_page_url: str | None = None
    status_page_url: str | None = None
    health_check_url: str | None = None
    status: InstanceStatus = InstanceStatus.UP
    metadata: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.app_name = normalize_app_name(self.app_name)
        if not self.instance_id:
            self.instance_id = self.host_name


class Application:
    """A named, ordered group of instances sharing an application name."""

    def __init__(
        self,
        name: str,
        instances: Sequence[ServiceInstance] = (),
    ) -> None:
        self._name = normalize_app_name(name)
        self._instances: list[ServiceInstance] = list(instances)
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    @property
    def instances(self) -> list[ServiceInstance]:
        """Snapshot of the current instances, in insertion order."""
        with self._lock:
            return list(self._instances)

    def add_instance(self, instance: ServiceInstance) -> None:
        with self._lock:
            self._instances = [
                i for i in self._instances
                if i.instance_id != instance.instance_id
            ]
            self._instances.append(instance)

    def remove_instance(self, host_name: str) -> bool:
        """Remove every instance with the given host name."""
        with self._lock:
            remaining = [
                i for i in self._instances if i.host_name != host_name
            ]
            removed = len(remaining) != len(self._instances)
            self._instances = remaining
            return removed

    def get_by_instance_id(self, instance_id: str) -> ServiceInstance | None:
        with self._lock:
            for instance in self._instances:
                if instance.instance_id == instance_id:
                    return instance
        return None

    def is_empty(self) -> bool:
        with self._lock:
            return not self._instances

    def __repr__(self) -> str:
        return f"Application(name={self._name!r}, instances={len(self.instances)})"


@runtime_checkable
class RegistryStoreProtocol(Protocol):
    """Protocol for the registry store consumed by the request dispatcher."""

    def lookup_instance(
        self, app_id: str, instance_id: str
    ) -> ServiceInstance | None:
        """Return the instance if the application holds that id, else None."""
        ...

    def applications_matching_vip_from_path(
        self, path: str
    ) -> list[Application]:
        """Return applications whose instances all have a VIP ending ``path``."""
        ...

    def register_application(self, instance: ServiceInstance) -> None:
        """Create the instance's application unless it already exists."""
        ...

    def get_application(self, app_name: str) -> Application | None:
        """Return the application by name, or None."""
        ...

    def unregister_application(
        self, application: Application, app_name: str, host_name: str
    ) -> None:
        """Remove the host's instance and drop the application if empty."""
        ...

    def update_heartbeat_for(
        self,
        app_name: str,
        host_name: str,
        status_code: int,
        status: InstanceStatus,
    ) -> None:
        """Record a heartbeat outcome."""
        ...

    def cleanup_apps(self) -> None:
        """Clear all applications and heartbeat bookkeeping."""
        ...
