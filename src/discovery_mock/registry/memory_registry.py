"""In-memory registry store backing the discovery mock."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from typing import override

from .heartbeats import HeartbeatRecord
from .protocol import (
    Application,
    InstanceStatus,
    RegistryStoreProtocol,
    ServiceInstance,
    normalize_app_name,
)

logger = logging.getLogger(__name__)


class InMemoryRegistry(RegistryStoreProtocol):
    """Applications, instances and heartbeat statistics held in memory.

    Nothing here knows about HTTP or fault injection, and absence is always
    reported as ``None`` or an empty list rather than an exception.

    Example:
        >>> registry = InMemoryRegistry()
        >>> registry.register_application(
        ...     ServiceInstance(instance_id="i-1", host_name="h1", app_name="demo")
        ... )
        >>> registry.lookup_instance("DEMO", "i-1") is not None
        True
    """

    _applications: dict[str, Application]
    _lock: threading.Lock
    _heartbeats: HeartbeatRecord

    def __init__(self, *, now_fn: Callable[[], datetime] | None = None) -> None:
        self._applications = {}
        self._lock = threading.Lock()
        self._heartbeats = HeartbeatRecord(now_fn=now_fn)

    @override
    def lookup_instance(
        self, app_id: str, instance_id: str
    ) -> ServiceInstance | None:
        application = self.get_application(app_id)
        if application is None:
            return None
        return application.get_by_instance_id(instance_id)

    @override
    def applications_matching_vip_from_path(
        self, path: str
    ) -> list[Application]:
        matches: list[Application] = []
        for application in self.get_applications():
            result = all(
                instance.vip_address
                and path.endswith(instance.vip_address)
                for instance in application.instances
            )
            logger.debug(
                "Do all instances of application %s match VIP in path %s? %s",
                application.name,
                path,
                result,
            )
            if result:
                matches.append(application)
        return matches

    @override
    def register_application(self, instance: ServiceInstance) -> None:
        with self._lock:
            if instance.app_name in self._applications:
                logger.debug(
                    "Application %s already registered; ignoring instance %s",
                    instance.app_name,
                    instance.instance_id,
                )
                return
            self._applications[instance.app_name] = Application(
                instance.app_name, [instance]
            )
        logger.info(
            "Registered application %s (instance=%s)",
            instance.app_name,
            instance.instance_id,
        )

    @override
    def get_application(self, app_name: str) -> Application | None:
        with self._lock:
            return self._applications.get(normalize_app_name(app_name))

    def get_applications(self) -> list[Application]:
        with self._lock:
            return list(self._applications.values())

    @override
    def unregister_application(
        self, application: Application, app_name: str, host_name: str
    ) -> None:
        application.remove_instance(host_name)
        if application.is_empty():
            key = normalize_app_name(app_name)
            with self._lock:
                if self._applications.get(key) is application:
                    del self._applications[key]
        self._heartbeats.forget(app_name, host_name)
        logger.info("Unregistered %s from application %s", host_name, app_name)

    @override
    def update_heartbeat_for(
        self,
        app_name: str,
        host_name: str,
        status_code: int,
        status: InstanceStatus,
    ) -> None:
        self._heartbeats.record(app_name, host_name, status_code, status)

    @override
    def cleanup_apps(self) -> None:
        """Reset to an empty registry.

        Call this between tests when a single server is shared by a module or
        session.
        """
        with self._lock:
            self._applications.clear()
        self._heartbeats.clear()

    def heartbeat_apps(self) -> dict[str, ServiceInstance]:
        return self._heartbeats.snapshots()

    def heartbeat_history(self) -> list[str]:
        return self._heartbeats.history()

    @property
    def heartbeat_count(self) -> int:
        return self._heartbeats.count

    @property
    def heartbeat_failure_count(self) -> int:
        return self._heartbeats.failure_count
