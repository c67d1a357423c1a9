"""Heartbeat bookkeeping owned by the registry store."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime

from .protocol import InstanceStatus, ServiceInstance, normalize_app_name

logger = logging.getLogger(__name__)


def heartbeat_app_key(app_name: str, host_name: str) -> str:
    return f"{normalize_app_name(app_name)}|{host_name}"


def is_successful(status_code: int) -> bool:
    return 200 <= status_code < 300


class HeartbeatRecord:
    """Snapshots, counters and history of heartbeats.

    Each structure has its own lock; no operation spans more than one of them.
    """

    def __init__(self, *, now_fn: Callable[[], datetime] | None = None) -> None:
        self._now = now_fn or datetime.now
        self._snapshots: dict[str, ServiceInstance] = {}
        self._snapshots_lock = threading.Lock()
        self._history: list[str] = []
        self._history_lock = threading.Lock()
        self._count = 0
        self._count_lock = threading.Lock()
        self._failure_count = 0
        self._failure_lock = threading.Lock()

    @property
    def count(self) -> int:
        with self._count_lock:
            return self._count

    @property
    def failure_count(self) -> int:
        with self._failure_lock:
            return self._failure_count

    def snapshots(self) -> dict[str, ServiceInstance]:
        with self._snapshots_lock:
            return dict(self._snapshots)

    def history(self) -> list[str]:
        with self._history_lock:
            return list(self._history)

    def record(
        self,
        app_name: str,
        host_name: str,
        status_code: int,
        status: InstanceStatus,
    ) -> None:
        key = heartbeat_app_key(app_name, host_name)
        entry = f"{key}|{status_code}|{self._now().isoformat()}"
        with self._history_lock:
            self._history.append(entry)
        with self._count_lock:
            self._count += 1

        if not is_successful(status_code):
            with self._failure_lock:
                self._failure_count += 1
                failures = self._failure_count
            logger.debug(
                "Return status %s on heartbeat for app %s, instance %s; "
                "new failure count: %s",
                status_code,
                app_name,
                host_name,
                failures,
            )
            return

        snapshot = ServiceInstance(
            instance_id=host_name,
            host_name=host_name,
            app_name=app_name,
            status=status,
        )
        with self._snapshots_lock:
            self._snapshots[key] = snapshot

    def forget(self, app_name: str, host_name: str) -> None:
        with self._snapshots_lock:
            self._snapshots.pop(heartbeat_app_key(app_name, host_name), None)

    def clear(self) -> None:
        with self._snapshots_lock:
            self._snapshots.clear()
        with self._history_lock:
            self._history.clear()
        with self._count_lock:
            self._count = 0
        with self._failure_lock:
            self._failure_count = 0
