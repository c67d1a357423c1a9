"""Retry ledgers implementing "fail N times, then succeed"."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RetryCounter:
    """How many times a key should fail and how many times it has."""

    times_to_fail: int
    times_failed: int

    def exhausted(self) -> bool:
        return self.times_failed >= self.times_to_fail

    def incremented(self) -> "RetryCounter":
        return RetryCounter(self.times_to_fail, self.times_failed + 1)


class RetryLedger:
    """Thread-safe map of retry counters for one kind of operation.

    Every method is a single atomic step. Read-then-write sequences go
    through ``replace`` and ``remove``, which only act when the stored
    counter is still the one the caller observed.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: dict[str, RetryCounter] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def get(self, key: str) -> RetryCounter | None:
        with self._lock:
            return self._entries.get(key)

    def put_if_absent(self, key: str, counter: RetryCounter) -> RetryCounter | None:
        """Store ``counter`` unless ``key`` exists; return the existing one."""
        with self._lock:
            existing = self._entries.get(key)
            if existing is None:
                self._entries[key] = counter
            return existing

    def replace(
        self, key: str, expected: RetryCounter, new: RetryCounter
    ) -> bool:
        with self._lock:
            if self._entries.get(key) != expected:
                return False
            self._entries[key] = new
            return True

    def remove(self, key: str, expected: RetryCounter) -> bool:
        with self._lock:
            if self._entries.get(key) != expected:
                return False
            del self._entries[key]
            return True

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def next_status(
        self,
        key: str,
        times_to_fail: int,
        *,
        success_code: int,
        error_code: int,
    ) -> int:
        """Advance the counter for ``key`` and pick the response status.

        A missing entry is created as already failed once. An entry below its
        budget is incremented. An exhausted entry is removed and the call
        succeeds, so the next call with the same trigger starts over.
        """
        while True:
            current = self.get(key)
            if current is None:
                first = RetryCounter(times_to_fail, 1)
                if self.put_if_absent(key, first) is not None:
                    continue
                logger.debug(
                    "Set up retry in %s with key %s with %s times to fail, "
                    "returning error code %s",
                    self._name,
                    key,
                    times_to_fail,
                    error_code,
                )
                return error_code

            if not current.exhausted():
                if not self.replace(key, current, current.incremented()):
                    continue
                logger.debug(
                    "%s times failed is less than times to fail %s for "
                    "retry key %s, returning error code %s",
                    current.times_failed,
                    current.times_to_fail,
                    key,
                    error_code,
                )
                return error_code

            if not self.remove(key, current):
                continue
            logger.debug(
                "Reached times to fail %s for retry key %s, "
                "returning success code %s",
                current.times_to_fail,
                key,
                success_code,
            )
            return success_code
