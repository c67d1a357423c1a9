"""Trigger values that turn ordinary request fields into test directives."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class TriggerKind(Enum):
    """Kinds of fault directive, valued by their literal prefix."""

    FAIL_AWAIT_REGISTRATION = "FailAwaitRegistrationFirstNTimes-"
    FAIL_HEARTBEAT = "FailHeartbeat-"
    REGISTER_USE_RESPONSE_STATUS_CODE = "RegisterUseResponseStatusCode-"
    FAIL_REGISTRATION = "FailRegistrationFirstNTimes-"
    FAIL_STATUS_CHANGE = "FailStatusChange"

    @property
    def takes_param(self) -> bool:
        return self is not TriggerKind.FAIL_STATUS_CHANGE


# Heartbeat error status override, read from the instance metadata.
FAIL_HEARTBEAT_RESPONSE_CODE_KEY = "FailHeartbeatResponseCode"

# Range a RegisterUseResponseStatusCode value must fall in to be sent as is.
MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599


@dataclass(frozen=True, slots=True)
class TriggerDirective:
    """A parsed fault directive: what to do and its numeric parameter."""

    kind: TriggerKind
    param: int | None = None

    @classmethod
    def parse(cls, value: str | None) -> "TriggerDirective | None":
        """Parse ``value`` into a directive, or None for ordinary data.

        Parametrized triggers take the digits following the prefix, up to the
        next ``-``; a prefix followed by anything else is not a directive.
        A response status code outside 100-599 is not a directive either.
        """
        if not value:
            return None
        if value == TriggerKind.FAIL_STATUS_CHANGE.value:
            return cls(TriggerKind.FAIL_STATUS_CHANGE)
        for kind in TriggerKind:
            if not kind.takes_param or not value.startswith(kind.value):
                continue
            raw = value[len(kind.value):].split("-", 1)[0]
            try:
                param = int(raw)
            except ValueError:
                logger.warning(
                    "Ignoring trigger value %r: %r is not a number", value, raw
                )
                return None
            if (
                kind is TriggerKind.REGISTER_USE_RESPONSE_STATUS_CODE
                and not MIN_STATUS_CODE <= param <= MAX_STATUS_CODE
            ):
                logger.warning(
                    "Ignoring trigger value %r: %s is not an HTTP status code",
                    value,
                    param,
                )
                return None
            return cls(kind, param)
        return None

    def matches(self, kind: TriggerKind) -> bool:
        return self.kind is kind


def parse_directive(
    value: str | None, kind: TriggerKind
) -> TriggerDirective | None:
    """Return the directive in ``value`` only when it is of ``kind``."""
    directive = TriggerDirective.parse(value)
    if directive is None or not directive.matches(kind):
        return None
    logger.debug("Got trigger value %s for check value %s", kind.value, value)
    return directive
