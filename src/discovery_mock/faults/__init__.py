from .directives import (
    FAIL_HEARTBEAT_RESPONSE_CODE_KEY,
    TriggerDirective,
    TriggerKind,
    parse_directive,
)
from .ledger import RetryCounter, RetryLedger

__all__ = [
    "FAIL_HEARTBEAT_RESPONSE_CODE_KEY",
    "RetryCounter",
    "RetryLedger",
    "TriggerDirective",
    "TriggerKind",
    "parse_directive",
]
