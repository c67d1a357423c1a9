import pytest

from discovery_mock import TriggerDirective, TriggerKind
from discovery_mock.faults import parse_directive


@pytest.mark.parametrize(
    ("value", "kind", "param"),
    [
        (
            "FailAwaitRegistrationFirstNTimes-3",
            TriggerKind.FAIL_AWAIT_REGISTRATION,
            3,
        ),
        ("FailHeartbeat-2", TriggerKind.FAIL_HEARTBEAT, 2),
        (
            "RegisterUseResponseStatusCode-501",
            TriggerKind.REGISTER_USE_RESPONSE_STATUS_CODE,
            501,
        ),
        ("FailRegistrationFirstNTimes-4", TriggerKind.FAIL_REGISTRATION, 4),
        ("FailStatusChange", TriggerKind.FAIL_STATUS_CHANGE, None),
    ],
)
def test_parse_recognizes_each_trigger(
    value: str, kind: TriggerKind, param: int | None
) -> None:
    assert TriggerDirective.parse(value) == TriggerDirective(kind, param)


def test_parse_reads_number_up_to_next_dash() -> None:
    directive = TriggerDirective.parse("FailHeartbeat-5-host-a")
    assert directive == TriggerDirective(TriggerKind.FAIL_HEARTBEAT, 5)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "localhost",
        "test-service",
        "FailHeartbeat-",
        "FailHeartbeat-abc",
        "FailStatusChange-1",
        "xFailHeartbeat-2",
    ],
)
def test_parse_treats_other_values_as_data(value: str | None) -> None:
    assert TriggerDirective.parse(value) is None


def test_parse_directive_filters_by_kind() -> None:
    assert parse_directive("FailHeartbeat-2", TriggerKind.FAIL_HEARTBEAT) == (
        TriggerDirective(TriggerKind.FAIL_HEARTBEAT, 2)
    )
    assert parse_directive("FailHeartbeat-2", TriggerKind.FAIL_REGISTRATION) is None
    assert parse_directive("localhost", TriggerKind.FAIL_HEARTBEAT) is None


@pytest.mark.parametrize(
    "value",
    [
        "RegisterUseResponseStatusCode-0",
        "RegisterUseResponseStatusCode-99",
        "RegisterUseResponseStatusCode-600",
        "RegisterUseResponseStatusCode-99999",
    ],
)
def test_response_status_code_outside_http_range_is_data(
    value: str, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level("WARNING"):
        assert TriggerDirective.parse(value) is None
    assert "not an HTTP status code" in caplog.text


@pytest.mark.parametrize("code", [100, 599])
def test_response_status_code_range_is_inclusive(code: int) -> None:
    assert TriggerDirective.parse(
        f"RegisterUseResponseStatusCode-{code}"
    ) == TriggerDirective(TriggerKind.REGISTER_USE_RESPONSE_STATUS_CODE, code)
