"""Content negotiation and JSON rendering in the discovery client's shape."""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Iterable

from ..core.errors import UnsupportedMediaTypeError
from ..registry.protocol import Application, ServiceInstance

JSON_MEDIA_TYPE = "application/json"

_DATA_CENTER_INFO = {
    "@class": "com.netflix.appinfo.InstanceInfo$DefaultDataCenterInfo",
    "name": "MyOwn",
}


def negotiate(accept: str | None) -> str:
    """Return the media type to answer with, or fail for non-JSON requests."""
    if accept is not None and accept.strip().startswith(JSON_MEDIA_TYPE):
        return JSON_MEDIA_TYPE
    raise UnsupportedMediaTypeError(
        f"{accept} is not allowed (use {JSON_MEDIA_TYPE})", code=406
    )


def _port(value: int, *, enabled: bool) -> dict[str, object]:
    return {"$": value, "@enabled": "true" if enabled else "false"}


def instance_to_dict(instance: ServiceInstance) -> dict[str, object]:
    data: dict[str, object] = {
        "instanceId": instance.instance_id,
        "hostName": instance.host_name,
        "app": instance.app_name,
        "status": instance.status.value,
        "overriddenStatus": "UNKNOWN",
        "port": _port(instance.port, enabled=True),
        "securePort": _port(instance.secure_port, enabled=False),
        "countryId": 1,
        "dataCenterInfo": dict(_DATA_CENTER_INFO),
        "metadata": dict(instance.metadata),
        "isCoordinatingDiscoveryServer": "false",
        "actionType": "ADDED",
    }
    optional = {
        "ipAddr": instance.ip_addr,
        "homePageUrl": instance.home_page_url,
        "statusPageUrl": instance.status_page_url,
        "healthCheckUrl": instance.health_check_url,
        "vipAddress": instance.vip_address,
        "secureVipAddress": instance.secure_vip_address,
    }
    data.update({k: v for k, v in optional.items() if v is not None})
    return data


def application_to_dict(application: Application) -> dict[str, object]:
    return {
        "name": application.name,
        "instance": [instance_to_dict(i) for i in application.instances],
    }


def reconcile_hash_code(applications: Iterable[Application]) -> str:
    """Status histogram in the ``UP_2_DOWN_1_`` form clients reconcile on."""
    counts: Counter[str] = Counter()
    for application in applications:
        for instance in application.instances:
            counts[instance.status.value] += 1
    return "".join(f"{status}_{counts[status]}_" for status in sorted(counts))


def applications_to_dict(
    applications: Iterable[Application],
) -> dict[str, object]:
    apps = list(applications)
    return {
        "applications": {
            "versions__delta": "1",
            "apps__hashcode": reconcile_hash_code(apps),
            "application": [application_to_dict(a) for a in apps],
        }
    }


def wrap_instance(instance: ServiceInstance) -> dict[str, object]:
    return {"instance": instance_to_dict(instance)}


def render(payload: object | None) -> bytes | None:
    """Serialize a payload; ``None`` means the response has no body."""
    if payload is None:
        return None
    return json.dumps(payload).encode("utf-8")
