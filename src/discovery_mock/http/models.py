"""Wire models for registration requests."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel as _PydanticBaseModel
from pydantic import ConfigDict, Field, ValidationError, field_validator

from ..core.errors import InvalidRegistrationError, InvalidStatusError
from ..registry.protocol import InstanceStatus, ServiceInstance


def _unwrap_port(value: Any) -> Any:
    # Ports arrive either bare or in the codec's {"$": n, "@enabled": ...} form.
    if isinstance(value, dict):
        return value.get("$")
    return value


class InstancePayload(_PydanticBaseModel):
    """The ``instance`` object of a registration body."""

    instanceId: Optional[str] = None
    hostName: str = Field(min_length=1)
    app: Optional[str] = None
    ipAddr: Optional[str] = None
    status: str = InstanceStatus.UP.value
    port: int = 7001
    securePort: int = 7002
    homePageUrl: Optional[str] = None
    statusPageUrl: Optional[str] = None
    healthCheckUrl: Optional[str] = None
    vipAddress: Optional[str] = None
    secureVipAddress: Optional[str] = None
    metadata: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("port", "securePort", mode="before")
    @classmethod
    def _port_value(cls, value: Any) -> Any:
        return _unwrap_port(value)

    @field_validator("metadata", mode="before")
    @classmethod
    def _metadata_as_strings(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value

    def to_instance(self, app_id: str) -> ServiceInstance:
        try:
            status = InstanceStatus.parse(self.status)
        except InvalidStatusError as exc:
            raise InvalidRegistrationError(str(exc), code=500) from exc
        return ServiceInstance(
            instance_id=self.instanceId or self.hostName,
            host_name=self.hostName,
            app_name=app_id,
            vip_address=self.vipAddress,
            secure_vip_address=self.secureVipAddress,
            ip_addr=self.ipAddr,
            port=self.port,
            secure_port=self.securePort,
            home_page_url=self.homePageUrl,
            status_page_url=self.statusPageUrl,
            health_check_url=self.healthCheckUrl,
            status=status,
            metadata=dict(self.metadata),
        )


class RegistrationRequest(_PydanticBaseModel):
    """Registration body: ``{"instance": {...}}``."""

    instance: InstancePayload

    model_config = ConfigDict(extra="ignore")


def load_registration_document(body: bytes) -> dict[str, Any]:
    """Decode a registration body into a plain JSON object."""
    try:
        document = json.loads(body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidRegistrationError(
            f"registration body is not valid JSON: {exc}", code=500
        ) from exc
    if not isinstance(document, dict):
        raise InvalidRegistrationError(
            "registration body must be a JSON object", code=500
        )
    return document


def raw_vip_address(document: dict[str, Any]) -> str | None:
    """Pull ``instance.vipAddress`` out without validating anything else."""
    instance = document.get("instance")
    if not isinstance(instance, dict):
        return None
    vip = instance.get("vipAddress")
    return vip if isinstance(vip, str) else None


def parse_registration(document: dict[str, Any], app_id: str) -> ServiceInstance:
    try:
        request = RegistrationRequest.model_validate(document)
    except ValidationError as exc:
        raise InvalidRegistrationError(
            f"invalid registration body: {exc}", code=500
        ) from exc
    return request.instance.to_instance(app_id)
