"""Routes registry REST calls to the store and applies fault injection."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..core.errors import InvalidRegistrationError, InvalidStatusError
from ..faults.directives import (
    FAIL_HEARTBEAT_RESPONSE_CODE_KEY,
    TriggerDirective,
    TriggerKind,
    parse_directive,
)
from ..faults.ledger import RetryLedger
from ..registry.heartbeats import heartbeat_app_key
from ..registry.memory_registry import InMemoryRegistry
from ..registry.protocol import (
    InstanceStatus,
    RegistryStoreProtocol,
    ServiceInstance,
    normalize_app_name,
)
from .codec import applications_to_dict, negotiate, render, wrap_instance
from .models import (
    load_registration_document,
    parse_registration,
    raw_vip_address,
)

logger = logging.getLogger(__name__)

APP_BASE_PATH = "/apps"
VIP_BASE_PATH = "/vips"
STATUS_SEGMENT = "status"

HTTP_OK = 200
HTTP_NO_CONTENT = 204
HTTP_NOT_FOUND = 404
HTTP_INTERNAL_SERVER_ERROR = 500


@dataclass(frozen=True, slots=True)
class DispatchRequest:
    """An inbound call, stripped of transport details.

    ``path`` is relative to the API base path, e.g. ``/apps/DEMO/i-1``.
    """

    method: str
    path: str
    accept: str | None = None
    query: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""


@dataclass(frozen=True, slots=True)
class DispatchResponse:
    status_code: int
    body: bytes | None = None
    media_type: str | None = None

    def json(self) -> Any:
        if self.body is None:
            return None
        return json.loads(self.body)


# A handler returns None when the path is not one it serves.
RequestHandler = Callable[
    [list[str], DispatchRequest, str], DispatchResponse | None
]


def split_path(path: str) -> list[str]:
    """``/apps/A/i-1/`` -> ``["apps", "A", "i-1"]``."""
    stripped = path.strip("/")
    if not stripped:
        return []
    return stripped.split("/")


def _respond(
    status_code: int, payload: object | None, media_type: str
) -> DispatchResponse:
    return DispatchResponse(
        status_code=status_code,
        body=render(payload),
        media_type=media_type,
    )


class RequestDispatcher:
    """Translate REST calls into registry operations.

    Three independent retry ledgers back the fail-N-times directives, so the
    same identity string used for different operations never shares a
    counter:

    - ``registration_wait_retries``: GET of an instance whose id is
      ``FailAwaitRegistrationFirstNTimes-N``, keyed by app and instance id.
    - ``heartbeat_retries``: heartbeats from a host named ``FailHeartbeat-N``,
      keyed by app and host name.
    - ``registration_retries``: registrations with a VIP of
      ``FailRegistrationFirstNTimes-N``, keyed by app.

    A registration with VIP ``RegisterUseResponseStatusCode-<code>`` always
    answers ``<code>``, and a status change for a host named
    ``FailStatusChange`` always answers 500.
    """

    def __init__(self, registry: RegistryStoreProtocol | None = None) -> None:
        self._registry = registry if registry is not None else InMemoryRegistry()
        self.registration_wait_retries = RetryLedger("registration-wait")
        self.heartbeat_retries = RetryLedger("heartbeat")
        self.registration_retries = RetryLedger("registration")
        self._handlers: dict[str, list[tuple[str, RequestHandler]]] = {
            "GET": [
                (APP_BASE_PATH, self._handle_apps_get),
                (VIP_BASE_PATH, self._handle_vips_get),
            ],
            "PUT": [(APP_BASE_PATH, self._handle_apps_put)],
            "POST": [(APP_BASE_PATH, self._handle_apps_post)],
            "DELETE": [(APP_BASE_PATH, self._handle_apps_delete)],
        }

    @property
    def registry(self) -> RegistryStoreProtocol:
        return self._registry

    def reset(self) -> None:
        """Forget every pending fault-injection counter."""
        self.registration_wait_retries.clear()
        self.heartbeat_retries.clear()
        self.registration_retries.clear()

    def dispatch(self, request: DispatchRequest) -> DispatchResponse:
        """Handle one request.

        Raises:
            UnsupportedMediaTypeError: If the caller does not accept JSON.
        """
        logger.debug(
            "Discovery mock received request on path: %s. Accept: |%s|. "
            "HTTP method: |%s|. Params: |%s|",
            request.path,
            request.accept,
            request.method,
            dict(request.query),
        )
        media_type = negotiate(request.accept)
        parts = split_path(request.path)
        for prefix, handler in self._handlers.get(request.method.upper(), []):
            if not parts or f"/{parts[0]}" != prefix:
                continue
            response = handler(parts, request, media_type)
            if response is not None:
                logger.debug(
                    "Discovery mock sent response with status [%s] for "
                    "request path [%s]",
                    response.status_code,
                    request.path,
                )
                return response

        return _respond(
            HTTP_NOT_FOUND,
            {
                "message": (
                    f"Request path: {request.path} "
                    "not supported by discovery mock."
                )
            },
            media_type,
        )

    def _not_found(
        self, app_id: str, instance_id: str, media_type: str
    ) -> DispatchResponse:
        logger.debug(
            "No instance for %s / %s; sending 404 response with no content",
            app_id,
            instance_id,
        )
        return _respond(HTTP_NOT_FOUND, None, media_type)

    def _handle_apps_get(
        self, parts: list[str], request: DispatchRequest, media_type: str
    ) -> DispatchResponse | None:
        if len(parts) != 3:
            return None
        _, app_id, instance_id = parts
        instance = self._registry.lookup_instance(app_id, instance_id)
        if instance is None:
            return self._not_found(app_id, instance_id, media_type)

        status_code = HTTP_OK
        directive = parse_directive(
            instance_id, TriggerKind.FAIL_AWAIT_REGISTRATION
        )
        if directive is not None:
            status_code = self.registration_wait_retries.next_status(
                f"{normalize_app_name(app_id)}|{instance_id}",
                directive.param or 0,
                success_code=HTTP_OK,
                error_code=HTTP_INTERNAL_SERVER_ERROR,
            )
        return _respond(status_code, wrap_instance(instance), media_type)

    def _handle_vips_get(
        self, parts: list[str], request: DispatchRequest, media_type: str
    ) -> DispatchResponse | None:
        if len(parts) < 2:
            return None
        applications = self._registry.applications_matching_vip_from_path(
            request.path
        )
        return _respond(HTTP_OK, applications_to_dict(applications), media_type)

    def _handle_apps_put(
        self, parts: list[str], request: DispatchRequest, media_type: str
    ) -> DispatchResponse | None:
        is_heartbeat = len(parts) == 3
        is_status_change = len(parts) == 4 and parts[3] == STATUS_SEGMENT
        if not (is_heartbeat or is_status_change):
            return None

        app_id, instance_id = parts[1], parts[2]
        instance = self._registry.lookup_instance(app_id, instance_id)
        if instance is None:
            return self._not_found(app_id, instance_id, media_type)

        if is_status_change:
            return self._handle_status_change(
                instance, request.query.get("value"), media_type
            )
        status_code = self._handle_heartbeat(instance)
        return _respond(status_code, None, media_type)

    def _heartbeat_error_code(self, instance: ServiceInstance) -> int:
        raw = instance.metadata.get(FAIL_HEARTBEAT_RESPONSE_CODE_KEY)
        if raw is None:
            return HTTP_NOT_FOUND
        try:
            return int(raw)
        except ValueError:
            logger.warning(
                "Ignoring %s=%r for instance %s; using %s",
                FAIL_HEARTBEAT_RESPONSE_CODE_KEY,
                raw,
                instance.instance_id,
                HTTP_NOT_FOUND,
            )
            return HTTP_NOT_FOUND

    def _handle_heartbeat(self, instance: ServiceInstance) -> int:
        app_name = instance.app_name
        host_name = instance.host_name

        status_code = HTTP_OK
        directive = parse_directive(host_name, TriggerKind.FAIL_HEARTBEAT)
        if directive is not None:
            status_code = self.heartbeat_retries.next_status(
                heartbeat_app_key(app_name, host_name),
                directive.param or 0,
                success_code=HTTP_OK,
                error_code=self._heartbeat_error_code(instance),
            )

        self._registry.update_heartbeat_for(
            app_name, host_name, status_code, instance.status
        )
        logger.debug(
            "Returning %s on heartbeat request for app %s, instance %s",
            status_code,
            app_name,
            host_name,
        )
        return status_code

    def _handle_status_change(
        self,
        instance: ServiceInstance,
        new_status: str | None,
        media_type: str,
    ) -> DispatchResponse:
        if parse_directive(instance.host_name, TriggerKind.FAIL_STATUS_CHANGE):
            logger.debug(
                "Failing status change for %s / %s on request",
                instance.app_name,
                instance.instance_id,
            )
            return _respond(HTTP_INTERNAL_SERVER_ERROR, None, media_type)

        try:
            status = InstanceStatus.parse(new_status)
        except InvalidStatusError as exc:
            logger.warning(
                "Rejecting status change for %s / %s: %s",
                instance.app_name,
                instance.instance_id,
                exc,
            )
            return _respond(
                HTTP_INTERNAL_SERVER_ERROR, {"message": str(exc)}, media_type
            )

        instance.status = status
        logger.info(
            "Changed status of %s / %s to %s",
            instance.app_name,
            instance.instance_id,
            status.value,
        )
        return _respond(HTTP_OK, None, media_type)

    def _handle_apps_post(
        self, parts: list[str], request: DispatchRequest, media_type: str
    ) -> DispatchResponse | None:
        if len(parts) != 2:
            return None
        app_id = parts[1]

        try:
            document = load_registration_document(request.body)
            directive = TriggerDirective.parse(raw_vip_address(document))
            if (
                directive is not None
                and directive.kind is TriggerKind.REGISTER_USE_RESPONSE_STATUS_CODE
                and directive.param is not None
            ):
                logger.debug(
                    "Answering registration of %s with status %s on request",
                    app_id,
                    directive.param,
                )
                return _respond(directive.param, None, media_type)

            instance = parse_registration(document, app_id)
        except InvalidRegistrationError as exc:
            logger.exception("Failed to register application: %s", app_id)
            return _respond(
                exc.code or HTTP_INTERNAL_SERVER_ERROR,
                {"message": str(exc)},
                media_type,
            )

        if directive is not None and directive.kind is TriggerKind.FAIL_REGISTRATION:
            status_code = self.registration_retries.next_status(
                instance.app_name,
                directive.param or 0,
                success_code=HTTP_NO_CONTENT,
                error_code=HTTP_INTERNAL_SERVER_ERROR,
            )
            if status_code != HTTP_NO_CONTENT:
                return _respond(status_code, None, media_type)

        self._registry.register_application(instance)
        return _respond(HTTP_NO_CONTENT, None, media_type)

    def _handle_apps_delete(
        self, parts: list[str], request: DispatchRequest, media_type: str
    ) -> DispatchResponse | None:
        if len(parts) != 3:
            return None
        _, app_id, instance_id = parts
        application = self._registry.get_application(app_id)
        instance = self._registry.lookup_instance(app_id, instance_id)
        if application is None or instance is None:
            return self._not_found(app_id, instance_id, media_type)

        self._registry.unregister_application(
            application, instance.app_name, instance.host_name
        )
        return _respond(HTTP_OK, None, media_type)
