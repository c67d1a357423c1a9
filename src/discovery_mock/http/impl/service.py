from __future__ import annotations

import logging
import socket
import threading
import time
from types import TracebackType

import uvicorn

from ...config import MockServerConfig, load_config
from ...core.errors import ServerLifecycleError
from ...registry.memory_registry import InMemoryRegistry
from ..dispatcher import RequestDispatcher
from .server import create_app

_LOGGER = logging.getLogger(__name__)


class MockDiscoveryServer:
    """
    Run the discovery mock on a background thread.

    - Binds an ephemeral port unless the config names one.
    - Exposes the registry and dispatcher so tests can inspect and reset
      them between cases.
    """

    def __init__(
        self,
        config: MockServerConfig | None = None,
        *,
        registry: InMemoryRegistry | None = None,
    ) -> None:
        self._config = config or load_config()
        self._registry = registry if registry is not None else InMemoryRegistry()
        self._dispatcher = RequestDispatcher(self._registry)
        self._app = create_app(self._dispatcher, config=self._config)
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._socket: socket.socket | None = None
        self._port = 0

    @property
    def config(self) -> MockServerConfig:
        return self._config

    @property
    def registry(self) -> InMemoryRegistry:
        return self._registry

    @property
    def dispatcher(self) -> RequestDispatcher:
        return self._dispatcher

    @property
    def port(self) -> int:
        """Port the server listens on; 0 before ``start``."""
        return self._port

    @property
    def base_url(self) -> str:
        return f"http://{self._config.host}:{self._port}{self._config.base_path}"

    @property
    def is_started(self) -> bool:
        return (
            self._server is not None
            and self._server.started
            and self._thread is not None
            and self._thread.is_alive()
        )

    @property
    def is_stopped(self) -> bool:
        return self._thread is None or not self._thread.is_alive()

    def start(self) -> None:
        if self.is_started:
            _LOGGER.warning("Discovery mock already running on port %s", self._port)
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self._config.host, self._config.port))
        except OSError as exc:
            sock.close()
            raise ServerLifecycleError(
                f"Discovery mock could not bind {self._config.host}:"
                f"{self._config.port}"
            ) from exc
        self._socket = sock
        self._port = sock.getsockname()[1]

        uv_config = uvicorn.Config(
            self._app,
            log_level=self._config.log_level,
            lifespan="off",
        )
        self._server = uvicorn.Server(uv_config)
        self._thread = threading.Thread(
            target=self._server.run,
            kwargs={"sockets": [sock]},
            name=f"discovery-mock-{self._port}",
            daemon=True,
        )
        self._thread.start()

        deadline = time.monotonic() + self._config.startup_timeout_s
        while time.monotonic() < deadline:
            if self._server.started:
                _LOGGER.info("Started discovery mock at %s", self.base_url)
                return
            if not self._thread.is_alive():
                break
            time.sleep(0.02)

        self._shutdown()
        raise ServerLifecycleError("Discovery mock has not been started")

    def stop(self) -> None:
        if self._server is None or self.is_stopped:
            _LOGGER.warning(
                "Discovery mock has already been stopped, skipping request to stop."
            )
            return

        _LOGGER.info("Stopping discovery mock (running at %s)", self.base_url)
        self._shutdown()

    def _shutdown(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(timeout=self._config.startup_timeout_s)
        if self._socket is not None:
            self._socket.close()
            self._socket = None

    def reset(self) -> None:
        """Empty the registry and forget pending fault-injection counters."""
        self._registry.cleanup_apps()
        self._dispatcher.reset()

    def __enter__(self) -> "MockDiscoveryServer":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.stop()
