from __future__ import annotations

import logging
from typing import Optional

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from ...config import MockServerConfig, load_config
from ...logging import configure_logging
from ...registry.memory_registry import InMemoryRegistry
from ..dispatcher import DispatchRequest, RequestDispatcher

_LOGGER = logging.getLogger(__name__)

# Port used by `run` when DISCOVERY_MOCK_PORT is unset, Eureka's usual one.
DEFAULT_RUN_PORT = 8761

_METHODS = ["GET", "PUT", "POST", "DELETE"]


def create_app(
    dispatcher: Optional[RequestDispatcher] = None,
    *,
    config: Optional[MockServerConfig] = None,
) -> FastAPI:
    """Create the ASGI app serving the registry API under the base path."""
    cfg = config or load_config()
    disp = dispatcher or RequestDispatcher(InMemoryRegistry())

    app = FastAPI(title="Discovery Mock")
    app.state.dispatcher = disp
    app.state.registry = disp.registry

    @app.get("/healthz")
    async def healthz():
        """Liveness probe."""
        return {"status": "ok"}

    @app.api_route(cfg.base_path + "{path:path}", methods=_METHODS)
    async def registry_api(path: str, request: Request) -> Response:
        """Forward every registry call to the dispatcher."""
        body = await request.body()
        # The dispatcher blocks on registry and ledger locks; keep it off
        # the event loop.
        result = await run_in_threadpool(
            disp.dispatch,
            DispatchRequest(
                method=request.method,
                path="/" + path,
                accept=request.headers.get("accept"),
                query=dict(request.query_params),
                body=body,
            ),
        )
        return Response(
            content=result.body,
            status_code=result.status_code,
            media_type=result.media_type,
        )

    _LOGGER.debug("Discovery mock API mounted at %s", cfg.base_path)
    return app


def run():
    """Serve the discovery mock with configuration from environment."""
    load_dotenv()
    configure_logging()

    config = load_config()
    port = config.port or DEFAULT_RUN_PORT
    app = create_app(config=config)
    _LOGGER.info(
        "Starting discovery mock at http://%s:%s%s",
        config.host,
        port,
        config.base_path,
    )
    uvicorn.run(app, host=config.host, port=port, log_level=config.log_level)


if __name__ == "__main__":
    run()
