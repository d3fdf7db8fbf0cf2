"""FastAPI backend service for the head-unit bridge."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.responses import ORJSONResponse

from cmu_bridge.state import RuntimeDeps
from cmu_bridge.state.settings import AppSettings
from cmu_bridge.runtime.dependencies import build_runtime_deps
from cmu_bridge.runtime.settings_loader import load_settings
from cmu_bridge.handlers.websocket import handle_websocket_connection

logger = logging.getLogger(__name__)


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        runtime_deps = build_runtime_deps(settings)
        app.state.runtime_deps = runtime_deps
        logger.info("runtime: ready on %s", settings.network.url)
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.websocket(settings.network.ws_path)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        runtime_deps: RuntimeDeps | None = getattr(app.state, "runtime_deps", None)
        if runtime_deps is None:
            raise RuntimeError("Runtime dependencies are not initialized")
        await handle_websocket_connection(websocket, runtime_deps)

    return app


__all__ = ["create_app"]
