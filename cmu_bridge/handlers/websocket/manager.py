"""Primary WebSocket connection handler orchestration."""

from __future__ import annotations

import logging

from fastapi import WebSocket

from cmu_bridge.state.runtime import RuntimeDeps

from .message_loop import run_message_loop

logger = logging.getLogger(__name__)


async def handle_websocket_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    await ws.accept()
    slot = runtime_deps.client_slot
    slot.attach(ws)
    logger.info("client:connected generation=%s", slot.generation)
    try:
        await run_message_loop(ws, runtime_deps)
    except Exception as exc:
        logger.warning("client:error %s", exc)
    finally:
        if slot.detach(ws):
            logger.info("client:detached; no frontend attached")


__all__ = ["handle_websocket_connection"]
