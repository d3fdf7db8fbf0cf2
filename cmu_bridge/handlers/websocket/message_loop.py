"""WebSocket message loop for frontend request frames."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from cmu_bridge.protocol import RequestKind, parse_request
from cmu_bridge.state.runtime import RuntimeDeps
from cmu_bridge.config.protocol import (
    KEY_REQUEST,
    RESULT_ERROR,
    KEY_REQUEST_ID,
    RESULT_NOT_FOUND,
    CLOSE_NORMAL_CODE,
)

from .dispatch import HANDLERS
from .replies import send_reply

logger = logging.getLogger(__name__)


def _parse_or_log(raw: str | bytes) -> dict[str, Any] | None:
    try:
        return parse_request(raw)
    except ValueError as exc:
        logger.warning("dropping malformed frame: %s", exc)
        return None


async def handle_frame(ws: WebSocket, runtime_deps: RuntimeDeps, raw: str | bytes) -> None:
    frame = _parse_or_log(raw)
    if frame is None:
        return

    name = frame[KEY_REQUEST]
    try:
        kind = RequestKind(name)
    except ValueError:
        logger.info("unknown request '%s' (requestId=%s)", name, frame[KEY_REQUEST_ID])
        await send_reply(ws, frame, result=RESULT_NOT_FOUND)
        return

    try:
        await HANDLERS[kind](ws, runtime_deps, frame)
    except Exception:
        logger.exception("request '%s' failed (requestId=%s)", name, frame[KEY_REQUEST_ID])
        await send_reply(ws, frame, result=RESULT_ERROR)


async def _receive_frame(ws: WebSocket) -> str | bytes | None:
    message = await ws.receive()
    if message["type"] == "websocket.disconnect":
        raise WebSocketDisconnect(message.get("code", CLOSE_NORMAL_CODE), message.get("reason"))
    if message.get("text") is not None:
        return message["text"]
    return message.get("bytes")


async def run_message_loop(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    try:
        while True:
            raw = await _receive_frame(ws)
            if raw is None:
                continue
            logger.debug("client:message %s", raw)
            await handle_frame(ws, runtime_deps, raw)
    except WebSocketDisconnect as exc:
        logger.info("client:closed code=%s", exc.code)


__all__ = ["handle_frame", "run_message_loop"]
