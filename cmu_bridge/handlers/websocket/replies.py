"""Send helpers for reply and push frames."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

from cmu_bridge.protocol import Command, build_push, build_reply, encode_frame

logger = logging.getLogger(__name__)


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_json(ws: WebSocket, frame: dict[str, Any]) -> bool:
    return await safe_send_text(ws, encode_frame(frame))


async def send_reply(
    ws: WebSocket,
    request_frame: dict[str, Any],
    *,
    result: int,
    data: dict[str, Any] | None = None,
) -> bool:
    return await safe_send_json(ws, build_reply(request_frame, data, result))


async def send_command(ws: WebSocket | None, command: Command) -> bool:
    if ws is None:
        logger.info("no client attached; dropping %s push", command.kind.value)
        return False
    logger.info(
        "push %s: %s",
        command.kind.value,
        [resource.location for resource in command.resources],
    )
    return await safe_send_json(ws, build_push(command))


__all__ = ["safe_send_json", "safe_send_text", "send_command", "send_reply"]
