"""Dispatch handlers for frontend request frames."""

from __future__ import annotations

import time
import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from cmu_bridge import __version__
from cmu_bridge.appdrive import build_load_command
from cmu_bridge.state.runtime import RuntimeDeps
from cmu_bridge.protocol import CommandKind, RequestKind
from cmu_bridge.config.protocol import RESULT_OK, RESULT_PONG, KEY_OUTBOUND_STAMP, RESULT_NOT_FOUND

from .replies import send_reply, send_command

logger = logging.getLogger(__name__)

HandlerFn = Callable[[WebSocket, RuntimeDeps, dict[str, Any]], Awaitable[None]]


def _now_ms() -> int:
    return int(time.time() * 1000)


async def _handle_version(ws: WebSocket, _runtime_deps: RuntimeDeps, frame: dict[str, Any]) -> None:
    await send_reply(ws, frame, result=RESULT_OK, data={"version": __version__})


async def _handle_ping(ws: WebSocket, _runtime_deps: RuntimeDeps, frame: dict[str, Any]) -> None:
    await send_reply(ws, frame, result=RESULT_PONG, data={KEY_OUTBOUND_STAMP: _now_ms()})


async def _handle_setup(ws: WebSocket, runtime_deps: RuntimeDeps, frame: dict[str, Any]) -> None:
    appdrive = runtime_deps.registry.current
    if not appdrive.enabled:
        await send_reply(ws, frame, result=RESULT_NOT_FOUND, data={"enabled": False})
        return

    await send_reply(ws, frame, result=RESULT_OK, data={"enabled": True})

    # Pushes target the current client, which may not be the requester.
    target = runtime_deps.client_slot.current
    await send_command(target, build_load_command(CommandKind.LOAD_JS, appdrive.resources.js))
    await send_command(target, build_load_command(CommandKind.LOAD_CSS, appdrive.resources.css))


async def _handle_appdrive(ws: WebSocket, runtime_deps: RuntimeDeps, frame: dict[str, Any]) -> None:
    registry = runtime_deps.registry
    appdrive = registry.refresh() if frame.get("rescan") is True else registry.current
    if not appdrive.enabled:
        await send_reply(ws, frame, result=RESULT_NOT_FOUND, data={"appdrive": appdrive.to_dict()})
        return
    await send_reply(ws, frame, result=RESULT_OK, data={"appdrive": appdrive.to_dict()})


HANDLERS: dict[RequestKind, HandlerFn] = {
    RequestKind.VERSION: _handle_version,
    RequestKind.PING: _handle_ping,
    RequestKind.SETUP: _handle_setup,
    RequestKind.APPDRIVE: _handle_appdrive,
}

__all__ = ["HANDLERS", "HandlerFn"]
