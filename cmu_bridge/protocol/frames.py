"""Frame builders and JSON encoding for the request/reply/push wire format."""

from __future__ import annotations

from typing import Any

import orjson

from cmu_bridge.config.protocol import KEY_RESULT, RESULT_OK, KEY_COMMAND, KEY_REQUEST, KEY_REQUEST_ID

from .commands import Command


def build_request(request: str, request_id: int, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    frame = dict(payload or {})
    frame[KEY_REQUEST_ID] = request_id
    frame[KEY_REQUEST] = request
    return frame


def build_reply(
    request_frame: dict[str, Any],
    data: dict[str, Any] | None = None,
    result: int = RESULT_OK,
) -> dict[str, Any]:
    """Echo the request fields back, overlaid with reply data and the result code.

    A ``command`` field is never echoed: the frontend would read the reply as a push.
    """
    frame = dict(request_frame)
    frame.pop(KEY_COMMAND, None)
    frame.update(data or {})
    frame[KEY_RESULT] = int(result)
    return frame


def build_push(command: Command) -> dict[str, Any]:
    return command.to_frame()


def encode_frame(frame: dict[str, Any]) -> str:
    return orjson.dumps(frame).decode("utf-8")


__all__ = ["build_push", "build_reply", "build_request", "encode_frame"]
