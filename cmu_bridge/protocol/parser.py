"""Inbound frame parsing/validation for both ends of the channel."""

from __future__ import annotations

from typing import Any
from dataclasses import dataclass

import orjson

from cmu_bridge.config.protocol import (
    KEY_DATA,
    KEY_RESULT,
    KEY_COMMAND,
    KEY_REQUEST,
    KEY_CONTENTS,
    KEY_LOCATION,
    KEY_ATTRIBUTES,
    KEY_REQUEST_ID,
)

from .commands import Command, CommandKind, ResourcePayload


@dataclass(frozen=True, slots=True)
class ReplyFrame:
    request_id: int
    result: int | None
    payload: dict[str, Any]


@dataclass(frozen=True, slots=True)
class PushFrame:
    name: str
    command: Command | None


def _load_object(raw: str | bytes) -> dict[str, Any]:
    try:
        msg = orjson.loads(raw)
    except Exception as exc:
        raise ValueError(f"invalid JSON: {exc}") from exc

    if not isinstance(msg, dict):
        raise ValueError("frame must be a JSON object")
    return msg


def _coerce_request_id(value: Any) -> int:
    # bool is an int subclass; never a valid correlation id.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{KEY_REQUEST_ID}' must be an integer")
    return value


def parse_request(raw: str | bytes) -> dict[str, Any]:
    """Parse a frontend request frame (backend side)."""
    msg = _load_object(raw)

    request = msg.get(KEY_REQUEST)
    if not isinstance(request, str) or not request.strip():
        raise ValueError(f"frame missing non-empty '{KEY_REQUEST}'")

    msg[KEY_REQUEST_ID] = _coerce_request_id(msg.get(KEY_REQUEST_ID))
    msg[KEY_REQUEST] = request.strip()
    return msg


def _parse_resources(attributes: Any) -> tuple[ResourcePayload, ...]:
    if not isinstance(attributes, dict):
        raise ValueError(f"push '{KEY_ATTRIBUTES}' must be an object")
    data = attributes.get(KEY_DATA, [])
    if not isinstance(data, list):
        raise ValueError(f"push '{KEY_ATTRIBUTES}.{KEY_DATA}' must be an array")

    resources: list[ResourcePayload] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("push resource must be an object")
        location = item.get(KEY_LOCATION)
        contents = item.get(KEY_CONTENTS)
        if not isinstance(location, str) or not location:
            raise ValueError(f"push resource missing '{KEY_LOCATION}'")
        if not isinstance(contents, str):
            raise ValueError(f"push resource '{location}' missing text '{KEY_CONTENTS}'")
        resources.append(ResourcePayload(location=location, contents=contents))
    return tuple(resources)


def parse_backend_frame(raw: str | bytes) -> ReplyFrame | PushFrame:
    """Parse a backend frame (frontend side).

    Frames carrying ``command`` are pushes; everything else must be a reply with an
    integer ``requestId``. Unknown command names yield a ``PushFrame`` without a
    command so the caller can log and drop them.
    """
    msg = _load_object(raw)

    if KEY_COMMAND in msg:
        name = msg.get(KEY_COMMAND)
        if not isinstance(name, str):
            raise ValueError(f"'{KEY_COMMAND}' must be a string")
        try:
            kind = CommandKind(name)
        except ValueError:
            return PushFrame(name=name, command=None)
        resources = _parse_resources(msg.get(KEY_ATTRIBUTES) or {})
        return PushFrame(name=name, command=Command(kind=kind, resources=resources))

    request_id = _coerce_request_id(msg.get(KEY_REQUEST_ID))
    result = msg.get(KEY_RESULT)
    if isinstance(result, bool) or not isinstance(result, int):
        result = None
    return ReplyFrame(request_id=request_id, result=result, payload=msg)


__all__ = ["PushFrame", "ReplyFrame", "parse_backend_frame", "parse_request"]
