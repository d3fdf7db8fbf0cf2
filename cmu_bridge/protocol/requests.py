"""Request kinds a frontend may send."""

from __future__ import annotations

from enum import Enum

from cmu_bridge.config.protocol import REQUEST_PING, REQUEST_SETUP, REQUEST_VERSION, REQUEST_APPDRIVE


class RequestKind(str, Enum):
    PING = REQUEST_PING
    SETUP = REQUEST_SETUP
    APPDRIVE = REQUEST_APPDRIVE
    VERSION = REQUEST_VERSION


__all__ = ["RequestKind"]
