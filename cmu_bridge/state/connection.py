"""Frontend connection state and outstanding-request records."""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any
from dataclasses import dataclass
from collections.abc import Callable

# (is_error, frame). Failures that never reached the backend carry an empty frame.
ReplyCallback = Callable[[bool, dict[str, Any]], None]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"


@dataclass(slots=True)
class PendingRequest:
    request_id: int
    request: str
    callback: ReplyCallback | None = None
    timeout_handle: asyncio.TimerHandle | None = None

    def cancel_timeout(self) -> None:
        if self.timeout_handle is not None:
            self.timeout_handle.cancel()
            self.timeout_handle = None


__all__ = ["ConnectionState", "PendingRequest", "ReplyCallback"]
