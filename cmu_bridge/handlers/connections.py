"""Single-client slot: the backend serves only the most recently connected frontend."""

from __future__ import annotations

import logging
import contextlib
from typing import Any

from cmu_bridge.config.protocol import CLOSE_GOING_AWAY_CODE

logger = logging.getLogger(__name__)


class ClientSlot:
    def __init__(self) -> None:
        self._current: Any | None = None
        self._generation = 0

    @property
    def current(self) -> Any | None:
        return self._current

    @property
    def generation(self) -> int:
        return self._generation

    def attach(self, ws: Any) -> Any | None:
        """Make *ws* the current client and return the one it supersedes.

        The superseded socket stays open; only pushes are redirected.
        """
        previous = self._current
        self._current = ws
        self._generation += 1
        if previous is not None and previous is not ws:
            logger.info("client superseded by a newer connection (generation=%s)", self._generation)
        return previous

    def detach(self, ws: Any) -> bool:
        if self._current is not ws:
            return False
        self._current = None
        return True

    async def release_all(self) -> None:
        ws = self._current
        self._current = None
        if ws is None:
            return
        with contextlib.suppress(Exception):
            await ws.close(code=CLOSE_GOING_AWAY_CODE)


__all__ = ["ClientSlot"]
