"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from cmu_bridge.state.settings import AppSettings
    from cmu_bridge.appdrive.registry import AppDriveRegistry
    from cmu_bridge.handlers.connections import ClientSlot


@dataclass(slots=True)
class RuntimeDeps:
    client_slot: ClientSlot
    registry: AppDriveRegistry
    settings: AppSettings

    async def shutdown(self) -> None:
        try:
            await self.client_slot.release_all()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
