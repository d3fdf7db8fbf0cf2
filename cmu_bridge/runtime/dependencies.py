"""Runtime dependency construction (appdrive registry + client slot)."""

from __future__ import annotations

import logging

from cmu_bridge.state import RuntimeDeps
from cmu_bridge.state.settings import AppSettings
from cmu_bridge.handlers.connections import ClientSlot
from cmu_bridge.appdrive import AppDriveScanner, AppDriveRegistry

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


def build_runtime_deps(settings: AppSettings | None = None) -> RuntimeDeps:
    settings = settings or load_settings()

    registry = AppDriveRegistry(AppDriveScanner(settings.appdrive))
    registry.refresh()

    return RuntimeDeps(
        client_slot=ClientSlot(),
        registry=registry,
        settings=settings,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
