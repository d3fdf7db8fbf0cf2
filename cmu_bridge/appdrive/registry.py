"""Backend-owned appdrive registry with single-flight refresh."""

from __future__ import annotations

import logging

from cmu_bridge.state.appdrive import AppDrive

from .scanner import AppDriveScanner

logger = logging.getLogger(__name__)


class AppDriveRegistry:
    def __init__(self, scanner: AppDriveScanner) -> None:
        self._scanner = scanner
        self._current = AppDrive()
        self._scanning = False

    @property
    def current(self) -> AppDrive:
        return self._current

    @property
    def scanning(self) -> bool:
        return self._scanning

    def refresh(self) -> AppDrive:
        """Rebuild the registry wholesale; a re-entrant call returns the current one."""
        if self._scanning:
            logger.warning("appdrive: rescan already in progress; serving current registry")
            return self._current

        self._scanning = True
        try:
            self._current = self._scanner.scan()
        finally:
            self._scanning = False
        return self._current


__all__ = ["AppDriveRegistry"]
