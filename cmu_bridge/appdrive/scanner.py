"""Mount-point scan that builds the appdrive registry."""

from __future__ import annotations

import logging
from pathlib import Path

from cmu_bridge.state.settings import AppDriveSettings
from cmu_bridge.state.appdrive import AppDrive, Bundle, AppDriveLocations
from cmu_bridge.config.appdrive import (
    SYSTEM_DIR,
    APPDRIVE_DIR,
    APPDRIVE_JSON,
    APPLICATIONS_DIR,
    APPLICATION_JSON,
    APPLICATION_FILES,
    SYSTEM_CUSTOM_DIR,
    APPLICATION_WORKER,
    SYSTEM_FRAMEWORK_JS,
    SYSTEM_FRAMEWORK_CSS,
    SYSTEM_FRAMEWORK_DIR,
)

from . import fs

logger = logging.getLogger(__name__)


class AppDriveScanner:
    """Scan mount points in priority order.

    A mount point is accepted when ``appdrive/appdrive.json`` is a file and both
    ``appdrive/system/`` and ``appdrive/apps/`` are directories. The first accepted
    mount point is the primary volume: it provides the manifest, the framework
    resources and the runtime mount link. Every accepted mount point contributes
    bundles, and the first registration of a bundle id wins.
    """

    def __init__(self, settings: AppDriveSettings) -> None:
        self._settings = settings

    def _appdrive_path(self, mount_point: str) -> Path:
        return self._settings.mount_root / mount_point / APPDRIVE_DIR

    @staticmethod
    def is_accepted(appdrive_path: Path) -> bool:
        return (
            fs.is_file(appdrive_path / APPDRIVE_JSON)
            and fs.is_dir(appdrive_path / SYSTEM_DIR)
            and fs.is_dir(appdrive_path / APPLICATIONS_DIR)
        )

    def scan(self) -> AppDrive:
        appdrive = AppDrive()

        for mount_point in self._settings.mount_points:
            appdrive_path = self._appdrive_path(mount_point)
            if not self.is_accepted(appdrive_path):
                logger.debug("appdrive: skipping mount point %s", mount_point)
                continue

            if not appdrive.enabled:
                self._mount_primary(appdrive, appdrive_path)
            appdrive.volumes.append(mount_point)
            self._collect_bundles(appdrive, appdrive_path / APPLICATIONS_DIR)

        logger.info(
            "appdrive: enabled=%s volumes=%s applications=%s",
            appdrive.enabled,
            appdrive.volumes,
            sorted(appdrive.applications),
        )
        return appdrive

    def _mount_primary(self, appdrive: AppDrive, appdrive_path: Path) -> None:
        system_path = appdrive_path / SYSTEM_DIR
        framework_path = system_path / SYSTEM_FRAMEWORK_DIR
        mount_path = self._settings.runtime_mount_path

        appdrive.locations = AppDriveLocations(
            root=appdrive_path,
            apps=appdrive_path / APPLICATIONS_DIR,
            mount=mount_path,
        )
        appdrive.package = fs.read_json(appdrive_path / APPDRIVE_JSON)
        appdrive.resources.js.append(framework_path / SYSTEM_FRAMEWORK_JS)
        appdrive.resources.css.append(framework_path / SYSTEM_FRAMEWORK_CSS)
        appdrive.enabled = True

        fs.relink(mount_path, system_path / SYSTEM_CUSTOM_DIR)

    def _collect_bundles(self, appdrive: AppDrive, applications_path: Path) -> None:
        for child in fs.list_children(applications_path):
            app_id = child.name
            if app_id in appdrive.applications:
                continue
            bundle = self.read_bundle(child)
            if bundle is None:
                continue
            appdrive.applications[app_id] = bundle
            if APPLICATION_WORKER in bundle.files:
                appdrive.workers.append(app_id)

    @staticmethod
    def read_bundle(application_path: Path) -> Bundle | None:
        if not fs.is_dir(application_path):
            return None

        bundle = Bundle(id=application_path.name, path=application_path)
        for filename in APPLICATION_FILES:
            full_path = application_path / filename
            if not fs.is_file(full_path):
                continue
            bundle.files[filename] = full_path
            if filename == APPLICATION_JSON:
                bundle.info = fs.read_json(full_path)

        if not bundle.files:
            return None
        return bundle


__all__ = ["AppDriveScanner"]
