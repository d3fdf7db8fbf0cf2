"""Discovery results: bundles and the appdrive registry (dataclasses only)."""

from __future__ import annotations

from typing import Any
from pathlib import Path
from dataclasses import field, dataclass


@dataclass(slots=True)
class Bundle:
    id: str
    path: Path
    files: dict[str, Path] = field(default_factory=dict)
    info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "path": str(self.path),
            "files": {name: str(path) for name, path in self.files.items()},
            "info": self.info,
        }


@dataclass(frozen=True, slots=True)
class AppDriveLocations:
    root: Path
    apps: Path
    mount: Path


@dataclass(slots=True)
class AppDriveResources:
    js: list[Path] = field(default_factory=list)
    css: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class AppDrive:
    enabled: bool = False
    locations: AppDriveLocations | None = None
    package: dict[str, Any] = field(default_factory=dict)
    volumes: list[str] = field(default_factory=list)
    applications: dict[str, Bundle] = field(default_factory=dict)
    resources: AppDriveResources = field(default_factory=AppDriveResources)
    workers: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        locations: dict[str, str] = {}
        if self.locations is not None:
            locations = {
                "root": str(self.locations.root),
                "apps": str(self.locations.apps),
                "mount": str(self.locations.mount),
            }
        return {
            "enabled": self.enabled,
            "locations": locations,
            "package": self.package,
            "volumes": list(self.volumes),
            "applications": {app_id: bundle.to_dict() for app_id, bundle in self.applications.items()},
            "workers": list(self.workers),
        }


__all__ = ["AppDrive", "AppDriveLocations", "AppDriveResources", "Bundle"]
