"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from pathlib import Path
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NetworkSettings:
    host: str
    port: int
    ws_path: str

    @property
    def url(self) -> str:
        return f"ws://{self.host}:{self.port}{self.ws_path}"


@dataclass(frozen=True, slots=True)
class ChannelSettings:
    retry_delay_s: float
    connect_timeout_s: float
    request_timeout_s: float
    setup_retry_delay_s: float


@dataclass(frozen=True, slots=True)
class AppDriveSettings:
    mount_root: Path
    mount_points: tuple[str, ...]
    runtime_mount_path: Path


@dataclass(frozen=True, slots=True)
class AppSettings:
    network: NetworkSettings
    channel: ChannelSettings
    appdrive: AppDriveSettings


__all__ = [
    "AppDriveSettings",
    "AppSettings",
    "ChannelSettings",
    "NetworkSettings",
]
