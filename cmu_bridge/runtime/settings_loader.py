"""Environment parsing for runtime settings."""

from __future__ import annotations

import os
from pathlib import Path

from cmu_bridge.state.settings import AppSettings, NetworkSettings, ChannelSettings, AppDriveSettings
from cmu_bridge.config.appdrive import (
    ENV_CMU_MOUNT_ROOT,
    DEFAULT_MOUNT_ROOT,
    DEFAULT_MOUNT_POINTS,
    ENV_CMU_MOUNT_POINTS,
    DEFAULT_RUNTIME_MOUNT_PATH,
    ENV_CMU_RUNTIME_MOUNT_PATH,
)
from cmu_bridge.config.network import (
    ENV_CMU_HOST,
    ENV_CMU_PORT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENV_CMU_WS_PATH,
    DEFAULT_WS_PATH,
    ENV_CMU_RETRY_DELAY_S,
    DEFAULT_RETRY_DELAY_S,
    ENV_CMU_CONNECT_TIMEOUT_S,
    ENV_CMU_REQUEST_TIMEOUT_S,
    DEFAULT_CONNECT_TIMEOUT_S,
    DEFAULT_REQUEST_TIMEOUT_S,
    ENV_CMU_SETUP_RETRY_DELAY_S,
    DEFAULT_SETUP_RETRY_DELAY_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except Exception:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except Exception:
        return default


def _positive_float_env(name: str, default: float) -> float:
    value = _float_env(name, default)
    return value if value > 0 else default


def _list_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default


def _path_env(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return Path(raw.strip()).expanduser()


def _normalize_ws_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def _load_network_settings() -> NetworkSettings:
    port = _int_env(ENV_CMU_PORT, DEFAULT_PORT)
    if port <= 0 or port > 65535:
        port = DEFAULT_PORT
    return NetworkSettings(
        host=_str_env(ENV_CMU_HOST, DEFAULT_HOST),
        port=port,
        ws_path=_normalize_ws_path(_str_env(ENV_CMU_WS_PATH, DEFAULT_WS_PATH)),
    )


def _load_channel_settings() -> ChannelSettings:
    return ChannelSettings(
        retry_delay_s=_positive_float_env(ENV_CMU_RETRY_DELAY_S, DEFAULT_RETRY_DELAY_S),
        connect_timeout_s=_positive_float_env(ENV_CMU_CONNECT_TIMEOUT_S, DEFAULT_CONNECT_TIMEOUT_S),
        request_timeout_s=_positive_float_env(ENV_CMU_REQUEST_TIMEOUT_S, DEFAULT_REQUEST_TIMEOUT_S),
        setup_retry_delay_s=_positive_float_env(ENV_CMU_SETUP_RETRY_DELAY_S, DEFAULT_SETUP_RETRY_DELAY_S),
    )


def _load_appdrive_settings() -> AppDriveSettings:
    return AppDriveSettings(
        mount_root=_path_env(ENV_CMU_MOUNT_ROOT, DEFAULT_MOUNT_ROOT),
        mount_points=_list_env(ENV_CMU_MOUNT_POINTS, DEFAULT_MOUNT_POINTS),
        runtime_mount_path=_path_env(ENV_CMU_RUNTIME_MOUNT_PATH, DEFAULT_RUNTIME_MOUNT_PATH),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        network=_load_network_settings(),
        channel=_load_channel_settings(),
        appdrive=_load_appdrive_settings(),
    )


__all__ = ["load_settings"]
