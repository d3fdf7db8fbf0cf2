"""AppDrive filesystem layout (env names, defaults and fixed names)."""

from __future__ import annotations

from pathlib import Path

ENV_CMU_MOUNT_ROOT = "CMU_MOUNT_ROOT"
ENV_CMU_MOUNT_POINTS = "CMU_MOUNT_POINTS"
ENV_CMU_RUNTIME_MOUNT_PATH = "CMU_RUNTIME_MOUNT_PATH"

DEFAULT_MOUNT_ROOT = Path("/tmp/mnt")

# Scan order is priority order.
DEFAULT_MOUNT_POINTS: tuple[str, ...] = ("sd_nav", "sda", "sdb", "sdc", "sdd", "sde", "sdf")

# The UI runtime loads custom code from here; it is re-linked on every discovery pass.
DEFAULT_RUNTIME_MOUNT_PATH = Path("/tmp/mnt/data_persist/appdrive/custom")

APPDRIVE_DIR = "appdrive"
APPDRIVE_JSON = "appdrive.json"

APPLICATIONS_DIR = "apps"
APPLICATION_JS = "app.js"
APPLICATION_JSON = "app.json"
APPLICATION_CSS = "app.css"
APPLICATION_WORKER = "worker.js"

# Checked in this order; a bundle needs at least one of them.
APPLICATION_FILES: tuple[str, ...] = (APPLICATION_JS, APPLICATION_JSON, APPLICATION_CSS, APPLICATION_WORKER)

SYSTEM_DIR = "system"
SYSTEM_FRAMEWORK_DIR = "framework"
SYSTEM_FRAMEWORK_JS = "framework.js"
SYSTEM_FRAMEWORK_CSS = "framework.css"
SYSTEM_CUSTOM_DIR = "custom"

__all__ = [
    "ENV_CMU_MOUNT_ROOT",
    "ENV_CMU_MOUNT_POINTS",
    "ENV_CMU_RUNTIME_MOUNT_PATH",
    "DEFAULT_MOUNT_ROOT",
    "DEFAULT_MOUNT_POINTS",
    "DEFAULT_RUNTIME_MOUNT_PATH",
    "APPDRIVE_DIR",
    "APPDRIVE_JSON",
    "APPLICATIONS_DIR",
    "APPLICATION_JS",
    "APPLICATION_JSON",
    "APPLICATION_CSS",
    "APPLICATION_WORKER",
    "APPLICATION_FILES",
    "SYSTEM_DIR",
    "SYSTEM_FRAMEWORK_DIR",
    "SYSTEM_FRAMEWORK_JS",
    "SYSTEM_FRAMEWORK_CSS",
    "SYSTEM_CUSTOM_DIR",
]
