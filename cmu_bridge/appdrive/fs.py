"""Filesystem checks that never raise.

Discovery treats any failed check (missing path, permission error, dead
mount) as "not present". All checks use lstat so symlinks are not followed.
"""

from __future__ import annotations

import stat
import logging
from typing import Any
from pathlib import Path

import orjson

logger = logging.getLogger(__name__)


def _lstat_mode(path: Path) -> int | None:
    try:
        return path.lstat().st_mode
    except Exception:
        return None


def is_file(path: Path) -> bool:
    mode = _lstat_mode(path)
    return mode is not None and stat.S_ISREG(mode)


def is_dir(path: Path) -> bool:
    mode = _lstat_mode(path)
    return mode is not None and stat.S_ISDIR(mode)


def is_link(path: Path) -> bool:
    mode = _lstat_mode(path)
    return mode is not None and stat.S_ISLNK(mode)


def list_children(path: Path) -> list[Path]:
    """Immediate children sorted by name; empty when the directory is unreadable."""
    try:
        return sorted(path.iterdir(), key=lambda child: child.name)
    except Exception:
        logger.warning("appdrive: cannot list %s", path)
        return []


def read_json(path: Path) -> dict[str, Any]:
    """Parse a JSON object from *path*; unreadable or non-object content yields {}."""
    try:
        parsed = orjson.loads(path.read_bytes())
    except Exception:
        logger.warning("appdrive: cannot parse %s", path, exc_info=True)
        return {}
    if not isinstance(parsed, dict):
        logger.warning("appdrive: %s is not a JSON object", path)
        return {}
    return parsed


def read_text(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except Exception:
        logger.warning("appdrive: cannot read %s", path, exc_info=True)
        return None


def relink(link_path: Path, target: Path) -> bool:
    """Point *link_path* at *target*, replacing a previous symlink."""
    try:
        if is_link(link_path):
            link_path.unlink()
        link_path.parent.mkdir(parents=True, exist_ok=True)
        link_path.symlink_to(target, target_is_directory=True)
    except Exception:
        logger.warning("appdrive: cannot link %s -> %s", link_path, target, exc_info=True)
        return False
    return True


__all__ = ["is_dir", "is_file", "is_link", "list_children", "read_json", "read_text", "relink"]
