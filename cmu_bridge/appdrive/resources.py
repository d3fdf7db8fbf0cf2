"""Build push commands from resource paths, inlining file contents."""

from __future__ import annotations

import logging
from pathlib import Path
from collections.abc import Iterable

from cmu_bridge.protocol import Command, CommandKind, ResourcePayload

from . import fs

logger = logging.getLogger(__name__)


def build_load_command(kind: CommandKind, paths: Iterable[Path]) -> Command:
    """Read each path now so the frontend receives exactly these bytes.

    Paths that are not regular files, or cannot be read, are skipped.
    """
    resources: list[ResourcePayload] = []
    for path in paths:
        if not fs.is_file(path):
            logger.debug("appdrive: resource %s is not a file; skipping", path)
            continue
        contents = fs.read_text(path)
        if contents is None:
            continue
        resources.append(ResourcePayload(location=str(path), contents=contents))
    return Command(kind=kind, resources=tuple(resources))


__all__ = ["build_load_command"]
