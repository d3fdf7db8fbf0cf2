"""Apply backend push commands to the resource host."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from cmu_bridge.protocol import Command, CommandKind, ResourcePayload

from .host import ResourceHost, InjectedElement

logger = logging.getLogger(__name__)

TAG_SCRIPT = "script"
TAG_STYLE = "style"


class CommandHandler:
    def __init__(self, host: ResourceHost) -> None:
        self._host = host
        self._handlers: dict[CommandKind, Callable[[Iterable[ResourcePayload]], int]] = {
            CommandKind.LOAD_JS: self._load_scripts,
            CommandKind.LOAD_CSS: self._load_styles,
        }

    def apply(self, command: Command) -> int:
        """Inject the command's resources in order; return how many were injected."""
        return self._handlers[command.kind](command.resources)

    def _load_scripts(self, resources: Iterable[ResourcePayload]) -> int:
        return self._inject(TAG_SCRIPT, resources)

    def _load_styles(self, resources: Iterable[ResourcePayload]) -> int:
        return self._inject(TAG_STYLE, resources)

    def _inject(self, tag: str, resources: Iterable[ResourcePayload]) -> int:
        count = 0
        for resource in resources:
            replaced = self._host.remove(resource.location)
            self._host.insert(InjectedElement(tag=tag, location=resource.location, contents=resource.contents))
            count += 1
            logger.info("injected %s %s (replaced=%s)", tag, resource.location, replaced)
        return count


__all__ = ["CommandHandler", "TAG_SCRIPT", "TAG_STYLE"]
