"""Push-command kinds plus the push payload types."""

from __future__ import annotations

from enum import Enum
from typing import Any
from dataclasses import field, dataclass

from cmu_bridge.config.protocol import (
    KEY_DATA,
    KEY_COMMAND,
    KEY_CONTENTS,
    KEY_LOCATION,
    KEY_ATTRIBUTES,
    COMMAND_LOAD_JS,
    COMMAND_LOAD_CSS,
)


class CommandKind(str, Enum):
    LOAD_JS = COMMAND_LOAD_JS
    LOAD_CSS = COMMAND_LOAD_CSS


@dataclass(frozen=True, slots=True)
class ResourcePayload:
    location: str
    contents: str

    def to_dict(self) -> dict[str, str]:
        return {KEY_LOCATION: self.location, KEY_CONTENTS: self.contents}


@dataclass(frozen=True, slots=True)
class Command:
    kind: CommandKind
    resources: tuple[ResourcePayload, ...] = field(default_factory=tuple)

    def to_frame(self) -> dict[str, Any]:
        return {
            KEY_COMMAND: self.kind.value,
            KEY_ATTRIBUTES: {KEY_DATA: [resource.to_dict() for resource in self.resources]},
        }


__all__ = ["Command", "CommandKind", "ResourcePayload"]
