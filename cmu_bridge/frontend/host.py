"""Execution-environment seam for injected resources.

The UI runtime that ultimately hosts pushed scripts and stylesheets is an
external collaborator; the bridge only needs to remove and insert tagged
elements.
"""

from __future__ import annotations

from typing import Protocol
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InjectedElement:
    tag: str
    location: str
    contents: str


class ResourceHost(Protocol):
    def remove(self, location: str) -> int:
        """Remove every element tagged with *location*; return how many were removed."""
        ...

    def insert(self, element: InjectedElement) -> None: ...


__all__ = ["InjectedElement", "ResourceHost"]
