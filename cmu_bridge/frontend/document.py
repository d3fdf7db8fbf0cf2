"""In-memory resource host used by the CLI frontend and tests."""

from __future__ import annotations

from .host import InjectedElement


class DocumentHost:
    """Ordered list of injected elements, keyed for removal by location."""

    def __init__(self) -> None:
        self._elements: list[InjectedElement] = []

    @property
    def elements(self) -> tuple[InjectedElement, ...]:
        return tuple(self._elements)

    def find(self, location: str) -> InjectedElement | None:
        for element in self._elements:
            if element.location == location:
                return element
        return None

    def remove(self, location: str) -> int:
        kept = [element for element in self._elements if element.location != location]
        removed = len(self._elements) - len(kept)
        self._elements = kept
        return removed

    def insert(self, element: InjectedElement) -> None:
        self._elements.append(element)


__all__ = ["DocumentHost"]
