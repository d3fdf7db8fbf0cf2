"""Shared error types for the head-unit bridge."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RequestError(Exception):
    """Raised by the awaitable request helper when a request does not succeed."""

    request: str
    request_id: int | None
    reason: str

    def __str__(self) -> str:
        return f"request '{self.request}' (requestId={self.request_id}) failed: {self.reason}"


__all__ = ["RequestError"]
