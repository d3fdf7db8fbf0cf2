"""Configuration module exports (env names, defaults and protocol constants only)."""

from .network import DEFAULT_HOST, DEFAULT_PORT

__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
]
