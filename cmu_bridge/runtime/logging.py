"""Logging initialization."""

from __future__ import annotations

import os
import logging

from cmu_bridge.config.logging import LOG_LEVEL, LOG_FORMAT


def configure_logging() -> None:
    # uvicorn logs every health check request. Keep it tame unless explicitly enabled.
    if (os.getenv("SHOW_ACCESS_LOGS") or "").strip().lower() not in {"1", "true", "yes"}:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("websockets").setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
