"""Network and channel timing configuration (env names and defaults only)."""

from __future__ import annotations

ENV_CMU_HOST = "CMU_HOST"
ENV_CMU_PORT = "CMU_PORT"
ENV_CMU_WS_PATH = "CMU_WS_PATH"
ENV_CMU_RETRY_DELAY_S = "CMU_RETRY_DELAY_S"
ENV_CMU_CONNECT_TIMEOUT_S = "CMU_CONNECT_TIMEOUT_S"
ENV_CMU_REQUEST_TIMEOUT_S = "CMU_REQUEST_TIMEOUT_S"
ENV_CMU_SETUP_RETRY_DELAY_S = "CMU_SETUP_RETRY_DELAY_S"

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9700
DEFAULT_WS_PATH = "/"

# The head unit retried every 5 seconds, forever. Keep that cadence.
DEFAULT_RETRY_DELAY_S = 5.0

# Bounds a connect attempt so a half-open socket cannot park the channel in "connecting".
DEFAULT_CONNECT_TIMEOUT_S = 10.0

# Replies that never arrive fail their request after this long.
DEFAULT_REQUEST_TIMEOUT_S = 30.0

DEFAULT_SETUP_RETRY_DELAY_S = 0.1

# Maximum WebSocket message size (bytes); pushed resources are inlined.
WS_MAX_MESSAGE_BYTES = 32 * 1024 * 1024

__all__ = [
    "ENV_CMU_HOST",
    "ENV_CMU_PORT",
    "ENV_CMU_WS_PATH",
    "ENV_CMU_RETRY_DELAY_S",
    "ENV_CMU_CONNECT_TIMEOUT_S",
    "ENV_CMU_REQUEST_TIMEOUT_S",
    "ENV_CMU_SETUP_RETRY_DELAY_S",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_WS_PATH",
    "DEFAULT_RETRY_DELAY_S",
    "DEFAULT_CONNECT_TIMEOUT_S",
    "DEFAULT_REQUEST_TIMEOUT_S",
    "DEFAULT_SETUP_RETRY_DELAY_S",
    "WS_MAX_MESSAGE_BYTES",
]
