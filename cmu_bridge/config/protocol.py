"""Wire protocol constants shared by the backend and the frontend channel."""

from __future__ import annotations

# Frame keys
KEY_REQUEST = "request"
KEY_REQUEST_ID = "requestId"
KEY_RESULT = "result"
KEY_COMMAND = "command"
KEY_ATTRIBUTES = "attributes"
KEY_DATA = "data"
KEY_LOCATION = "location"
KEY_CONTENTS = "contents"

# Ping stamps (milliseconds since epoch)
KEY_INBOUND_STAMP = "inboundStamp"
KEY_OUTBOUND_STAMP = "outboundStamp"

# Requests (frontend -> backend)
REQUEST_PING = "ping"
REQUEST_SETUP = "setup"
REQUEST_APPDRIVE = "appdrive"
REQUEST_VERSION = "version"

# Push commands (backend -> frontend)
COMMAND_LOAD_JS = "loadjs"
COMMAND_LOAD_CSS = "loadcss"

# Result codes
RESULT_OK = 200
RESULT_PONG = 201
RESULT_NOT_FOUND = 404
RESULT_ERROR = 500

# Close codes
CLOSE_NORMAL_CODE = 1000
CLOSE_GOING_AWAY_CODE = 1001
CLOSE_FINAL_CODE = 3110

CLOSE_FINAL_REASON = "shutdown"

__all__ = [
    "KEY_REQUEST",
    "KEY_REQUEST_ID",
    "KEY_RESULT",
    "KEY_COMMAND",
    "KEY_ATTRIBUTES",
    "KEY_DATA",
    "KEY_LOCATION",
    "KEY_CONTENTS",
    "KEY_INBOUND_STAMP",
    "KEY_OUTBOUND_STAMP",
    "REQUEST_PING",
    "REQUEST_SETUP",
    "REQUEST_APPDRIVE",
    "REQUEST_VERSION",
    "COMMAND_LOAD_JS",
    "COMMAND_LOAD_CSS",
    "RESULT_OK",
    "RESULT_PONG",
    "RESULT_NOT_FOUND",
    "RESULT_ERROR",
    "CLOSE_NORMAL_CODE",
    "CLOSE_GOING_AWAY_CODE",
    "CLOSE_FINAL_CODE",
    "CLOSE_FINAL_REASON",
]
