from .requests import RequestKind
from .commands import Command, CommandKind, ResourcePayload
from .frames import build_push, build_reply, encode_frame, build_request
from .parser import PushFrame, ReplyFrame, parse_request, parse_backend_frame

__all__ = [
    "Command",
    "CommandKind",
    "PushFrame",
    "ReplyFrame",
    "RequestKind",
    "ResourcePayload",
    "build_push",
    "build_reply",
    "build_request",
    "encode_frame",
    "parse_backend_frame",
    "parse_request",
]
