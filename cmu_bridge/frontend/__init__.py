from .channel import RpcChannel
from .commands import CommandHandler
from .client import PingResult, FrontendClient
from .document import DocumentHost
from .host import ResourceHost, InjectedElement

__all__ = [
    "CommandHandler",
    "DocumentHost",
    "FrontendClient",
    "InjectedElement",
    "PingResult",
    "ResourceHost",
    "RpcChannel",
]
