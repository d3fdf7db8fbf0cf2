from .runtime import RuntimeDeps
from .settings import AppSettings
from .connection import ConnectionState, PendingRequest
from .appdrive import AppDrive, Bundle

__all__ = ["AppDrive", "AppSettings", "Bundle", "ConnectionState", "PendingRequest", "RuntimeDeps"]
