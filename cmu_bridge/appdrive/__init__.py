from .scanner import AppDriveScanner
from .registry import AppDriveRegistry
from .resources import build_load_command

__all__ = ["AppDriveRegistry", "AppDriveScanner", "build_load_command"]
