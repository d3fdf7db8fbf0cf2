"""Head-unit bridge: backend appdrive service and frontend RPC channel."""

__version__ = "0.1.0"

__all__ = ["__version__"]
