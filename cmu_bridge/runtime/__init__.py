"""Runtime package.

Keep this module dependency-light: importing `cmu_bridge.runtime.*` from the
frontend CLI and unit tests should not pull in the FastAPI application.
"""

__all__: list[str] = []
