"""
API routers package.
Each router handles a specific domain of endpoints.
"""

from routers import config, run

__all__ = [
    "config",
    "run",
]
