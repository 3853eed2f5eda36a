"""Liveness API for GoldSignal.

This package provides the HTTP endpoints used by process-health
monitoring and the server that runs them.
"""

from .app import create_app
from .server import HealthServer

__all__ = ["create_app", "HealthServer"]
