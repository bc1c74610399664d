"""Módulo de endpoints HTTP.

Contiene los endpoints del exporter organizados por función.
"""

from .health import router as health_router
from .metrics import router as metrics_router
from .nodes import router as nodes_router

__all__ = [
    "health_router",
    "metrics_router",
    "nodes_router",
]
