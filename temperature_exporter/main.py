from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from prometheus_client import CollectorRegistry

from .core.receiver import ExporterReceiver
from .core.registry.sensor_registry import SensorRegistry
from .endpoints import health_router, metrics_router, nodes_router
from .metrics.exporter_binding import TemperatureGaugeBinding


def create_app(
    sensor_registry: SensorRegistry,
    gauge_binding: TemperatureGaugeBinding,
    metrics_registry: CollectorRegistry,
    receiver: Optional[ExporterReceiver] = None,
) -> FastAPI:
    """Construye la app HTTP sobre un registro ya creado.

    El registro y el receptor los crea el llamador una sola vez; la app
    solo los lee.
    """
    app = FastAPI(title="MQTT Temperature Exporter", version="0.1.0")
    app.state.sensor_registry = sensor_registry
    app.state.gauge_binding = gauge_binding
    app.state.metrics_registry = metrics_registry
    app.state.receiver = receiver

    app.include_router(metrics_router)
    app.include_router(health_router)
    app.include_router(nodes_router)
    return app
