"""Endpoint de diagnóstico: contenido actual del registro de sensores."""

import math

from fastapi import APIRouter, Request

from ..metrics.exporter_binding import format_id
from ..schemas import NodeOut, NodesOut, SensorOut

router = APIRouter(tags=["nodes"])


@router.get("/nodes", response_model=NodesOut)
def list_nodes(request: Request):
    """Nodos vivos con la última lectura de cada sensor.

    Temperaturas NaN/inf se devuelven como null (no son JSON válido).
    """
    registry = request.app.state.sensor_registry
    now = registry.now()

    nodes = []
    for snap in registry.snapshot():
        sensors = [
            SensorOut(
                address=format_id(address),
                timestamp=reading.timestamp,
                temperature=reading.temperature if math.isfinite(reading.temperature) else None,
            )
            for address, reading in sorted(snap.sensors.items())
        ]
        nodes.append(
            NodeOut(
                mac=format_id(snap.node_id),
                seconds_since_seen=round(max(0.0, now - snap.last_seen), 3),
                sensors=sensors,
            )
        )
    return NodesOut(nodes=nodes)
