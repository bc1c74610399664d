"""Registro vivo de sensores.

FUENTE ÚNICA DE VERDAD de las lecturas exportadas.

Mapa nodo → NodeState protegido por un único lock. update() y
sweep_evict() nunca se intercalan. La cardinalidad esperada es baja
(decenas a cientos de sensores), así que un lock global basta.

El gauge se actualiza con el lock tomado: las operaciones de
prometheus_client son en memoria y nunca hacen I/O, y así el registro y
la exposición cambian juntos.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Dict, List, Optional, Tuple

from ..domain.reading import Reading
from ...metrics.exporter_binding import TemperatureGaugeBinding, format_id
from .node_state import NodeSnapshot, NodeState

logger = logging.getLogger(__name__)


class SensorRegistry:
    """Último Reading por (nodo, sensor) con desalojo por inactividad.

    El desalojo es por nodo completo: si ``last_seen`` del nodo (que
    actualiza cualquiera de sus sensores) supera el timeout, se eliminan
    todos sus sensores en la misma pasada.
    """

    def __init__(
        self,
        binding: TemperatureGaugeBinding,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._binding = binding
        self._clock = clock
        self._nodes: Dict[int, NodeState] = {}
        self._lock = threading.Lock()

    def now(self) -> float:
        return self._clock()

    def update(self, node_id: int, reading: Reading, now: Optional[float] = None) -> None:
        """Registra una lectura y publica su valor. Siempre tiene éxito."""
        if now is None:
            now = self._clock()

        with self._lock:
            node = self._nodes.get(node_id)
            if node is None:
                node = NodeState(last_seen=now)
                self._nodes[node_id] = node
                logger.info("[REGISTRY] New esp8266=%s", format_id(node_id))

            node.record(reading, now)
            self._binding.set(node_id, reading.sensor_address, reading.temperature)

    def sweep_evict(
        self,
        now: Optional[float] = None,
        timeout: float = 60.0,
    ) -> List[Tuple[int, int]]:
        """Elimina los nodos con ``now - last_seen > timeout``.

        Returns:
            Pares (nodo, sensor) desalojados en esta pasada.
        """
        if now is None:
            now = self._clock()

        evicted: List[Tuple[int, int]] = []
        with self._lock:
            stale = [
                node_id
                for node_id, node in self._nodes.items()
                if node.is_stale(now, timeout)
            ]
            for node_id in stale:
                node = self._nodes.pop(node_id)
                for sensor_address in node.sensors:
                    self._binding.delete(node_id, sensor_address)
                    evicted.append((node_id, sensor_address))
                logger.info(
                    "[REGISTRY] Evicted esp8266=%s sensors=%d idle=%.1fs",
                    format_id(node_id),
                    len(node.sensors),
                    now - node.last_seen,
                )

        return evicted

    def snapshot(self) -> List[NodeSnapshot]:
        """Copia del contenido del registro, ordenada por nodo."""
        with self._lock:
            return [
                NodeSnapshot(
                    node_id=node_id,
                    last_seen=node.last_seen,
                    sensors=dict(node.sensors),
                )
                for node_id, node in sorted(self._nodes.items())
            ]

    def get(self, node_id: int, sensor_address: int) -> Optional[Reading]:
        with self._lock:
            node = self._nodes.get(node_id)
            if node is None:
                return None
            return node.sensors.get(sensor_address)

    def sensor_count(self) -> int:
        with self._lock:
            return sum(len(node.sensors) for node in self._nodes.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        with self._lock:
            return node_id in self._nodes
