"""Estado por nodo."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from ..domain.reading import Reading


@dataclass
class NodeState:
    """Una placa que reporta: último Reading por sensor y última vez visto.

    ``last_seen`` es tiempo de reloj local (no el timestamp del nodo) y se
    actualiza con cualquier lectura aceptada de cualquiera de sus sensores.
    """
    last_seen: float
    sensors: Dict[int, Reading] = field(default_factory=dict)

    def record(self, reading: Reading, now: float) -> None:
        self.sensors[reading.sensor_address] = reading
        self.last_seen = now

    def is_stale(self, now: float, timeout: float) -> bool:
        return now - self.last_seen > timeout


@dataclass(frozen=True)
class NodeSnapshot:
    """Copia de solo lectura de un NodeState."""
    node_id: int
    last_seen: float
    sensors: Dict[int, Reading]
