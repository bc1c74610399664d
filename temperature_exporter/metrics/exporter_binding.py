"""Binding entre el registro de sensores y el gauge Prometheus.

Cada par (nodo, sensor) vivo en el registro tiene exactamente una serie
``esp8266_temperature_value{mac="<nodo>", address="<sensor>"}``.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from prometheus_client import REGISTRY, CollectorRegistry, Gauge

logger = logging.getLogger(__name__)

METRIC_NAME = "esp8266_temperature_value"
METRIC_HELP = "ESP8266 temperature node"
LABEL_NAMES = ("mac", "address")


def format_id(value: int) -> str:
    """Hex en mayúsculas sin ceros a la izquierda (mismo texto que %X en Go).

    La identidad de la serie depende de la igualdad exacta del string, así
    que todo id que se convierta a texto pasa por aquí.
    """
    return format(value, "X")


class TemperatureGaugeBinding:
    """Gauge de temperatura etiquetado por nodo y sensor.

    delete() es best-effort: borrar una serie inexistente es un resultado
    esperado (carreras entre update y sweep), se loguea en DEBUG y devuelve
    False.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = REGISTRY):
        self._gauge = Gauge(
            METRIC_NAME,
            METRIC_HELP,
            LABEL_NAMES,
            registry=registry,
        )
        self._series: set[Tuple[str, str]] = set()
        self._lock = threading.Lock()

    @staticmethod
    def labels_for(node_id: int, sensor_address: int) -> Tuple[str, str]:
        return format_id(node_id), format_id(sensor_address)

    def set(self, node_id: int, sensor_address: int, value: float) -> None:
        labels = self.labels_for(node_id, sensor_address)
        with self._lock:
            self._gauge.labels(*labels).set(value)
            self._series.add(labels)

    def delete(self, node_id: int, sensor_address: int) -> bool:
        labels = self.labels_for(node_id, sensor_address)
        with self._lock:
            if labels not in self._series:
                logger.debug(
                    "[EXPORTER] DELETE miss: esp8266=%s sensor=%s", *labels
                )
                return False
            self._gauge.remove(*labels)
            self._series.discard(labels)
        return True

    def series(self) -> List[Tuple[str, str]]:
        """Pares (mac, address) exportados actualmente."""
        with self._lock:
            return sorted(self._series)
