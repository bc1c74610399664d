"""Métricas exportadas a Prometheus."""

from .exporter_binding import (
    METRIC_NAME,
    TemperatureGaugeBinding,
    format_id,
)

__all__ = [
    "METRIC_NAME",
    "TemperatureGaugeBinding",
    "format_id",
]
