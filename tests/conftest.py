import pytest
from prometheus_client import CollectorRegistry

from temperature_exporter.core.registry.sensor_registry import SensorRegistry
from temperature_exporter.metrics.exporter_binding import METRIC_NAME, TemperatureGaugeBinding


class FakeClock:
    """Reloj manual para tests de desalojo."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def metrics_registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def binding(metrics_registry) -> TemperatureGaugeBinding:
    return TemperatureGaugeBinding(metrics_registry)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sensor_registry(binding, clock) -> SensorRegistry:
    return SensorRegistry(binding, clock=clock)


@pytest.fixture
def exported(metrics_registry):
    """Lee el valor exportado de (mac, address) o None si no existe la serie."""

    def _read(mac: str, address: str):
        return metrics_registry.get_sample_value(
            METRIC_NAME, {"mac": mac, "address": address}
        )

    return _read
