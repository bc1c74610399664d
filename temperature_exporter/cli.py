"""CLI entry point del exporter."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence, Tuple

import uvicorn
from prometheus_client import REGISTRY

from common.config import DEFAULT_CONFIG_FILE, ConfigError, load_settings

from .core.receiver import ExporterReceiver
from .core.registry.sensor_registry import SensorRegistry
from .main import create_app
from .metrics.exporter_binding import TemperatureGaugeBinding

logger = logging.getLogger(__name__)

DEFAULT_LISTEN_ADDRESS = ":9214"


def parse_listen_address(address: str) -> Tuple[str, int]:
    """Convierte ``host:port`` / ``:port`` a (host, port)."""
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Invalid listen address: {address!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="MQTT → Prometheus temperature exporter")
    p.add_argument(
        "--config.file",
        dest="config_file",
        default=DEFAULT_CONFIG_FILE,
        help="Exporter configuration file.",
    )
    p.add_argument(
        "--web.listen-address",
        dest="listen_address",
        default=DEFAULT_LISTEN_ADDRESS,
        help="The address to listen on for HTTP requests.",
    )
    return p


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )

    try:
        settings = load_settings(args.config_file)
        host, port = parse_listen_address(args.listen_address)
    except (ConfigError, ValueError) as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    logging.getLogger().setLevel(settings.log_level)

    logger.info("Starting temperature exporter")
    for key, value in settings.describe().items():
        logger.info("Config: %s=%s", key, value)

    binding = TemperatureGaugeBinding(REGISTRY)
    registry = SensorRegistry(binding)
    receiver = ExporterReceiver(settings, registry)

    if not receiver.start():
        logger.error("Receiver failed to start")
        return 1

    app = create_app(registry, binding, REGISTRY, receiver)
    try:
        # uvicorn atiende SIGINT/SIGTERM y retorna al terminar.
        uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())
    finally:
        receiver.stop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
