"""Scheduler periódico de desalojo de nodos inactivos."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from .sensor_registry import SensorRegistry

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 1.0


class EvictionScheduler:
    """Un único hilo que llama a sweep_evict() cada ``interval`` segundos.

    - Las pasadas son secuenciales: nunca se solapan ni se encolan ticks.
    - Un error en una pasada se loguea y el hilo sigue.
    """

    def __init__(
        self,
        registry: SensorRegistry,
        timeout: float,
        interval: float = DEFAULT_INTERVAL,
    ):
        if interval <= 0:
            raise ValueError("interval must be > 0")
        self._registry = registry
        self._timeout = timeout
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self._sweeps = 0
        self._evicted = 0
        self._errors = 0

    def start(self) -> None:
        """Arranca el hilo de desalojo (idempotente)."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            daemon=True,
            name="temperature-exporter-eviction",
        )
        self._thread.start()
        logger.info(
            "[EVICTION] Started interval=%.1fs timeout=%.1fs",
            self._interval,
            self._timeout,
        )

    def stop(self, timeout: float = 5.0) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("[EVICTION] Stopped sweeps=%d evicted=%d", self._sweeps, self._evicted)

    def run_once(self) -> int:
        """Ejecuta una pasada. Devuelve el número de series desalojadas."""
        evicted = self._registry.sweep_evict(timeout=self._timeout)
        self._sweeps += 1
        self._evicted += len(evicted)
        return len(evicted)

    def _loop(self) -> None:
        # wait() devuelve True solo cuando se pide parar.
        while not self._stop_event.wait(self._interval):
            try:
                self.run_once()
            except Exception as e:
                self._errors += 1
                logger.exception("[EVICTION] Sweep failed: %s", e)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def stats(self) -> dict:
        return {
            "running": self.is_running,
            "interval": self._interval,
            "timeout": self._timeout,
            "sweeps": self._sweeps,
            "evicted": self._evicted,
            "errors": self._errors,
        }
