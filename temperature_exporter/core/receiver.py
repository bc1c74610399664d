"""Receptor MQTT - Punto de entrada del pipeline.

Usa la arquitectura modular:
- transport/   → Cliente MQTT, cola y handler
- routing/     → Topic → nodo
- domain/      → Decodificación de lecturas
- registry/    → Registro de sensores y desalojo
- monitoring/  → Stats
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from common.config import Settings

from .registry.eviction import EvictionScheduler
from .registry.sensor_registry import SensorRegistry
from .routing.topic_router import TopicRouter
from .transport.backpressure import BackpressureConfig, BackpressureQueue
from .transport.message_handler import MessageHandler
from .transport.mqtt_client import MQTTClient

logger = logging.getLogger(__name__)


class ExporterReceiver:
    """Receptor MQTT → registro de sensores.

    Hilos:
    - red de paho: solo encola (topic, payload)
    - consumidor: desencola y llama a MessageHandler.handle
    - desalojo: EvictionScheduler
    """

    POLL_TIMEOUT = 0.5

    def __init__(
        self,
        settings: Settings,
        registry: SensorRegistry,
        mqtt_client: Optional[MQTTClient] = None,
    ):
        self._settings = settings
        self._registry = registry
        self._router = TopicRouter(settings.topic)
        self._handler = MessageHandler(self._router, registry)
        self._queue: BackpressureQueue[tuple] = BackpressureQueue(
            BackpressureConfig.from_settings(settings)
        )
        self._scheduler = EvictionScheduler(
            registry,
            timeout=settings.sensor_timeout,
            interval=settings.eviction_interval,
        )
        self._mqtt = mqtt_client or MQTTClient.from_settings(
            settings, self._router.subscription
        )
        self._mqtt.set_message_handler(self.enqueue)

        self._stop_event = threading.Event()
        self._consumer: Optional[threading.Thread] = None
        self._running = False

    def start(self) -> bool:
        """Inicia consumidor, desalojo y conexión MQTT."""
        self._stop_event.clear()
        self._consumer = threading.Thread(
            target=self._consume_loop,
            daemon=True,
            name="temperature-exporter-consumer",
        )
        self._consumer.start()
        self._scheduler.start()
        self._running = True

        if not self._mqtt.connect():
            logger.error("[RECEIVER] MQTT connection failed")
            self.stop()
            return False

        logger.info("[RECEIVER] Started successfully topic=%s", self._router.subscription)
        return True

    def stop(self):
        """Detiene el receptor."""
        self._running = False
        self._mqtt.disconnect()
        self._stop_event.set()
        if self._consumer is not None:
            self._consumer.join(timeout=5.0)
            self._consumer = None
        discarded = self._queue.clear()
        if discarded:
            logger.warning("[RECEIVER] Discarded %d queued messages", discarded)
        self._scheduler.stop()
        logger.info("[RECEIVER] Stopped. %s", self._handler.stats)

    def enqueue(self, topic: str, payload: bytes) -> bool:
        """Callback de paho: encola y retorna inmediatamente."""
        return self._queue.put((topic, bytes(payload)))

    def drain(self) -> int:
        """Procesa en el hilo actual todo lo encolado. Devuelve cuántos."""
        count = 0
        while True:
            item = self._queue.get(timeout=0)
            if item is None:
                return count
            self._handler.handle(*item)
            count += 1

    def _consume_loop(self) -> None:
        while not self._stop_event.is_set():
            item = self._queue.get(timeout=self.POLL_TIMEOUT)
            if item is None:
                continue
            topic, payload = item
            # handle() ya captura y cuenta sus propios errores.
            self._handler.handle(topic, payload)

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_connected(self) -> bool:
        return self._mqtt.is_connected

    @property
    def handler(self) -> MessageHandler:
        return self._handler

    @property
    def scheduler(self) -> EvictionScheduler:
        return self._scheduler

    @property
    def stats(self) -> dict:
        """Estadísticas del receptor."""
        handler_stats = self._handler.stats
        return {
            "running": self._running,
            "connected": self.is_connected,
            "reconnect_count": self._mqtt.reconnect_count,
            **handler_stats.to_dict(),
            "queue": self._queue.get_stats(),
            "eviction": self._scheduler.stats,
            "nodes": len(self._registry),
            "sensors": self._registry.sensor_count(),
        }
