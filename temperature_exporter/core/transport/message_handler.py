"""Handler de mensajes MQTT."""

from __future__ import annotations

import logging
import time
from typing import Optional

from ..domain.reading import Reading, decode_reading
from ..errors import DecodeError, TopicParseError
from ..monitoring.stats import Stats
from ..registry.sensor_registry import SensorRegistry
from ..routing.topic_router import TopicRouter
from ...metrics.exporter_binding import format_id

logger = logging.getLogger(__name__)


class MessageHandler:
    """Procesa un mensaje (topic, payload) hasta el registro.

    Responsabilidades:
    - Filtrado de topics (TopicRouter)
    - Decodificación del payload binario
    - Delegación al SensorRegistry
    - Tracking de estadísticas

    Un mensaje inválido se descarta; nunca detiene el servicio.
    """

    LOG_EVERY = 100

    def __init__(self, router: TopicRouter, registry: SensorRegistry):
        self._router = router
        self._registry = registry
        self._stats = Stats()

    def handle(self, topic: str, payload: bytes) -> Optional[Reading]:
        """Procesa un mensaje. Devuelve el Reading aceptado o None."""
        self._stats.incr("received")
        self._stats.touch(time.time())

        try:
            node_id = self._router.match(topic)
            if node_id is None:
                self._stats.incr("ignored")
                logger.debug("[HANDLER] Ignored topic=%s", topic)
                return None

            reading = decode_reading(payload)
            self._registry.update(node_id, reading)

        except TopicParseError as e:
            self._stats.incr("failed")
            logger.warning("[HANDLER] Bad topic: %s", e)
            return None
        except DecodeError as e:
            self._stats.incr("failed")
            logger.warning("[HANDLER] Bad payload: %s (topic=%s)", e, topic)
            return None
        except Exception as e:
            self._stats.incr("failed")
            logger.exception("[HANDLER] Error: %s (topic=%s)", e, topic)
            return None

        self._stats.incr("processed")
        logger.debug(
            "[HANDLER] esp8266=%s sensor=%s temperature=%s",
            format_id(node_id),
            format_id(reading.sensor_address),
            reading.temperature,
        )

        if self._stats.processed % self.LOG_EVERY == 0:
            logger.info("[HANDLER] %s", self._stats)

        return reading

    @property
    def stats(self) -> Stats:
        return self._stats
