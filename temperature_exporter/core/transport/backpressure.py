"""Cola acotada entre el hilo de red de paho y el consumidor.

Cuando la cola está llena se aplica la política configurada:
- drop_oldest=True: se descarta el mensaje más antiguo y entra el nuevo
- drop_oldest=False: se descarta el mensaje nuevo

max_queue_size=0 deja la cola sin límite.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class BackpressureConfig:
    """Configuración de backpressure."""
    max_queue_size: int = 10000
    drop_oldest: bool = True

    @classmethod
    def from_settings(cls, settings) -> "BackpressureConfig":
        return cls(
            max_queue_size=settings.queue_max_size,
            drop_oldest=settings.queue_drop_oldest,
        )


@dataclass
class BackpressureStats:
    """Estadísticas de backpressure."""
    enqueued: int = 0
    dequeued: int = 0
    dropped: int = 0


class BackpressureQueue(Generic[T]):
    """Cola thread-safe con límite de tamaño.

    Uso:
        queue = BackpressureQueue[tuple]()

        # Productor (callback de paho)
        queue.put((topic, payload))

        # Consumidor
        item = queue.get(timeout=1.0)
    """

    def __init__(self, config: Optional[BackpressureConfig] = None):
        self._config = config or BackpressureConfig()
        self._queue: deque[T] = deque()
        self._lock = threading.Lock()
        self._not_empty = threading.Condition(self._lock)
        self._stats = BackpressureStats()

        logger.info(
            "[QUEUE] Initialized max_size=%d drop_oldest=%s",
            self._config.max_queue_size,
            self._config.drop_oldest,
        )

    @property
    def bounded(self) -> bool:
        return self._config.max_queue_size > 0

    def put(self, item: T) -> bool:
        """Agrega un item a la cola.

        Returns:
            False si el item nuevo fue descartado por la política.
        """
        with self._lock:
            if self.bounded and len(self._queue) >= self._config.max_queue_size:
                self._stats.dropped += 1
                if not self._config.drop_oldest:
                    logger.debug("[QUEUE] Full, dropped newest message")
                    return False
                self._queue.popleft()
                logger.debug("[QUEUE] Full, dropped oldest message")

            self._queue.append(item)
            self._stats.enqueued += 1
            self._not_empty.notify()
            return True

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """Obtiene un item de la cola.

        Args:
            timeout: Segundos a esperar (None = bloquear indefinidamente)

        Returns:
            Item o None si timeout
        """
        with self._not_empty:
            if not self._queue:
                self._not_empty.wait(timeout)

            if not self._queue:
                return None

            item = self._queue.popleft()
            self._stats.dequeued += 1
            return item

    def clear(self) -> int:
        """Limpia la cola. Devuelve el número de items eliminados."""
        with self._lock:
            count = len(self._queue)
            self._queue.clear()
            return count

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._queue)

    def get_stats(self) -> dict:
        """Estadísticas de la cola."""
        with self._lock:
            return {
                "enqueued": self._stats.enqueued,
                "dequeued": self._stats.dequeued,
                "dropped": self._stats.dropped,
                "current_size": len(self._queue),
                "max_size": self._config.max_queue_size,
            }
