"""Router de topics MQTT → identificador de nodo."""

from __future__ import annotations

import re
from typing import Optional

from ..errors import TopicParseError

MAX_NODE_ID = (1 << 64) - 1


class TopicRouter:
    """Extrae el id de nodo de topics ``<prefix>/<HEX-NODE-ID>/temperature``.

    Cualquier otro topic (prefijo distinto, sufijo como
    ``rescan_temperature``, niveles extra, id que no es hex en mayúsculas)
    no es un error: match() devuelve None y el mensaje se ignora.
    """

    SUFFIX = "temperature"

    def __init__(self, prefix: str):
        self._prefix = prefix.rstrip("/")
        self._pattern = re.compile(
            rf"^{re.escape(self._prefix)}/(?P<node>[0-9A-F]+)/{self.SUFFIX}$"
        )

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def subscription(self) -> str:
        """Filtro de suscripción que cubre todos los topics del prefijo."""
        return f"{self._prefix}/#"

    def match(self, topic: str) -> Optional[int]:
        """Devuelve el id de nodo o None si el topic no aplica.

        Raises:
            TopicParseError: si el id de nodo no cabe en 64 bits.
        """
        found = self._pattern.match(topic)
        if found is None:
            return None

        segment = found.group("node")
        node_id = int(segment, 16)
        if node_id > MAX_NODE_ID:
            raise TopicParseError(topic, segment)
        return node_id
