"""Excepciones del núcleo del exporter.

Ninguna es fatal para el proceso: el handler descarta el mensaje afectado
y continúa con el siguiente.
"""

from __future__ import annotations


class ExporterError(Exception):
    """Base de los errores del exporter."""


class DecodeError(ExporterError):
    """Payload binario más corto que el layout fijo."""

    def __init__(self, length: int, expected: int):
        super().__init__(f"payload too short: {length} bytes, expected {expected}")
        self.length = length
        self.expected = expected


class TopicParseError(ExporterError):
    """El id de nodo del topic no cabe en 64 bits."""

    def __init__(self, topic: str, segment: str):
        super().__init__(f"invalid node id {segment!r} in topic {topic!r}")
        self.topic = topic
        self.segment = segment
