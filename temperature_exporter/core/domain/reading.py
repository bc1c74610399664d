"""Modelo de dominio para lecturas de temperatura.

Formato binario (little-endian, 20 bytes):

    offset 0   u64  dirección del sensor DS18B20
    offset 8   u64  timestamp unix (segundos, lo pone el nodo)
    offset 16  f32  temperatura en °C
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import Optional

from ..errors import DecodeError

READING_FORMAT = struct.Struct("<QQf")
READING_SIZE = READING_FORMAT.size

# Mismo layout con la temperatura como patrón de bits crudo.
_RAW_FORMAT = struct.Struct("<QQI")


@dataclass(frozen=True)
class Reading:
    """Lectura de un sensor. Inmutable una vez decodificada.

    No se valida el contenido: temperaturas extremas o NaN pasan tal cual.
    ``temperature_bits`` conserva el f32 original (un NaN de señalización
    cambia al pasar a float de Python).
    """
    sensor_address: int
    timestamp: int
    temperature: float
    temperature_bits: Optional[int] = field(default=None, compare=False, repr=False)


def decode_reading(payload: bytes) -> Reading:
    """Decodifica un payload binario a Reading.

    Raises:
        DecodeError: si el payload es más corto que READING_SIZE.
    """
    if len(payload) < READING_SIZE:
        raise DecodeError(len(payload), READING_SIZE)

    # Bytes sobrantes al final se ignoran.
    address, timestamp, temperature = READING_FORMAT.unpack_from(payload)
    _, _, bits = _RAW_FORMAT.unpack_from(payload)
    return Reading(
        sensor_address=address,
        timestamp=timestamp,
        temperature=temperature,
        temperature_bits=bits,
    )


def encode_reading(reading: Reading) -> bytes:
    """Inverso de decode_reading."""
    if reading.temperature_bits is not None:
        return _RAW_FORMAT.pack(
            reading.sensor_address,
            reading.timestamp,
            reading.temperature_bits,
        )
    return READING_FORMAT.pack(
        reading.sensor_address,
        reading.timestamp,
        reading.temperature,
    )
