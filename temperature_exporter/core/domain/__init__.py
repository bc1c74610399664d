"""Domain layer - Modelos y decodificación."""

from .reading import READING_SIZE, Reading, decode_reading, encode_reading

__all__ = ["READING_SIZE", "Reading", "decode_reading", "encode_reading"]
