"""Transporte MQTT: cliente, cola y handler."""

from .backpressure import BackpressureConfig, BackpressureQueue
from .message_handler import MessageHandler
from .mqtt_client import MQTTClient

__all__ = ["BackpressureConfig", "BackpressureQueue", "MessageHandler", "MQTTClient"]
