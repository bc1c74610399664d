"""Registro vivo de sensores y desalojo periódico."""

from .eviction import EvictionScheduler
from .node_state import NodeSnapshot, NodeState
from .sensor_registry import SensorRegistry

__all__ = ["EvictionScheduler", "NodeSnapshot", "NodeState", "SensorRegistry"]
