from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class SensorOut(BaseModel):
    address: str
    timestamp: int
    temperature: Optional[float] = None


class NodeOut(BaseModel):
    mac: str
    seconds_since_seen: float
    sensors: List[SensorOut] = Field(default_factory=list)


class NodesOut(BaseModel):
    nodes: List[NodeOut] = Field(default_factory=list)


class HealthOut(BaseModel):
    status: str
    running: bool
    connected: bool
    nodes: int
    sensors: int
    series: int
