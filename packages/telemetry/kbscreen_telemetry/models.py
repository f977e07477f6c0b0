"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CpuMetrics:
    percent: float


@dataclass(frozen=True)
class MemoryMetrics:
    used_gb: float
    total_gb: float
    percent: float


@dataclass(frozen=True)
class ClockMetrics:
    local_time: datetime


@dataclass(frozen=True)
class MetricSnapshot:
    cpu: CpuMetrics
    memory: MemoryMetrics
    clock: ClockMetrics
    timestamp: datetime
