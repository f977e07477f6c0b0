"""psutil-backed CPU and memory sampling."""

from __future__ import annotations

from datetime import datetime, timezone

import psutil

from .models import ClockMetrics, CpuMetrics, MemoryMetrics, MetricSnapshot

_GIB = float(1 << 30)


def bytes_to_gb(value: int) -> float:
    return value / _GIB


class TelemetryProvider:
    """Single polling provider; CPU percent is measured since the previous poll."""

    def __init__(self) -> None:
        # Prime non-blocking CPU measurement.
        psutil.cpu_percent(interval=None)

    def poll(self) -> MetricSnapshot:
        now_utc = datetime.now(timezone.utc)
        vm = psutil.virtual_memory()
        return MetricSnapshot(
            cpu=CpuMetrics(percent=float(psutil.cpu_percent(interval=None))),
            memory=MemoryMetrics(
                used_gb=bytes_to_gb(vm.used),
                total_gb=bytes_to_gb(vm.total),
                percent=float(vm.percent),
            ),
            clock=ClockMetrics(local_time=now_utc.astimezone()),
            timestamp=now_utc,
        )
