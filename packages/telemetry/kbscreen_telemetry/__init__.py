"""System telemetry providers for kbscreen."""

from .models import ClockMetrics, CpuMetrics, MemoryMetrics, MetricSnapshot
try:  # pragma: no cover - optional at import time for minimal test environments
    from .provider import TelemetryProvider, bytes_to_gb
except Exception:  # pragma: no cover
    TelemetryProvider = None  # type: ignore[assignment]
    bytes_to_gb = None  # type: ignore[assignment]

__all__ = [
    "ClockMetrics",
    "CpuMetrics",
    "MemoryMetrics",
    "MetricSnapshot",
]

if TelemetryProvider is not None:
    __all__ += ["TelemetryProvider", "bytes_to_gb"]
