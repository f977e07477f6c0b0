"""Core app services for settings, logging, streaming and diagnostics."""

from .config import AppConfig, load_config, save_config

try:  # Keep import side effects tolerant in minimal test environments.
    from .diagnostics import build_doctor_payload, device_match
    from .stream_controller import StreamController, StreamStatus
except Exception:  # pragma: no cover
    build_doctor_payload = None  # type: ignore[assignment]
    device_match = None  # type: ignore[assignment]
    StreamController = None  # type: ignore[assignment]
    StreamStatus = None  # type: ignore[assignment]

__all__ = [
    "AppConfig",
    "StreamController",
    "StreamStatus",
    "build_doctor_payload",
    "device_match",
    "load_config",
    "save_config",
]
