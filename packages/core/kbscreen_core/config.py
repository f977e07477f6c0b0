"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import math
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1

# Each report starts with a report type byte and a one-byte packet index.
REPORT_HEADER = 2
MAX_REPORT_LENGTH = 65
MAX_PACKETS = 256
MAX_WIDTH = 1024


@dataclass
class DeviceConfig:
    vendor_id: int = 0x4B42
    product_id: int = 0x6072
    usage_page: int = 0xFF60
    report_length: int = 32
    path_override: str | None = None


@dataclass
class DisplayConfig:
    width: int = 128
    height: int = 64


@dataclass
class RenderConfig:
    font_path: str | None = None
    time_size: float = 32.0
    metrics_size: float = 16.0
    metrics_y: int = 44
    show_metrics: bool = True


@dataclass
class StreamConfig:
    poll_ms: int = 1000


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    device: DeviceConfig = field(default_factory=DeviceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    stream: StreamConfig = field(default_factory=StreamConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


DEFAULT_CONFIG = AppConfig()


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "kbscreen"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "kbscreen"
    return Path.home() / ".config" / "kbscreen"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def min_report_length(width: int, height: int) -> int:
    frame_bytes = width * height // 8
    return math.ceil(frame_bytes / MAX_PACKETS) + REPORT_HEADER


def _normalize_display(cfg: AppConfig) -> None:
    width = max(8, min(MAX_WIDTH, int(cfg.display.width) // 8 * 8))
    max_height = MAX_PACKETS * (MAX_REPORT_LENGTH - REPORT_HEADER) * 8 // width
    cfg.display.width = width
    cfg.display.height = max(1, min(max_height, int(cfg.display.height)))


def _normalize_device(cfg: AppConfig) -> None:
    # Runs after the display is normalized: the frame must fit in 256 packets.
    floor = max(REPORT_HEADER + 1, min_report_length(cfg.display.width, cfg.display.height))
    cfg.device.report_length = max(floor, min(MAX_REPORT_LENGTH, int(cfg.device.report_length)))


def _normalize_stream(cfg: AppConfig) -> None:
    cfg.stream.poll_ms = max(200, min(60000, int(cfg.stream.poll_ms)))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(data.get("config_version", CONFIG_VERSION)),
        device=_merge(DeviceConfig, data.get("device", {})),
        display=_merge(DisplayConfig, data.get("display", {})),
        render=_merge(RenderConfig, data.get("render", {})),
        stream=_merge(StreamConfig, data.get("stream", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_display(cfg)
    _normalize_device(cfg)
    _normalize_stream(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
