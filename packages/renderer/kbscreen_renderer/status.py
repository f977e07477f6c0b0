"""Status screen composer: clock plus an optional CPU/RAM line."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .canvas import BitCanvas
from .layout import TIME_Y, TextLayout


@dataclass(frozen=True)
class StatusData:
    timestamp: datetime
    cpu_percent: float | None = None
    ram_used_gb: float | None = None


def _fmt(value: float | None, suffix: str) -> str:
    if value is None:
        return "--"
    return f"{value:.1f}{suffix}"


def format_metrics(data: StatusData) -> str:
    return f"C {_fmt(data.cpu_percent, '%')}   M {_fmt(data.ram_used_gb, ' G')}"


class StatusRenderer:
    """Redraws the whole status frame from injected data on every call."""

    def __init__(
        self,
        layout: TextLayout,
        time_size: float = 32.0,
        time_y: int = TIME_Y,
        metrics_size: float = 16.0,
        metrics_y: int = 44,
        show_metrics: bool = True,
    ) -> None:
        self.layout = layout
        self.time_size = time_size
        self.time_y = time_y
        self.metrics_size = metrics_size
        self.metrics_y = metrics_y
        self.show_metrics = show_metrics

    @property
    def canvas(self) -> BitCanvas:
        return self.layout.canvas

    def render(self, data: StatusData) -> BitCanvas:
        self.canvas.clear()
        self.layout.draw_time(data.timestamp, self.time_size, self.time_y)
        if self.show_metrics:
            self.layout.render_centered(format_metrics(data), self.metrics_size, self.metrics_y)
        return self.canvas
