"""Render/transmit loop driving one HID display from injected telemetry."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

from kbscreen_display import DiffTransmitter, KbScreenError, SendStats, Transport, TransportWriteError
from kbscreen_display.models import REPORT_LENGTH, ProtocolState
from kbscreen_display.transport import DeviceMatch, HidTransport
from kbscreen_renderer import BitCanvas, StatusData, StatusRenderer
from kbscreen_telemetry import MetricSnapshot

from .logging_setup import get_logger


class SnapshotSource(Protocol):
    def poll(self) -> MetricSnapshot: ...


@dataclass
class StreamStatus:
    connected: bool = False
    path: str | None = None
    state: ProtocolState = ProtocolState.DISCONNECTED
    frames_sent: int = 0
    last_error: str | None = None


def status_from_snapshot(snapshot: MetricSnapshot | None) -> StatusData:
    if snapshot is None:
        return StatusData(timestamp=datetime.now(timezone.utc).astimezone())
    return StatusData(
        timestamp=snapshot.clock.local_time,
        cpu_percent=snapshot.cpu.percent,
        ram_used_gb=snapshot.memory.used_gb,
    )


class StreamController:
    def __init__(
        self,
        renderer: StatusRenderer,
        telemetry: SnapshotSource | None = None,
        transport: Transport | None = None,
        poll_ms: int = 1000,
        report_length: int = REPORT_LENGTH,
        match: DeviceMatch | None = None,
        path_override: str | None = None,
    ) -> None:
        self.renderer = renderer
        self.telemetry = telemetry
        self.poll_ms = poll_ms
        self.report_length = report_length
        self.match = match or DeviceMatch()
        self.path_override = path_override

        self._owns_transport = transport is None
        self._transport: Transport | None = transport
        self._transmitter: DiffTransmitter | None = None
        self._status = StreamStatus()
        self._events: list[dict[str, Any]] = []
        self._logger = get_logger("stream")

    @property
    def status(self) -> StreamStatus:
        return self._status

    @property
    def transmitter(self) -> DiffTransmitter | None:
        return self._transmitter

    def recent_events(self, limit: int = 200) -> list[dict[str, Any]]:
        return self._events[-limit:]

    def _log_event(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        row = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "state": self._status.state.value,
        }
        row.update(fields)
        self._events.append(row)
        if len(self._events) > 1000:
            self._events = self._events[-1000:]
        self._logger.log(level, event, extra={"event": event, **fields})

    def connect(self) -> None:
        if self._status.connected:
            return
        self._status.state = ProtocolState.CONNECTING
        self._log_event("connect_start")

        if self._owns_transport:
            hid_transport = HidTransport()
            try:
                if self.path_override:
                    hid_transport.open(self.path_override.encode())
                else:
                    hid_transport.open_first(self.match)
            except KbScreenError as exc:
                self._status.state = ProtocolState.FAILED
                self._status.last_error = str(exc)
                self._log_event("connect_error", error=str(exc))
                raise
            self._transport = hid_transport
            path = hid_transport.path
            self._status.path = path.decode(errors="replace") if path else None

        self._transmitter = DiffTransmitter(self._transport, report_length=self.report_length)
        self._status.connected = True
        self._status.state = ProtocolState.READY
        self._status.last_error = None
        self._log_event("connect_ok", path=self._status.path)

    def disconnect(self) -> None:
        if self._owns_transport and isinstance(self._transport, HidTransport):
            self._transport.close()
            self._transport = None
        self._transmitter = None
        self._status.connected = False
        self._status.state = ProtocolState.DISCONNECTED
        self._log_event("disconnect")

    def render_frame(self, snapshot: MetricSnapshot | None = None) -> BitCanvas:
        return self.renderer.render(status_from_snapshot(snapshot))

    def send_canvas(self, canvas: BitCanvas) -> SendStats:
        if self._transmitter is None:
            self.connect()

        try:
            stats = self._transmitter.send(canvas)
        except TransportWriteError as exc:
            self._status.state = ProtocolState.FAILED
            self._status.last_error = str(exc)
            self._log_event("send_error", error=str(exc))
            raise

        self._status.state = ProtocolState.STREAMING
        self._status.frames_sent += 1
        self._log_event(
            "send_ok",
            level=logging.DEBUG,
            frame=self._status.frames_sent,
            mode=stats.mode,
            packets_sent=stats.packets_sent,
            packets_skipped=stats.packets_skipped,
        )
        return stats

    def tick(self) -> SendStats:
        snapshot = self.telemetry.poll() if self.telemetry is not None else None
        return self.send_canvas(self.render_frame(snapshot))

    def run(self, max_frames: int | None = None, sleep: Callable[[float], None] = time.sleep) -> int:
        """Render and send frames until ``max_frames`` is reached; returns frames sent."""
        frames = 0
        while max_frames is None or frames < max_frames:
            self.tick()
            frames += 1
            if max_frames is None or frames < max_frames:
                sleep(self.poll_ms / 1000)
        return frames
