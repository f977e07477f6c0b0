"""Framebuffer packetization and change-only transmission over HID reports."""

from __future__ import annotations

import logging
import math
import time
from typing import Protocol, Union

from .errors import TransportWriteError
from .models import HEADER_SIZE, MAX_PACKETS, REPORT_LENGTH, Packet, SendStats

logger = logging.getLogger("kbscreen.display")


class Transport(Protocol):
    def write(self, payload: bytes) -> int: ...


class _HasData(Protocol):
    data: bytearray


Framebuffer = Union[bytes, bytearray, _HasData]


def payload_size(report_length: int = REPORT_LENGTH) -> int:
    if report_length <= HEADER_SIZE:
        raise ValueError(f"Report length must exceed the {HEADER_SIZE} header bytes")
    return report_length - HEADER_SIZE


def packet_count(total_bytes: int, chunk: int) -> int:
    return math.ceil(total_bytes / chunk)


def _raw(frame: Framebuffer) -> bytes:
    if isinstance(frame, (bytes, bytearray)):
        return bytes(frame)
    return bytes(frame.data)


def to_packets(frame: Framebuffer, report_length: int = REPORT_LENGTH) -> list[Packet]:
    """Split a framebuffer into consecutive zero-padded packets, index 0 first."""
    data = _raw(frame)
    chunk = payload_size(report_length)
    count = packet_count(len(data), chunk)
    if count > MAX_PACKETS:
        raise ValueError(f"Framebuffer needs {count} packets; at most {MAX_PACKETS} fit a one-byte index")

    packets: list[Packet] = []
    for index, offset in enumerate(range(0, len(data), chunk)):
        payload = data[offset : offset + chunk]
        packets.append(Packet(index=index, payload=payload.ljust(chunk, b"\x00")))
    return packets


class DiffTransmitter:
    """Sends only the packets that differ from the last complete frame."""

    def __init__(self, transport: Transport, report_length: int = REPORT_LENGTH) -> None:
        self.transport = transport
        self.report_length = report_length
        self.previous: list[Packet] | None = None

    def reset(self) -> None:
        self.previous = None

    def _changed(self, current: list[Packet]) -> list[Packet]:
        if self.previous is None:
            return current
        seen = set(self.previous)
        return [packet for packet in current if packet not in seen]

    def pending(self, frame: Framebuffer) -> list[Packet]:
        return self._changed(to_packets(frame, self.report_length))

    def send(self, frame: Framebuffer) -> SendStats:
        start = time.perf_counter()
        current = to_packets(frame, self.report_length)
        changed = self._changed(current)

        stats = SendStats(
            packets_total=len(current),
            packets_skipped=len(current) - len(changed),
            mode="full" if self.previous is None else ("diff" if changed else "noop"),
        )

        for packet in changed:
            report = packet.to_report()
            try:
                written = self.transport.write(report)
            except Exception as exc:
                self.previous = None
                raise TransportWriteError(f"Write of packet {packet.index} failed: {exc}", packet.index) from exc
            if written is not None and written < 0:
                self.previous = None
                raise TransportWriteError(f"Write of packet {packet.index} failed", packet.index)
            stats.packets_sent += 1
            stats.bytes_sent += len(report)

        self.previous = current
        stats.duration_s = time.perf_counter() - start
        logger.debug(
            "frame sent mode=%s sent=%d skipped=%d",
            stats.mode,
            stats.packets_sent,
            stats.packets_skipped,
        )
        return stats
