"""Typed models for HID reports, devices and transmission state."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

REPORT_TYPE = 0x01
HEADER_SIZE = 2
REPORT_LENGTH = 32
MAX_PACKETS = 256


class ProtocolState(str, Enum):
    DISCONNECTED = "Disconnected"
    CONNECTING = "Connecting"
    READY = "Ready"
    STREAMING = "Streaming"
    FAILED = "Failed"


@dataclass(frozen=True)
class HidDevice:
    path: bytes
    vendor_id: int
    product_id: int
    usage_page: int
    usage: int = 0
    product: str = ""
    manufacturer: str = ""
    serial_number: str = ""
    interface_number: int = -1


@dataclass(frozen=True)
class Packet:
    """One report's worth of framebuffer bytes.

    Equality and hashing cover both ``index`` and ``payload``; two packets
    are the same only when the same chunk position carries the same bytes.
    """

    index: int
    payload: bytes

    def to_report(self) -> bytes:
        return bytes([REPORT_TYPE, self.index]) + self.payload


@dataclass
class SendStats:
    packets_total: int = 0
    packets_sent: int = 0
    packets_skipped: int = 0
    bytes_sent: int = 0
    duration_s: float = 0.0
    mode: str = "full"
