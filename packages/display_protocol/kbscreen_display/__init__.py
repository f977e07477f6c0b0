"""Display protocol package for raw-HID keyboard displays."""

from .errors import DiscoveryError, FontAssetError, KbScreenError, TransportOpenError, TransportWriteError
from .models import REPORT_LENGTH, REPORT_TYPE, HidDevice, Packet, ProtocolState, SendStats
from .packets import DiffTransmitter, Transport, packet_count, payload_size, to_packets

try:  # pragma: no cover - hidapi is optional at import time for test environments
    from .transport import DeviceMatch, HidTransport, select_device
except Exception:  # pragma: no cover
    DeviceMatch = None  # type: ignore[assignment]
    HidTransport = None  # type: ignore[assignment]
    select_device = None  # type: ignore[assignment]

__all__ = [
    "DiffTransmitter",
    "DiscoveryError",
    "FontAssetError",
    "HidDevice",
    "KbScreenError",
    "Packet",
    "ProtocolState",
    "REPORT_LENGTH",
    "REPORT_TYPE",
    "SendStats",
    "Transport",
    "TransportOpenError",
    "TransportWriteError",
    "packet_count",
    "payload_size",
    "to_packets",
]

if HidTransport is not None:
    __all__ += ["DeviceMatch", "HidTransport", "select_device"]
