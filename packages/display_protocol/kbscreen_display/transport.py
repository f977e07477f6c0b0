"""HID transport abstraction for raw-report keyboard displays."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import hid

from .errors import DiscoveryError, TransportOpenError, TransportWriteError
from .models import HidDevice

logger = logging.getLogger("kbscreen.display")

DEFAULT_VENDOR_ID = 0x4B42
DEFAULT_PRODUCT_ID = 0x6072
DEFAULT_USAGE_PAGE = 0xFF60


@dataclass(frozen=True)
class DeviceMatch:
    vendor_id: int = DEFAULT_VENDOR_ID
    product_id: int = DEFAULT_PRODUCT_ID
    usage_page: int = DEFAULT_USAGE_PAGE

    def matches(self, device: HidDevice) -> bool:
        return (
            device.vendor_id == self.vendor_id
            and device.product_id == self.product_id
            and device.usage_page == self.usage_page
        )


def select_device(devices: list[HidDevice], match: DeviceMatch | None = None) -> HidDevice | None:
    """Pick the first interface whose vendor, product and usage page all match."""
    match = match or DeviceMatch()
    for device in devices:
        if match.matches(device):
            return device
    return None


class HidTransport:
    """Thin wrapper over hidapi exposing a single blocking report write."""

    def __init__(self) -> None:
        self._device: Any | None = None
        self.path: bytes | None = None

    @property
    def is_open(self) -> bool:
        return self._device is not None

    def open(self, path: bytes) -> None:
        if self.is_open:
            if path == self.path:
                return
            raise TransportOpenError(f"HID device {self.path!r} is already open; close it before opening {path!r}")
        device = hid.device()
        try:
            device.open_path(path)
        except OSError as exc:
            raise TransportOpenError(f"Failed to open HID device {path!r}: {exc}") from exc
        self._device = device
        self.path = path
        logger.info("opened HID device %r", path)

    def open_first(self, match: DeviceMatch | None = None) -> HidDevice:
        match = match or DeviceMatch()
        device = select_device(self.discover(), match)
        if device is None:
            raise DiscoveryError(
                "No HID device matching "
                f"vid={match.vendor_id:04X} pid={match.product_id:04X} usage_page={match.usage_page:04X}"
            )
        self.open(device.path)
        return device

    def close(self) -> None:
        if self._device is not None:
            self._device.close()
            self._device = None
            self.path = None

    def write(self, payload: bytes) -> int:
        if self._device is None:
            raise TransportWriteError("HID device is not open")
        try:
            written = int(self._device.write(payload))
        except (OSError, ValueError) as exc:
            raise TransportWriteError(f"HID write failed: {exc}") from exc
        if written < 0:
            raise TransportWriteError(f"HID write failed: {self._device.error()}")
        return written

    def __enter__(self) -> HidTransport:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    @staticmethod
    def discover() -> list[HidDevice]:
        devices: list[HidDevice] = []
        for item in hid.enumerate():
            devices.append(
                HidDevice(
                    path=item["path"],
                    vendor_id=item["vendor_id"],
                    product_id=item["product_id"],
                    usage_page=item.get("usage_page", 0),
                    usage=item.get("usage", 0),
                    product=item.get("product_string") or "",
                    manufacturer=item.get("manufacturer_string") or "",
                    serial_number=item.get("serial_number") or "",
                    interface_number=item.get("interface_number", -1),
                )
            )
        return devices
