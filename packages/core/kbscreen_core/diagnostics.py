"""Doctor payload: host facts, effective config and visible HID interfaces."""

from __future__ import annotations

import platform
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Any

from kbscreen_display.models import HidDevice
from kbscreen_display.transport import DeviceMatch, HidTransport

from .config import AppConfig, config_path


def device_match(cfg: AppConfig) -> DeviceMatch:
    return DeviceMatch(
        vendor_id=cfg.device.vendor_id,
        product_id=cfg.device.product_id,
        usage_page=cfg.device.usage_page,
    )


def describe_device(device: HidDevice, match: DeviceMatch) -> dict[str, Any]:
    return {
        "path": device.path.decode(errors="replace"),
        "vid": f"{device.vendor_id:04X}",
        "pid": f"{device.product_id:04X}",
        "usage_page": f"{device.usage_page:04X}",
        "product": device.product,
        "manufacturer": device.manufacturer,
        "interface": device.interface_number,
        "compatible": match.matches(device),
    }


def build_doctor_payload(cfg: AppConfig, devices: list[HidDevice] | None = None) -> dict[str, Any]:
    match = device_match(cfg)
    if devices is None:
        devices = HidTransport.discover()
    described = [describe_device(d, match) for d in devices]
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "config_path": str(config_path()),
        "config": asdict(cfg),
        "devices": described,
        "compatible_found": any(d["compatible"] for d in described),
    }
