from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "display_protocol"))

from kbscreen_display import transport as transport_mod
from kbscreen_display.errors import DiscoveryError, TransportOpenError, TransportWriteError
from kbscreen_display.models import HidDevice
from kbscreen_display.transport import DeviceMatch, HidTransport, select_device


def _info(path: bytes, vid: int, pid: int, usage_page: int) -> dict:
    return {
        "path": path,
        "vendor_id": vid,
        "product_id": pid,
        "usage_page": usage_page,
        "usage": 0x61,
        "product_string": "Keyboard",
        "manufacturer_string": "KB",
        "serial_number": "",
        "interface_number": 1,
    }


class FakeHidDevice:
    def __init__(self, fail_open: bool = False, write_result: int | None = None) -> None:
        self.fail_open = fail_open
        self.write_result = write_result
        self.opened: bytes | None = None
        self.writes: list[bytes] = []
        self.closed = False

    def open_path(self, path: bytes) -> None:
        if self.fail_open:
            raise OSError("open failed")
        self.opened = path

    def write(self, data: bytes) -> int:
        self.writes.append(bytes(data))
        return len(data) if self.write_result is None else self.write_result

    def error(self) -> str:
        return "broken pipe"

    def close(self) -> None:
        self.closed = True


class FakeHid:
    def __init__(self, infos: list[dict], device: FakeHidDevice) -> None:
        self.infos = infos
        self._device = device

    def enumerate(self, vid: int = 0, pid: int = 0) -> list[dict]:
        return list(self.infos)

    def device(self) -> FakeHidDevice:
        return self._device


@pytest.fixture
def fake_hid(monkeypatch):
    device = FakeHidDevice()
    fake = FakeHid(
        [
            _info(b"/dev/hidraw0", 0x4B42, 0x6072, 0x0001),
            _info(b"/dev/hidraw1", 0x4B42, 0x6072, 0xFF60),
            _info(b"/dev/hidraw2", 0x046D, 0xC52B, 0xFF60),
        ],
        device,
    )
    monkeypatch.setattr(transport_mod, "hid", fake)
    return fake


def test_device_match_requires_all_three_ids() -> None:
    match = DeviceMatch()
    assert match.matches(HidDevice(b"a", 0x4B42, 0x6072, 0xFF60))
    assert not match.matches(HidDevice(b"a", 0x4B42, 0x6072, 0x0001))
    assert not match.matches(HidDevice(b"a", 0x4B42, 0x0000, 0xFF60))
    assert not match.matches(HidDevice(b"a", 0x0000, 0x6072, 0xFF60))


def test_select_device_picks_first_match() -> None:
    devices = [HidDevice(b"x", 1, 2, 3), HidDevice(b"y", 1, 2, 4), HidDevice(b"z", 1, 2, 4)]
    assert select_device(devices, DeviceMatch(1, 2, 4)).path == b"y"
    assert select_device(devices, DeviceMatch(9, 9, 9)) is None


def test_discover_maps_enumeration(fake_hid) -> None:
    devices = HidTransport.discover()
    assert [d.path for d in devices] == [b"/dev/hidraw0", b"/dev/hidraw1", b"/dev/hidraw2"]
    assert devices[1].usage_page == 0xFF60
    assert devices[1].product == "Keyboard"


def test_open_first_opens_matching_interface(fake_hid) -> None:
    t = HidTransport()
    device = t.open_first()
    assert device.path == b"/dev/hidraw1"
    assert fake_hid._device.opened == b"/dev/hidraw1"
    assert t.is_open
    assert t.write(b"\x01\x00" + bytes(30)) == 32
    t.close()
    assert fake_hid._device.closed
    assert not t.is_open


def test_open_first_without_match_is_discovery_error(fake_hid) -> None:
    with pytest.raises(DiscoveryError):
        HidTransport().open_first(DeviceMatch(0x1234, 0x5678, 0xFF60))


def test_open_failure_is_transport_open_error(fake_hid) -> None:
    fake_hid._device.fail_open = True
    t = HidTransport()
    with pytest.raises(TransportOpenError):
        t.open_first()
    assert not t.is_open


def test_write_when_closed_fails() -> None:
    with pytest.raises(TransportWriteError):
        HidTransport().write(b"\x01\x00")


def test_negative_write_is_transport_write_error(fake_hid) -> None:
    fake_hid._device.write_result = -1
    with HidTransport() as t:
        t.open(b"/dev/hidraw1")
        with pytest.raises(TransportWriteError, match="broken pipe"):
            t.write(b"\x01\x00")
    assert fake_hid._device.closed


def test_reopen_same_path_is_noop(fake_hid) -> None:
    t = HidTransport()
    t.open(b"/dev/hidraw1")
    t.open(b"/dev/hidraw1")
    assert t.path == b"/dev/hidraw1"
    assert t.is_open


def test_open_different_path_while_open_fails(fake_hid) -> None:
    t = HidTransport()
    t.open(b"/dev/hidraw1")
    with pytest.raises(TransportOpenError, match="already open"):
        t.open(b"/dev/hidraw0")
    assert t.path == b"/dev/hidraw1"
    t.close()
    t.open(b"/dev/hidraw0")
    assert t.path == b"/dev/hidraw0"
