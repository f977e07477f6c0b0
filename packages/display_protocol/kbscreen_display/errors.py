"""Failure taxonomy for device discovery, transport I/O and font assets.

Every failure the display stack reports derives from ``KbScreenError`` so the
CLI can catch the whole family in one place::

    KbScreenError
    ├── DiscoveryError       no HID interface matched the configured ids
    ├── TransportOpenError   a matching interface could not be opened
    ├── TransportWriteError  a report write failed mid-frame
    └── FontAssetError       the font file could not be read or parsed

Drawing outside the canvas is not part of this family; it is a silent no-op.
"""

from __future__ import annotations


class KbScreenError(RuntimeError):
    """Base class for labelled, fatal display failures."""


class DiscoveryError(KbScreenError):
    pass


class TransportOpenError(KbScreenError):
    pass


class TransportWriteError(KbScreenError):
    def __init__(self, message: str, packet_index: int | None = None) -> None:
        super().__init__(message)
        self.packet_index = packet_index


class FontAssetError(KbScreenError):
    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path
