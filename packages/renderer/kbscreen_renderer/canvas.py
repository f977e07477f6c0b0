"""Packed one-bit-per-pixel framebuffer."""

from __future__ import annotations

from PIL import Image

_OFF = "░"
_ON = "▓"


class BitCanvas:
    """Monochrome canvas stored row-major, eight pixels per byte.

    Bit 7 of each byte is the leftmost pixel it covers. Every pixel access
    goes through ``_address`` so reads and writes always agree.
    """

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or width % 8 != 0:
            raise ValueError("Canvas width must be a positive multiple of 8")
        if height <= 0:
            raise ValueError("Canvas height must be positive")
        self.width = width
        self.height = height
        self.data = bytearray(width * height // 8)

    @classmethod
    def from_image(cls, image: Image.Image) -> BitCanvas:
        if image.mode != "1":
            image = image.convert("1")
        canvas = cls(image.width, image.height)
        canvas.data[:] = image.tobytes()
        return canvas

    def to_image(self) -> Image.Image:
        return Image.frombytes("1", (self.width, self.height), bytes(self.data))

    def copy(self) -> BitCanvas:
        clone = BitCanvas(self.width, self.height)
        clone.data[:] = self.data
        return clone

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _address(self, x: int, y: int) -> tuple[int, int]:
        return (y * self.width + x) // 8, 7 - (x % 8)

    def clear(self) -> None:
        self.data[:] = bytes(len(self.data))

    def fill(self) -> None:
        self.data[:] = b"\xff" * len(self.data)

    def set_pixel(self, x: int, y: int, enabled: bool) -> None:
        # Off-canvas writes are dropped so oversized text clips cleanly.
        if not self._in_bounds(x, y):
            return
        byte_index, bit_index = self._address(x, y)
        mask = 1 << bit_index
        if enabled:
            self.data[byte_index] |= mask
        else:
            self.data[byte_index] &= ~mask & 0xFF

    def get_pixel(self, x: int, y: int) -> bool:
        if not self._in_bounds(x, y):
            return False
        byte_index, bit_index = self._address(x, y)
        return bool(self.data[byte_index] >> bit_index & 1)

    def paint_region(self, min_x: int, min_y: int, max_x: int, max_y: int, enabled: bool) -> None:
        for y in range(min_y, max_y):
            for x in range(min_x, max_x):
                self.set_pixel(x, y, enabled)

    def to_text(self) -> str:
        stride = self.width // 8
        rows = []
        for offset in range(0, len(self.data), stride):
            bits = "".join(f"{byte:08b}" for byte in self.data[offset : offset + stride])
            rows.append(bits.replace("0", _OFF).replace("1", _ON))
        return "\n".join(rows)

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"BitCanvas(width={self.width}, height={self.height})"
