"""Deterministic one-bit test patterns for bring-up and transport checks."""

from __future__ import annotations

from .canvas import BitCanvas

PATTERNS = ("clear", "fill", "checkerboard", "border", "stripes")


def build_test_pattern(name: str, width: int, height: int, cell: int = 8) -> BitCanvas:
    if name not in PATTERNS:
        raise ValueError(f"Unknown pattern: {name}")
    canvas = BitCanvas(width, height)

    if name == "fill":
        canvas.fill()
    elif name == "checkerboard":
        for y in range(height):
            for x in range(width):
                canvas.set_pixel(x, y, (x // cell + y // cell) % 2 == 0)
    elif name == "border":
        canvas.paint_region(0, 0, width, height, True)
        canvas.paint_region(1, 1, width - 1, height - 1, False)
    elif name == "stripes":
        for y in range(0, height, 2):
            canvas.paint_region(0, y, width, y + 1, True)
    return canvas
