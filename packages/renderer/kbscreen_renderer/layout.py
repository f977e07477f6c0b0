"""Text layout and glyph compositing onto a BitCanvas."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .canvas import BitCanvas
from .glyphs import GlyphRender, GlyphSource

TIME_Y = 10
TIME_FORMAT = "%I:%M %p"
INK_THRESHOLD = 128


@dataclass(frozen=True)
class FlipPolicy:
    """Which glyphs are turned upside down before compositing.

    Glyph cells are filled from their bottom edge upward, so a flipped
    bitmap ends up upright. Each cell is shifted down by the glyph's
    ``top`` offset, which keeps every glyph on the font baseline.
    Characters in ``no_flip`` are composited exactly as rasterized; ``.``
    is the only default entry.
    """

    no_flip: frozenset[str] = field(default_factory=lambda: frozenset({"."}))

    def should_flip(self, character: str) -> bool:
        return character not in self.no_flip


def flip_vertical(glyph: GlyphRender) -> GlyphRender:
    rows = [
        glyph.intensities[row * glyph.width : (row + 1) * glyph.width]
        for row in range(glyph.height - 1, -1, -1)
    ]
    return GlyphRender(width=glyph.width, height=glyph.height, intensities=b"".join(rows), top=glyph.top)


def spacing_for(size: float) -> int:
    return int(size) // 24


class TextLayout:
    def __init__(self, canvas: BitCanvas, glyphs: GlyphSource, policy: FlipPolicy | None = None) -> None:
        self.canvas = canvas
        self.glyphs = glyphs
        self.policy = policy or FlipPolicy()

    def draw_glyph(self, character: str, x: int, y: int, size: float) -> GlyphRender:
        glyph = self.glyphs.rasterize(character, size)
        bitmap = flip_vertical(glyph) if self.policy.should_flip(character) else glyph

        for row in range(bitmap.height):
            canvas_y = y + bitmap.top + bitmap.height - row
            for col in range(bitmap.width):
                self.canvas.set_pixel(x + col, canvas_y, bitmap.at(col, row) >= INK_THRESHOLD)
        return glyph

    def draw_text(self, text: str, x: int, y: int, size: float, spacing: int) -> int:
        """Composite ``text`` left to right starting at ``x``; returns the final cursor."""
        cursor = x
        for character in text:
            glyph = self.draw_glyph(character, cursor, y, size)
            cursor += glyph.width + spacing
        return cursor

    def measure(self, text: str, size: float, spacing: int) -> int:
        widths = [self.glyphs.rasterize(character, size).width for character in text]
        if not widths:
            return 0
        return sum(widths) + spacing * (len(widths) - 1)

    def render_centered(self, text: str, size: float, y: int) -> int:
        spacing = spacing_for(size)
        # Wider-than-canvas text starts at a negative x and is clipped.
        x = (self.canvas.width - self.measure(text, size, spacing)) // 2
        self.draw_text(text, x, y, size, spacing)
        return x

    def draw_time(self, instant: datetime, size: float, y: int = TIME_Y) -> str:
        text = instant.strftime(TIME_FORMAT)
        self.render_centered(text, size, y)
        return text
