"""Glyph rasterization backed by Pillow's FreeType fonts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from PIL import Image, ImageDraw, ImageFont

from kbscreen_display.errors import FontAssetError


@dataclass(frozen=True)
class GlyphRender:
    """Ink bitmap of one character, rows top to bottom, one byte per pixel.

    ``top`` is the distance from the font's ascender line down to the first
    ink row, so glyphs of one font and size share a baseline at a fixed
    offset below the line they are drawn on.
    """

    width: int
    height: int
    intensities: bytes
    top: int = 0

    def at(self, col: int, row: int) -> int:
        return self.intensities[row * self.width + col]


EMPTY_GLYPH = GlyphRender(width=0, height=0, intensities=b"")


class GlyphSource(Protocol):
    def rasterize(self, character: str, size: float) -> GlyphRender: ...


class PillowGlyphSource:
    """Rasterizes characters from a TrueType file, or Pillow's bundled font."""

    def __init__(self, font_path: str | Path | None = None) -> None:
        self.font_path = str(font_path) if font_path else None
        self._fonts: dict[int, ImageFont.FreeTypeFont] = {}

    def _font(self, size: float) -> ImageFont.FreeTypeFont:
        points = max(1, int(size))
        font = self._fonts.get(points)
        if font is not None:
            return font
        try:
            if self.font_path is None:
                font = ImageFont.load_default(size=points)
            else:
                font = ImageFont.truetype(self.font_path, points)
        except (OSError, ValueError) as exc:
            raise FontAssetError(f"Unable to load font {self.font_path or '<bundled>'}: {exc}", self.font_path) from exc
        if not isinstance(font, ImageFont.FreeTypeFont):
            raise FontAssetError("Bundled font is not scalable; Pillow was built without FreeType", self.font_path)
        self._fonts[points] = font
        return font

    def validate(self, size: float) -> None:
        self._font(size)

    def rasterize(self, character: str, size: float) -> GlyphRender:
        font = self._font(size)
        # Default "la" anchor: top is measured from the ascender line.
        left, top, right, bottom = font.getbbox(character)
        width, height = right - left, bottom - top
        if width <= 0 or height <= 0:
            return EMPTY_GLYPH

        image = Image.new("L", (width, height), 0)
        ImageDraw.Draw(image).text((-left, -top), character, font=font, fill=255)
        return GlyphRender(width=width, height=height, intensities=image.tobytes(), top=top)
