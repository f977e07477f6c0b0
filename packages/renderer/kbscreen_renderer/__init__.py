"""Renderer package for one-bit keyboard display frames."""

from .canvas import BitCanvas
from .glyphs import EMPTY_GLYPH, GlyphRender, GlyphSource, PillowGlyphSource
from .layout import TIME_FORMAT, TIME_Y, FlipPolicy, TextLayout, flip_vertical, spacing_for
from .patterns import PATTERNS, build_test_pattern
from .status import StatusData, StatusRenderer, format_metrics

__all__ = [
    "BitCanvas",
    "EMPTY_GLYPH",
    "FlipPolicy",
    "GlyphRender",
    "GlyphSource",
    "PATTERNS",
    "PillowGlyphSource",
    "StatusData",
    "StatusRenderer",
    "TIME_FORMAT",
    "TIME_Y",
    "TextLayout",
    "build_test_pattern",
    "flip_vertical",
    "format_metrics",
    "spacing_for",
]
