"""Video helpers for the CHIP-8 interpreter."""

from __future__ import annotations

from .display import PIXEL_OFF, PIXEL_ON, VIDEO_HEIGHT, VIDEO_WIDTH, Display
from .font import FONT_START_ADDRESS, FONTSET, GLYPH_BYTES, glyph_address
from .renderer import MONOCHROME, RenderResult, Renderer, validate_palette

__all__ = [
    "Display",
    "Renderer",
    "RenderResult",
    "MONOCHROME",
    "validate_palette",
    "FONTSET",
    "FONT_START_ADDRESS",
    "GLYPH_BYTES",
    "glyph_address",
    "VIDEO_WIDTH",
    "VIDEO_HEIGHT",
    "PIXEL_ON",
    "PIXEL_OFF",
]
