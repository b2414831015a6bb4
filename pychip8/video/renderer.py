"""Convert the CHIP-8 frame buffer into an RGB image for the host window."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from .display import Display

RGBColor = Tuple[int, int, int]

MONOCHROME: Tuple[RGBColor, RGBColor] = ((0, 0, 0), (0xFF, 0xFF, 0xFF))


def validate_palette(palette: Sequence[RGBColor]) -> Tuple[RGBColor, RGBColor]:
    """Return ``palette`` as a normalised (background, foreground) pair."""

    if len(palette) != 2:
        raise ValueError("palette must contain exactly two colours (off and on)")
    if any(len(color) != 3 for color in palette):
        raise ValueError("palette entries must be RGB tuples")
    background, foreground = (tuple(int(channel) & 0xFF for channel in color) for color in palette)
    return background, foreground  # type: ignore[return-value]


@dataclass
class RenderResult:
    """RGB24 pixel data produced by :class:`Renderer`."""

    width: int
    height: int
    pixels: bytes

    def get_pixel(self, x: int, y: int) -> RGBColor:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        offset = (y * self.width + x) * 3
        r, g, b = self.pixels[offset : offset + 3]
        return (r, g, b)

    def to_surface(self):
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to build a surface") from exc
        return pygame.image.frombuffer(self.pixels, (self.width, self.height), "RGB")


class Renderer:
    """Scale the display and map its cells onto a two-colour palette."""

    def __init__(self, palette: Sequence[RGBColor] = MONOCHROME) -> None:
        self._background, self._foreground = validate_palette(palette)

    def render(self, display: Display, *, scale: int = 1) -> RenderResult:
        if scale <= 0:
            raise ValueError("scale must be positive")

        background = bytes(self._background)
        foreground = bytes(self._foreground)
        width = display.width * scale
        height = display.height * scale

        buffer = bytearray()
        for y in range(display.height):
            line = bytearray()
            for cell in display.row(y):
                line += (foreground if cell else background) * scale
            buffer += bytes(line) * scale

        display.dirty = False
        return RenderResult(width, height, bytes(buffer))
