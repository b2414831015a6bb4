"""Monochrome 64x32 frame buffer written by the CLS and DRW instructions."""

from __future__ import annotations

from typing import Final

VIDEO_WIDTH: Final[int] = 64
VIDEO_HEIGHT: Final[int] = 32

PIXEL_ON: Final[int] = 0xFF
PIXEL_OFF: Final[int] = 0x00


class Display:
    """Row-major cell buffer; each cell is either ``PIXEL_ON`` or ``PIXEL_OFF``."""

    def __init__(self, width: int = VIDEO_WIDTH, height: int = VIDEO_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("display dimensions must be positive")
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)
        self.dirty = True

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))
        self.dirty = True

    def is_set(self, x: int, y: int) -> bool:
        return self._cells[self._offset(x, y)] != PIXEL_OFF

    def set_pixel(self, x: int, y: int, on: bool) -> None:
        self._cells[self._offset(x, y)] = PIXEL_ON if on else PIXEL_OFF
        self.dirty = True

    def toggle(self, x: int, y: int) -> bool:
        """XOR the cell at ``(x, y)`` and return ``True`` if it was switched off."""

        offset = self._offset(x, y)
        was_on = self._cells[offset] != PIXEL_OFF
        self._cells[offset] = PIXEL_OFF if was_on else PIXEL_ON
        self.dirty = True
        return was_on

    def row(self, y: int) -> bytes:
        start = self._offset(0, y)
        return bytes(self._cells[start : start + self.width])

    def lit_count(self) -> int:
        return sum(1 for value in self._cells if value != PIXEL_OFF)

    def snapshot(self) -> bytes:
        return bytes(self._cells)

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} display")
        return y * self.width + x
