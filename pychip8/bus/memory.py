"""Memory for the CHIP-8 interpreter.

The CHIP-8 address space is a flat 4 KiB of RAM. Every access is masked to
12 bits, so computed addresses that run past 0xFFF wrap back to 0x000 instead
of reaching outside the buffer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

ADDRESS_SPACE = 0x1000
ADDRESS_MASK = ADDRESS_SPACE - 1


def _mask12(value: int) -> int:
    """Clamp ``value`` to the 12-bit address space of the CHIP-8."""

    return value & ADDRESS_MASK


class MemoryError(Exception):
    """Raised when the memory is used incorrectly."""


@dataclass
class Memory:
    """Byte-addressable 4 KiB RAM with wrapping addresses."""

    length: int = ADDRESS_SPACE

    def __post_init__(self) -> None:
        if self.length != ADDRESS_SPACE:
            raise MemoryError(f"CHIP-8 memory must be exactly {ADDRESS_SPACE} bytes, got {self.length}")
        self._data = bytearray(self.length)

    def load8(self, address: int) -> int:
        return self._data[_mask12(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[_mask12(address)] = value & 0xFF

    def load16(self, address: int) -> int:
        high = self.load8(address)
        low = self.load8(address + 1)
        return (high << 8) | low

    def store_block(self, start: int, payload: Iterable[int]) -> None:
        """Write ``payload`` starting at ``start``, wrapping at the end of RAM."""

        data = bytes(payload)
        if len(data) > self.length:
            raise MemoryError(f"block of {len(data)} bytes exceeds the {self.length}-byte address space")
        for offset, value in enumerate(data):
            self.store8(start + offset, value)

    def load_block(self, start: int, length: int) -> bytes:
        return bytes(self.load8(start + offset) for offset in range(length))

    def clear(self) -> None:
        self._data[:] = bytes(self.length)

    def snapshot(self) -> bytes:
        return bytes(self._data)
