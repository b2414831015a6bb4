"""Program metadata structures for CHIP-8 loaders."""

from __future__ import annotations

from dataclasses import dataclass

from pychip8.cpu import START_ADDRESS


@dataclass
class ProgramImage:
    """Describes a raw program image placed in memory."""

    name: str = ""
    start: int = START_ADDRESS
    length: int = 0

    @property
    def end(self) -> int:
        """Last address written (inclusive); ``start - 1`` for an empty image."""

        return self.start + self.length - 1

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end
