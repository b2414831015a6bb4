"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import ADDRESS_MASK, ADDRESS_SPACE, Memory, MemoryError

__all__ = [
    "ADDRESS_MASK",
    "ADDRESS_SPACE",
    "Memory",
    "MemoryError",
]
