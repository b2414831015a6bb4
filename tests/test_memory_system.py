"""Tests for the 4 KiB CHIP-8 memory."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory, MemoryError


def test_memory_is_zeroed_and_fixed_size() -> None:
    memory = Memory()

    assert len(memory.snapshot()) == 4096
    assert memory.snapshot() == bytes(4096)


def test_memory_rejects_other_sizes() -> None:
    with pytest.raises(MemoryError):
        Memory(0x800)


def test_store_and_load_byte_masks_value() -> None:
    memory = Memory()

    memory.store8(0x300, 0x1FF)

    assert memory.load8(0x300) == 0xFF


def test_addresses_wrap_within_twelve_bits() -> None:
    memory = Memory()

    memory.store8(0x1005, 0x42)

    assert memory.load8(0x005) == 0x42
    assert memory.load8(0xF005) == 0x42


def test_load16_is_big_endian_and_wraps() -> None:
    memory = Memory()
    memory.store8(0xFFF, 0x12)
    memory.store8(0x000, 0x34)

    assert memory.load16(0xFFF) == 0x1234


def test_store_block_wraps_and_rejects_oversized_payload() -> None:
    memory = Memory()

    memory.store_block(0xFFE, b"\x01\x02\x03")
    assert memory.load_block(0xFFE, 3) == b"\x01\x02\x03"
    assert memory.load8(0x000) == 0x03

    with pytest.raises(MemoryError):
        memory.store_block(0x000, bytes(4097))


def test_clear() -> None:
    memory = Memory()
    memory.store8(0x10, 1)

    memory.clear()

    assert memory.snapshot() == bytes(4096)
