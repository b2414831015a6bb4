"""Tests for the CHIP-8 keypad."""

from __future__ import annotations

import pytest

from pychip8.io import KEY_LAYOUT, Keypad


def test_layout_covers_all_sixteen_keys() -> None:
    assert sorted(KEY_LAYOUT.values()) == list(range(16))


def test_key_down_and_up() -> None:
    keypad = Keypad()

    assert keypad.press("q")
    assert keypad.is_pressed(0x4)

    keypad.release("q")
    assert not keypad.is_pressed(0x4)


def test_key_names_are_case_insensitive() -> None:
    keypad = Keypad()

    keypad.press("V")

    assert keypad.is_pressed(0xF)


def test_numpad_aliases_map_to_digits() -> None:
    keypad = Keypad()

    keypad.press("[4]")

    assert keypad.is_pressed(0xC)


def test_unmapped_key_is_ignored() -> None:
    keypad = Keypad()

    assert not keypad.press("space")
    assert not keypad.release("space")
    assert keypad.snapshot() == (False,) * 16


def test_repeated_press_needs_matching_releases() -> None:
    keypad = Keypad()
    keypad.press("x")
    keypad.press("x")

    keypad.release("x")
    assert keypad.is_pressed(0x0)

    keypad.release("x")
    assert not keypad.is_pressed(0x0)


def test_first_pressed_returns_lowest_code() -> None:
    keypad = Keypad()
    assert keypad.first_pressed() is None

    keypad.set_key(0xE, True)
    keypad.set_key(0x3, True)

    assert keypad.first_pressed() == 0x3


def test_update_writes_full_state() -> None:
    keypad = Keypad()
    states = [code % 2 == 1 for code in range(16)]

    keypad.update(states)

    assert keypad.snapshot() == tuple(states)


def test_update_rejects_wrong_length() -> None:
    with pytest.raises(ValueError):
        Keypad().update([True] * 15)


def test_set_key_rejects_out_of_range_code() -> None:
    with pytest.raises(ValueError):
        Keypad().set_key(16, True)


def test_is_pressed_uses_low_nibble() -> None:
    keypad = Keypad()
    keypad.set_key(0x2, True)

    assert keypad.is_pressed(0x12)


def test_reset_clears_state() -> None:
    keypad = Keypad()
    keypad.press("a")
    keypad.reset()

    assert keypad.snapshot() == (False,) * 16
