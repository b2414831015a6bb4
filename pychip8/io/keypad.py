"""CHIP-8 hexadecimal keypad handling."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Sequence

from pychip8.utils import debug_enabled, debug_log

KEY_COUNT = 16


# Host keyboard layout; the left 4x4 block of a QWERTY board mirrors the
# COSMAC VIP keypad:
#   1 2 3 4      1 2 3 C
#   q w e r  ->  4 5 6 D
#   a s d f      7 8 9 E
#   z x c v      A 0 B F
KEY_LAYOUT: Mapping[str, int] = {
    "x": 0x0,
    "1": 0x1,
    "2": 0x2,
    "3": 0x3,
    "q": 0x4,
    "w": 0x5,
    "e": 0x6,
    "a": 0x7,
    "s": 0x8,
    "d": 0x9,
    "z": 0xA,
    "c": 0xB,
    "4": 0xC,
    "r": 0xD,
    "f": 0xE,
    "v": 0xF,
}


ALIAS_TABLE: Mapping[str, str] = {
    "[1]": "1",
    "[2]": "2",
    "[3]": "3",
    "[4]": "4",
}


@dataclass
class Keypad:
    """Pressed state of the sixteen hexadecimal keys."""

    _pressed: list[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    _active: Dict[int, int] = field(default_factory=dict)

    def press(self, key_name: str) -> bool:
        """Press the hex key bound to host key ``key_name``; return ``False`` if unbound."""

        code = self.lookup(key_name)
        if code is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_press=%s", key_name)
            return False
        self._active[code] = self._active.get(code, 0) + 1
        self._apply(code, True)
        return True

    def release(self, key_name: str) -> bool:
        code = self.lookup(key_name)
        if code is None:
            if debug_enabled("input"):
                debug_log("input", "unmapped_release=%s", key_name)
            return False
        count = self._active.get(code, 0)
        if count <= 1:
            self._active.pop(code, None)
            self._apply(code, False)
        else:
            self._active[code] = count - 1
        return True

    def set_key(self, code: int, pressed: bool) -> None:
        """Write the state of hex key ``code`` directly, bypassing the host layout."""

        self._require_code(code)
        if not pressed:
            self._active.pop(code, None)
        self._apply(code, pressed)

    def update(self, states: Sequence[bool]) -> None:
        if len(states) != KEY_COUNT:
            raise ValueError(f"keypad state must have {KEY_COUNT} entries, got {len(states)}")
        for code, pressed in enumerate(states):
            self.set_key(code, bool(pressed))

    def is_pressed(self, code: int) -> bool:
        # Register values above 0xF select keys by their low nibble.
        return self._pressed[code & 0x0F]

    def first_pressed(self) -> int | None:
        for code, pressed in enumerate(self._pressed):
            if pressed:
                return code
        return None

    def reset(self) -> None:
        self._pressed[:] = [False] * KEY_COUNT
        self._active.clear()

    def snapshot(self) -> tuple[bool, ...]:
        return tuple(self._pressed)

    def lookup(self, key_name: str) -> int | None:
        name = key_name.lower()
        name = ALIAS_TABLE.get(name, name)
        return KEY_LAYOUT.get(name)

    def _apply(self, code: int, pressed: bool) -> None:
        if self._pressed[code] == pressed:
            return
        self._pressed[code] = pressed
        if debug_enabled("input"):
            debug_log("input", "keypad key=%X pressed=%s", code, pressed)

    @staticmethod
    def _require_code(code: int) -> None:
        if not 0 <= code < KEY_COUNT:
            raise ValueError(f"key code out of range: {code}")
