"""Rolling record of executed instructions, dumped when the interpreter stops."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import islice
from typing import Deque, Iterator, List

from .debug import debug_log


@dataclass(frozen=True)
class TraceEntry:
    """Register file as it was just before ``opcode`` executed."""

    pc: int
    opcode: int | None
    mnemonic: str
    registers: bytes
    index: int
    sp: int
    delay_timer: int
    sound_timer: int
    note: str = ""

    @classmethod
    def capture(cls, cpu_state, opcode: int | None, mnemonic: str = "", note: str = "") -> "TraceEntry":
        return cls(
            pc=cpu_state.pc & 0xFFFF,
            opcode=None if opcode is None else opcode & 0xFFFF,
            mnemonic=mnemonic,
            registers=bytes(cpu_state.registers),
            index=cpu_state.index & 0xFFFF,
            sp=cpu_state.sp & 0xFF,
            delay_timer=cpu_state.delay_timer & 0xFF,
            sound_timer=cpu_state.sound_timer & 0xFF,
            note=note,
        )

    def format(self) -> str:
        opcode = "----" if self.opcode is None else f"{self.opcode:04X}"
        registers = " ".join(f"{value:02X}" for value in self.registers)
        return (
            f"pc={self.pc:04X} opcode={opcode} {self.mnemonic or '?':<16} V={registers} "
            f"I={self.index:04X} SP={self.sp:02X} DT={self.delay_timer:02X} ST={self.sound_timer:02X} "
            f"note={self.note or '-'}"
        )


class TraceRecorder:
    """Keeps the most recent ``capacity`` trace entries, oldest first."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._entries: Deque[TraceEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._entries)

    def record_step(self, cpu_state, opcode: int | None, *, mnemonic: str = "", note: str = "") -> None:
        self._entries.append(TraceEntry.capture(cpu_state, opcode, mnemonic, note))

    def entries(self, limit: int | None = None) -> Iterator[TraceEntry]:
        """Yield entries oldest first; ``limit`` keeps only the newest ones."""

        skip = 0 if limit is None else max(len(self._entries) - max(limit, 0), 0)
        return islice(self._entries, skip, None)

    def last_entry(self) -> TraceEntry | None:
        return self._entries[-1] if self._entries else None

    def format_entries(self, limit: int | None = None) -> List[str]:
        return [entry.format() for entry in self.entries(limit)]

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)
