"""CHIP-8 interpreter: machine state and the fetch-decode-execute cycle."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum

from pychip8.bus import ADDRESS_SPACE, Memory
from pychip8.io import Keypad
from pychip8.utils import debug_enabled, debug_log
from pychip8.video import FONT_START_ADDRESS, FONTSET, Display, glyph_address

from .opcodes import DECODE_TABLE, DecodeTable, Instruction


class CPUError(Exception):
    """Base error for interpreter failures."""


class ProgramTooLargeError(CPUError):
    """Raised when a program image does not fit above the start address."""


class StackOverflowError(CPUError):
    """Raised when CALL is executed with every stack level in use."""


class StackUnderflowError(CPUError):
    """Raised when RET is executed with an empty stack."""


class IllegalOpcodeError(CPUError):
    """Raised for unknown opcodes when the interpreter runs in strict mode."""


START_ADDRESS = 0x200
MAX_PROGRAM_SIZE = ADDRESS_SPACE - START_ADDRESS
REGISTER_COUNT = 16
STACK_LEVELS = 16
FLAG_REGISTER = 0xF
SPRITE_WIDTH = 8


class TimerMode(Enum):
    """How the delay and sound timers are driven."""

    CYCLE = "cycle"  # decremented once per executed step
    CLOCK = "clock"  # decremented by the host through ``tick_timers`` at 60 Hz


@dataclass
class CPUState:
    """Snapshot of the CHIP-8 register file."""

    registers: bytearray = field(default_factory=lambda: bytearray(REGISTER_COUNT))
    index: int = 0x000
    pc: int = START_ADDRESS
    stack: list[int] = field(default_factory=lambda: [0] * STACK_LEVELS)
    sp: int = 0
    delay_timer: int = 0
    sound_timer: int = 0

    def clone(self) -> "CPUState":
        return CPUState(
            bytearray(self.registers),
            self.index,
            self.pc,
            list(self.stack),
            self.sp,
            self.delay_timer,
            self.sound_timer,
        )


@dataclass
class Interpreter:
    """The CHIP-8 virtual machine.

    The host loads a program once, writes the keypad, calls :meth:`step`
    and reads the display back. All memory accesses wrap within the 12-bit
    address space; stack misuse is fatal and raises a :class:`CPUError`.
    """

    memory: Memory = field(default_factory=Memory)
    display: Display = field(default_factory=Display)
    keypad: Keypad = field(default_factory=Keypad)
    rng: random.Random = field(default_factory=random.Random)
    decode_table: DecodeTable = field(default=DECODE_TABLE)
    sprite_wrap: bool = False
    timer_mode: TimerMode = TimerMode.CYCLE
    strict_illegal: bool = False

    state: CPUState = field(default_factory=CPUState)
    cycle_count: int = 0
    illegal_count: int = 0
    last_illegal: tuple[int, int] | None = None

    def __post_init__(self) -> None:
        self._install_font()

    def reset(self) -> None:
        """Reset registers, timers and the display; the loaded program is kept."""

        self.state = CPUState()
        self.cycle_count = 0
        self.illegal_count = 0
        self.last_illegal = None
        self.display.clear()
        self.keypad.reset()
        self._install_font()

    def load_program(self, image: bytes | bytearray | memoryview) -> int:
        """Copy ``image`` verbatim to ``START_ADDRESS`` and return its length.

        The rest of the program area is zeroed, so an earlier image leaves no
        bytes behind.
        """

        data = bytes(image)
        if len(data) > MAX_PROGRAM_SIZE:
            raise ProgramTooLargeError(
                f"program is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} fit at {START_ADDRESS:#05x}")
        self.memory.store_block(START_ADDRESS, data + bytes(MAX_PROGRAM_SIZE - len(data)))
        if debug_enabled("cpu"):
            debug_log("cpu", "loaded program length=%d", len(data))
        return len(data)

    def step(self) -> Instruction:
        """Execute a single instruction and return it."""

        state = self.state
        pc_before = state.pc
        opcode = self._fetch_word()
        instruction = self.decode_table.decode(opcode)
        if debug_enabled("cpu"):
            debug_log("cpu", "pc=%04x opcode=%04x %s", pc_before, opcode, instruction.mnemonic)

        handler = getattr(self, instruction.operation.handler, None)
        if handler is None:
            raise CPUError(f"handler '{instruction.operation.handler}' not implemented")
        handler(instruction)

        if self.timer_mode is TimerMode.CYCLE:
            self.tick_timers()
        self.cycle_count += 1
        return instruction

    def tick_timers(self) -> None:
        """Decrement both timers toward zero."""

        state = self.state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    @property
    def sound_active(self) -> bool:
        return self.state.sound_timer > 0

    # ------------------------------------------------------------------
    # Instruction handlers

    def op_unknown(self, instruction: Instruction) -> None:
        address = (self.state.pc - 2) & 0xFFFF
        self.illegal_count += 1
        self.last_illegal = (address, instruction.opcode)
        if self.strict_illegal:
            raise IllegalOpcodeError(f"illegal opcode {instruction.opcode:#06x} at {address:#05x}")
        if debug_enabled("cpu"):
            debug_log("cpu", "ignored unknown opcode=%04x pc=%04x", instruction.opcode, address)

    def op_cls(self, _: Instruction) -> None:
        self.display.clear()

    def op_ret(self, _: Instruction) -> None:
        state = self.state
        if state.sp == 0:
            raise StackUnderflowError(f"RET with empty stack at {(state.pc - 2) & 0xFFFF:#05x}")
        state.sp -= 1
        state.pc = state.stack[state.sp]

    def op_jp(self, instruction: Instruction) -> None:
        self.state.pc = instruction.nnn

    def op_call(self, instruction: Instruction) -> None:
        state = self.state
        if state.sp >= STACK_LEVELS:
            raise StackOverflowError(
                f"CALL {instruction.nnn:#05x} with {STACK_LEVELS} levels in use at {(state.pc - 2) & 0xFFFF:#05x}")
        state.stack[state.sp] = state.pc
        state.sp += 1
        state.pc = instruction.nnn

    def op_se_vx_byte(self, instruction: Instruction) -> None:
        if self.state.registers[instruction.x] == instruction.nn:
            self._skip()

    def op_sne_vx_byte(self, instruction: Instruction) -> None:
        if self.state.registers[instruction.x] != instruction.nn:
            self._skip()

    def op_se_vx_vy(self, instruction: Instruction) -> None:
        registers = self.state.registers
        if registers[instruction.x] == registers[instruction.y]:
            self._skip()

    def op_ld_vx_byte(self, instruction: Instruction) -> None:
        self.state.registers[instruction.x] = instruction.nn

    def op_add_vx_byte(self, instruction: Instruction) -> None:
        registers = self.state.registers
        registers[instruction.x] = (registers[instruction.x] + instruction.nn) & 0xFF

    def op_ld_vx_vy(self, instruction: Instruction) -> None:
        registers = self.state.registers
        registers[instruction.x] = registers[instruction.y]

    def op_or(self, instruction: Instruction) -> None:
        registers = self.state.registers
        registers[instruction.x] |= registers[instruction.y]

    def op_and(self, instruction: Instruction) -> None:
        registers = self.state.registers
        registers[instruction.x] &= registers[instruction.y]

    def op_xor(self, instruction: Instruction) -> None:
        registers = self.state.registers
        registers[instruction.x] ^= registers[instruction.y]

    # The flag is written before the result so that VF as destination keeps the result.

    def op_add_vx_vy(self, instruction: Instruction) -> None:
        registers = self.state.registers
        total = registers[instruction.x] + registers[instruction.y]
        registers[FLAG_REGISTER] = 1 if total > 0xFF else 0
        registers[instruction.x] = total & 0xFF

    def op_sub(self, instruction: Instruction) -> None:
        registers = self.state.registers
        vx = registers[instruction.x]
        vy = registers[instruction.y]
        registers[FLAG_REGISTER] = 1 if vx > vy else 0
        registers[instruction.x] = (vx - vy) & 0xFF

    def op_shr(self, instruction: Instruction) -> None:
        registers = self.state.registers
        vx = registers[instruction.x]
        registers[FLAG_REGISTER] = vx & 0x01
        registers[instruction.x] = vx >> 1

    def op_subn(self, instruction: Instruction) -> None:
        registers = self.state.registers
        vx = registers[instruction.x]
        vy = registers[instruction.y]
        registers[FLAG_REGISTER] = 1 if vy > vx else 0
        registers[instruction.x] = (vy - vx) & 0xFF

    def op_shl(self, instruction: Instruction) -> None:
        registers = self.state.registers
        vx = registers[instruction.x]
        registers[FLAG_REGISTER] = (vx >> 7) & 0x01
        registers[instruction.x] = (vx << 1) & 0xFF

    def op_sne_vx_vy(self, instruction: Instruction) -> None:
        registers = self.state.registers
        if registers[instruction.x] != registers[instruction.y]:
            self._skip()

    def op_ld_i(self, instruction: Instruction) -> None:
        self.state.index = instruction.nnn

    def op_jp_v0(self, instruction: Instruction) -> None:
        self.state.pc = (self.state.registers[0] + instruction.nnn) & 0xFFFF

    def op_rnd(self, instruction: Instruction) -> None:
        self.state.registers[instruction.x] = self.rng.randrange(0x100) & instruction.nn

    def op_drw(self, instruction: Instruction) -> None:
        state = self.state
        registers = state.registers
        display = self.display
        width = display.width
        height = display.height
        origin_x = registers[instruction.x] % width
        origin_y = registers[instruction.y] % height
        registers[FLAG_REGISTER] = 0

        collision = False
        for row in range(instruction.n):
            y = origin_y + row
            if y >= height:
                if not self.sprite_wrap:
                    break
                y %= height
            sprite = self.memory.load8(state.index + row)
            for column in range(SPRITE_WIDTH):
                if not sprite & (0x80 >> column):
                    continue
                x = origin_x + column
                if x >= width:
                    if not self.sprite_wrap:
                        break
                    x %= width
                if display.toggle(x, y):
                    collision = True

        registers[FLAG_REGISTER] = 1 if collision else 0

    def op_skp(self, instruction: Instruction) -> None:
        if self.keypad.is_pressed(self.state.registers[instruction.x]):
            self._skip()

    def op_sknp(self, instruction: Instruction) -> None:
        if not self.keypad.is_pressed(self.state.registers[instruction.x]):
            self._skip()

    def op_ld_vx_dt(self, instruction: Instruction) -> None:
        self.state.registers[instruction.x] = self.state.delay_timer

    def op_ld_vx_k(self, instruction: Instruction) -> None:
        key = self.keypad.first_pressed()
        if key is None:
            # Re-fetch this instruction on the next step until a key is down.
            self.state.pc = (self.state.pc - 2) & 0xFFFF
            return
        self.state.registers[instruction.x] = key

    def op_ld_dt_vx(self, instruction: Instruction) -> None:
        self.state.delay_timer = self.state.registers[instruction.x]

    def op_ld_st_vx(self, instruction: Instruction) -> None:
        self.state.sound_timer = self.state.registers[instruction.x]

    def op_add_i_vx(self, instruction: Instruction) -> None:
        state = self.state
        state.index = (state.index + state.registers[instruction.x]) & 0xFFFF

    def op_ld_f_vx(self, instruction: Instruction) -> None:
        self.state.index = glyph_address(self.state.registers[instruction.x])

    def op_ld_b_vx(self, instruction: Instruction) -> None:
        state = self.state
        value = state.registers[instruction.x]
        self.memory.store8(state.index, value // 100)
        self.memory.store8(state.index + 1, (value // 10) % 10)
        self.memory.store8(state.index + 2, value % 10)

    def op_ld_mem_vx(self, instruction: Instruction) -> None:
        state = self.state
        for offset in range(instruction.x + 1):
            self.memory.store8(state.index + offset, state.registers[offset])

    def op_ld_vx_mem(self, instruction: Instruction) -> None:
        state = self.state
        for offset in range(instruction.x + 1):
            state.registers[offset] = self.memory.load8(state.index + offset)

    # ------------------------------------------------------------------
    # Helpers

    def _fetch_word(self) -> int:
        opcode = self.memory.load16(self.state.pc)
        self.state.pc = (self.state.pc + 2) & 0xFFFF
        return opcode

    def _skip(self) -> None:
        self.state.pc = (self.state.pc + 2) & 0xFFFF

    def _install_font(self) -> None:
        self.memory.store_block(FONT_START_ADDRESS, FONTSET)
