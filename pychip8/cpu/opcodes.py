"""Opcode metadata and decoding for the CHIP-8 instruction set."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Final, Iterable, Sequence, Tuple


class Operation(Enum):
    """The 35 CHIP-8 behaviours; each value names its ``Interpreter`` handler."""

    CLS = "op_cls"
    RET = "op_ret"
    JP = "op_jp"
    CALL = "op_call"
    SE_VX_BYTE = "op_se_vx_byte"
    SNE_VX_BYTE = "op_sne_vx_byte"
    SE_VX_VY = "op_se_vx_vy"
    LD_VX_BYTE = "op_ld_vx_byte"
    ADD_VX_BYTE = "op_add_vx_byte"
    LD_VX_VY = "op_ld_vx_vy"
    OR = "op_or"
    AND = "op_and"
    XOR = "op_xor"
    ADD_VX_VY = "op_add_vx_vy"
    SUB = "op_sub"
    SHR = "op_shr"
    SUBN = "op_subn"
    SHL = "op_shl"
    SNE_VX_VY = "op_sne_vx_vy"
    LD_I = "op_ld_i"
    JP_V0 = "op_jp_v0"
    RND = "op_rnd"
    DRW = "op_drw"
    SKP = "op_skp"
    SKNP = "op_sknp"
    LD_VX_DT = "op_ld_vx_dt"
    LD_VX_K = "op_ld_vx_k"
    LD_DT_VX = "op_ld_dt_vx"
    LD_ST_VX = "op_ld_st_vx"
    ADD_I_VX = "op_add_i_vx"
    LD_F_VX = "op_ld_f_vx"
    LD_B_VX = "op_ld_b_vx"
    LD_MEM_VX = "op_ld_mem_vx"
    LD_VX_MEM = "op_ld_vx_mem"
    UNKNOWN = "op_unknown"

    @property
    def handler(self) -> str:
        return self.value


@dataclass(frozen=True)
class OpcodePattern:
    """A mask/match pair identifying one instruction form."""

    mask: int
    match: int
    operation: Operation
    mnemonic: str

    def __post_init__(self) -> None:
        if not 0 <= self.mask <= 0xFFFF or not 0 <= self.match <= 0xFFFF:
            raise ValueError(f"pattern out of range: {self.mask:#x}/{self.match:#x}")
        if self.match & ~self.mask:
            raise ValueError(f"match {self.match:#06x} has bits outside mask {self.mask:#06x}")


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit instruction word."""

    opcode: int
    operation: Operation
    mnemonic: str

    @property
    def family(self) -> int:
        return (self.opcode >> 12) & 0xF

    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.opcode & 0xF

    @property
    def nn(self) -> int:
        return self.opcode & 0xFF

    @property
    def nnn(self) -> int:
        return self.opcode & 0xFFF

    @property
    def is_unknown(self) -> bool:
        return self.operation is Operation.UNKNOWN


class OpcodeTable:
    """Mutable builder for the mask/match decode table."""

    # Most specific first so 00E0 wins over a family-wide pattern.
    _MASK_ORDER: Final[Tuple[int, ...]] = (0xFFFF, 0xF00F, 0xF0FF, 0xF000)

    def __init__(self) -> None:
        self._patterns: Dict[Tuple[int, int], OpcodePattern] = {}

    def register(self, pattern: OpcodePattern) -> None:
        if pattern.mask not in self._MASK_ORDER:
            raise ValueError(f"unsupported mask {pattern.mask:#06x} for {pattern.mnemonic}")
        key = (pattern.mask, pattern.match)
        existing = self._patterns.get(key)
        if existing is not None:
            raise ValueError(
                f"pattern {pattern.match:#06x}/{pattern.mask:#06x} already registered as {existing.mnemonic}")
        self._patterns[key] = pattern

    def register_all(self, patterns: Iterable[OpcodePattern]) -> None:
        for pattern in patterns:
            self.register(pattern)

    def freeze(self) -> "DecodeTable":
        return DecodeTable(dict(self._patterns), self._MASK_ORDER)


class DecodeTable:
    """Immutable lookup from opcode words to :class:`Instruction` values."""

    def __init__(self, patterns: Dict[Tuple[int, int], OpcodePattern], mask_order: Sequence[int]) -> None:
        self._patterns = patterns
        self._mask_order = tuple(mask_order)

    def __len__(self) -> int:
        return len(self._patterns)

    def patterns(self) -> Sequence[OpcodePattern]:
        return tuple(self._patterns.values())

    def decode(self, opcode: int) -> Instruction:
        opcode &= 0xFFFF
        for mask in self._mask_order:
            pattern = self._patterns.get((mask, opcode & mask))
            if pattern is not None:
                return Instruction(opcode, pattern.operation, pattern.mnemonic)
        return Instruction(opcode, Operation.UNKNOWN, f"??? {opcode:04X}")


def build_decode_table(patterns: Iterable[OpcodePattern]) -> DecodeTable:
    """Build a decode table, rejecting duplicate patterns."""

    table = OpcodeTable()
    table.register_all(patterns)
    return table.freeze()


DEFAULT_PATTERNS: Sequence[OpcodePattern] = (
    OpcodePattern(0xFFFF, 0x00E0, Operation.CLS, "CLS"),
    OpcodePattern(0xFFFF, 0x00EE, Operation.RET, "RET"),
    OpcodePattern(0xF000, 0x1000, Operation.JP, "JP addr"),
    OpcodePattern(0xF000, 0x2000, Operation.CALL, "CALL addr"),
    OpcodePattern(0xF000, 0x3000, Operation.SE_VX_BYTE, "SE Vx, byte"),
    OpcodePattern(0xF000, 0x4000, Operation.SNE_VX_BYTE, "SNE Vx, byte"),
    # 5xy_ and 9xy_ ignore the low nibble.
    OpcodePattern(0xF000, 0x5000, Operation.SE_VX_VY, "SE Vx, Vy"),
    OpcodePattern(0xF000, 0x6000, Operation.LD_VX_BYTE, "LD Vx, byte"),
    OpcodePattern(0xF000, 0x7000, Operation.ADD_VX_BYTE, "ADD Vx, byte"),
    OpcodePattern(0xF00F, 0x8000, Operation.LD_VX_VY, "LD Vx, Vy"),
    OpcodePattern(0xF00F, 0x8001, Operation.OR, "OR Vx, Vy"),
    OpcodePattern(0xF00F, 0x8002, Operation.AND, "AND Vx, Vy"),
    OpcodePattern(0xF00F, 0x8003, Operation.XOR, "XOR Vx, Vy"),
    OpcodePattern(0xF00F, 0x8004, Operation.ADD_VX_VY, "ADD Vx, Vy"),
    OpcodePattern(0xF00F, 0x8005, Operation.SUB, "SUB Vx, Vy"),
    OpcodePattern(0xF00F, 0x8006, Operation.SHR, "SHR Vx"),
    OpcodePattern(0xF00F, 0x8007, Operation.SUBN, "SUBN Vx, Vy"),
    OpcodePattern(0xF00F, 0x800E, Operation.SHL, "SHL Vx"),
    OpcodePattern(0xF000, 0x9000, Operation.SNE_VX_VY, "SNE Vx, Vy"),
    OpcodePattern(0xF000, 0xA000, Operation.LD_I, "LD I, addr"),
    OpcodePattern(0xF000, 0xB000, Operation.JP_V0, "JP V0, addr"),
    OpcodePattern(0xF000, 0xC000, Operation.RND, "RND Vx, byte"),
    OpcodePattern(0xF000, 0xD000, Operation.DRW, "DRW Vx, Vy, n"),
    OpcodePattern(0xF0FF, 0xE09E, Operation.SKP, "SKP Vx"),
    OpcodePattern(0xF0FF, 0xE0A1, Operation.SKNP, "SKNP Vx"),
    OpcodePattern(0xF0FF, 0xF007, Operation.LD_VX_DT, "LD Vx, DT"),
    OpcodePattern(0xF0FF, 0xF00A, Operation.LD_VX_K, "LD Vx, K"),
    OpcodePattern(0xF0FF, 0xF015, Operation.LD_DT_VX, "LD DT, Vx"),
    OpcodePattern(0xF0FF, 0xF018, Operation.LD_ST_VX, "LD ST, Vx"),
    OpcodePattern(0xF0FF, 0xF01E, Operation.ADD_I_VX, "ADD I, Vx"),
    OpcodePattern(0xF0FF, 0xF029, Operation.LD_F_VX, "LD F, Vx"),
    OpcodePattern(0xF0FF, 0xF033, Operation.LD_B_VX, "LD B, Vx"),
    OpcodePattern(0xF0FF, 0xF055, Operation.LD_MEM_VX, "LD [I], Vx"),
    OpcodePattern(0xF0FF, 0xF065, Operation.LD_VX_MEM, "LD Vx, [I]"),
)


DECODE_TABLE: DecodeTable = build_decode_table(DEFAULT_PATTERNS)


def decode(opcode: int) -> Instruction:
    """Decode ``opcode`` with the default CHIP-8 table."""

    return DECODE_TABLE.decode(opcode)
