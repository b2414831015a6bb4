"""CPU package for the CHIP-8 interpreter."""

from .core import (
    MAX_PROGRAM_SIZE,
    START_ADDRESS,
    CPUError,
    CPUState,
    IllegalOpcodeError,
    Interpreter,
    ProgramTooLargeError,
    StackOverflowError,
    StackUnderflowError,
    TimerMode,
)
from .opcodes import Instruction, Operation, decode
from . import opcodes

__all__ = [
    "Interpreter",
    "CPUState",
    "CPUError",
    "IllegalOpcodeError",
    "ProgramTooLargeError",
    "StackOverflowError",
    "StackUnderflowError",
    "TimerMode",
    "Instruction",
    "Operation",
    "decode",
    "opcodes",
    "START_ADDRESS",
    "MAX_PROGRAM_SIZE",
]
