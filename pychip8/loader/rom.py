"""Raw ROM loader for CHIP-8 program images.

A CHIP-8 ROM has no header: the file contents are the program, placed at
0x200. The only structural check is the size limit of the program area.
"""

from __future__ import annotations

from pathlib import Path
from typing import BinaryIO

from pychip8.cpu import MAX_PROGRAM_SIZE, Interpreter, ProgramTooLargeError
from pychip8.utils import debug_enabled, debug_log

from .program import ProgramImage


class RomFormatError(RuntimeError):
    """Raised when a ROM image cannot be placed in memory."""


def load_rom(stream: BinaryIO, interpreter: Interpreter, *, name: str = "") -> ProgramImage:
    """Load a ROM image from ``stream`` into ``interpreter`` and return metadata."""

    # Read one byte past the limit so oversized images are detected without
    # slurping arbitrarily large files.
    payload = stream.read(MAX_PROGRAM_SIZE + 1)
    if payload is None:
        raise RomFormatError("ROM stream returned no data")
    try:
        length = interpreter.load_program(payload)
    except ProgramTooLargeError as exc:
        raise RomFormatError(f"ROM {name or '<stream>'} is too large: {exc}") from exc

    program = ProgramImage(name=name, length=length)
    if debug_enabled("loader"):
        debug_log("loader", "rom=%s start=%03x end=%03x", name or "<stream>", program.start, program.end)
    return program


def load_rom_from_path(path: Path, interpreter: Interpreter) -> ProgramImage:
    """Load a ROM image from the filesystem."""

    with path.open("rb") as handle:
        return load_rom(handle, interpreter, name=path.stem)
