"""Python CHIP-8 interpreter.

The core lives in :mod:`pychip8.cpu`; the remaining packages are the host
glue (memory, video, input, audio, loading and the pygame front-end).
"""

from __future__ import annotations

from . import audio, bus, cpu, io, loader, system, ui, utils, video

__all__: list[str] = [
    "cpu",
    "bus",
    "video",
    "audio",
    "io",
    "loader",
    "system",
    "ui",
    "utils",
]
