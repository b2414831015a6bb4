"""CHIP-8 machine assembly."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Optional

from pychip8.bus import Memory
from pychip8.cpu import Interpreter, TimerMode
from pychip8.io import Keypad
from pychip8.video import Display


@dataclass
class MachineConfig:
    """Runtime configuration for the CHIP-8 machine."""

    program_image: Optional[bytes] = None
    sprite_wrap: bool = False
    timer_mode: TimerMode = TimerMode.CYCLE
    seed: Optional[int] = None
    strict_illegal: bool = False


@dataclass
class Machine:
    """Aggregates the components of a CHIP-8 machine."""

    cpu: Interpreter
    memory: Memory
    display: Display
    keypad: Keypad

    def run_steps(self, count: int) -> None:
        for _ in range(count):
            self.cpu.step()


def create_machine(config: MachineConfig) -> Machine:
    """Instantiate a CHIP-8 machine with the requested configuration."""

    memory = Memory()
    display = Display()
    keypad = Keypad()
    rng = random.Random(config.seed)

    cpu = Interpreter(
        memory=memory,
        display=display,
        keypad=keypad,
        rng=rng,
        sprite_wrap=config.sprite_wrap,
        timer_mode=config.timer_mode,
        strict_illegal=config.strict_illegal,
    )
    if config.program_image is not None:
        cpu.load_program(config.program_image)

    return Machine(
        cpu=cpu,
        memory=memory,
        display=display,
        keypad=keypad,
    )
