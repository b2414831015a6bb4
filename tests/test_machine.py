"""Tests for CHIP-8 machine assembly."""

from __future__ import annotations

from pychip8.cpu import TimerMode
from pychip8.system import MachineConfig, create_machine


def test_components_are_shared_with_cpu() -> None:
    machine = create_machine(MachineConfig())

    assert machine.cpu.memory is machine.memory
    assert machine.cpu.display is machine.display
    assert machine.cpu.keypad is machine.keypad
    assert machine.memory.load8(0x050) == 0xF0


def test_program_image_is_loaded() -> None:
    machine = create_machine(MachineConfig(program_image=bytes([0x61, 0x07, 0x71, 0x01])))

    machine.run_steps(2)

    assert machine.cpu.state.registers[1] == 0x08
    assert machine.cpu.state.pc == 0x204


def test_configuration_is_forwarded() -> None:
    machine = create_machine(
        MachineConfig(sprite_wrap=True, timer_mode=TimerMode.CLOCK, strict_illegal=True)
    )

    assert machine.cpu.sprite_wrap
    assert machine.cpu.timer_mode is TimerMode.CLOCK
    assert machine.cpu.strict_illegal


def test_seed_makes_random_reproducible() -> None:
    program = bytes([0xC0, 0xFF, 0xC1, 0xFF, 0xC2, 0xFF])
    first = create_machine(MachineConfig(program_image=program, seed=7))
    second = create_machine(MachineConfig(program_image=program, seed=7))

    first.run_steps(3)
    second.run_steps(3)

    assert bytes(first.cpu.state.registers[:3]) == bytes(second.cpu.state.registers[:3])


def test_keypad_drives_key_wait() -> None:
    machine = create_machine(MachineConfig(program_image=bytes([0xF5, 0x0A])))

    machine.run_steps(2)
    assert machine.cpu.state.pc == 0x200

    machine.keypad.press("f")
    machine.run_steps(1)

    assert machine.cpu.state.registers[5] == 0xE
    assert machine.cpu.state.pc == 0x202
