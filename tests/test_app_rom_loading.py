"""Chip8App ROM loading, scheduling and error handling without a window."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from pychip8.cpu import TimerMode
from pychip8.ui.app import AppConfig, Chip8App, _is_expose_event


def _write_rom(tmp_path, payload: bytes, name: str = "game.ch8"):
    rom_path = tmp_path / name
    rom_path.write_bytes(payload)
    return rom_path


def test_app_create_machine_loads_rom(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, bytes([0x6A, 0x42]))
    app = Chip8App(AppConfig(rom_path=rom_path, seed=3, sprite_wrap=True))

    machine = app._create_machine(rom_path)

    assert machine.memory.load16(0x200) == 0x6A42
    assert machine.cpu.sprite_wrap
    machine.cpu.step()
    assert machine.cpu.state.registers[0xA] == 0x42


def test_app_rejects_oversized_rom(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, bytes(4000))
    app = Chip8App(AppConfig(rom_path=rom_path))

    with pytest.raises(RuntimeError, match="Failed to load ROM"):
        app._create_machine(rom_path)


def test_app_reports_missing_rom(tmp_path) -> None:
    app = Chip8App(AppConfig())

    with pytest.raises(RuntimeError, match="not found"):
        app._create_machine(tmp_path / "missing.ch8")


def test_app_rejects_non_positive_scale() -> None:
    with pytest.raises(ValueError):
        Chip8App(AppConfig(scale=0))


def test_steps_due_accumulates_fractional_steps() -> None:
    app = Chip8App(AppConfig(delay_ms=2.0))

    assert app._steps_due(0.001) == 0
    assert app._steps_due(0.001) == 1
    assert app._steps_due(0.0105) == 5


def test_steps_due_caps_backlog() -> None:
    app = Chip8App(AppConfig(delay_ms=0.001))

    first = app._steps_due(10.0)
    second = app._steps_due(0.0)

    assert first == 10_000
    assert second == 0


def test_zero_delay_runs_at_cap() -> None:
    app = Chip8App(AppConfig(delay_ms=0.0))

    assert app._steps_due(0.0) == 10_000


def test_clock_timers_tick_at_sixty_hertz(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, bytes([0x12, 0x00]))
    app = Chip8App(AppConfig(rom_path=rom_path, timer_mode=TimerMode.CLOCK))
    machine = app._create_machine(rom_path)
    machine.cpu.state.delay_timer = 30

    ticks = app._tick_timers(machine, 0.25)

    assert ticks == 15
    assert machine.cpu.state.delay_timer == 15


def test_cycle_mode_ignores_wall_clock(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, bytes([0x12, 0x00]))
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    machine.cpu.state.delay_timer = 30

    assert app._tick_timers(machine, 1.0) == 0
    assert machine.cpu.state.delay_timer == 30


def test_step_cpu_converts_fatal_errors(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, bytes([0x00, 0xEE]))
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)

    with pytest.raises(RuntimeError, match="empty stack"):
        app._step_cpu(machine, 1)


def test_key_events_update_keypad(tmp_path) -> None:
    rom_path = _write_rom(tmp_path, bytes([0x12, 0x00]))
    app = Chip8App(AppConfig(rom_path=rom_path))
    machine = app._create_machine(rom_path)
    fake_pygame = SimpleNamespace(key=SimpleNamespace(name=lambda code: {1: "w", 2: "return"}[code]))

    app._handle_key_event(fake_pygame, 1, pressed=True)
    assert machine.keypad.is_pressed(0x5)

    app._handle_key_event(fake_pygame, 2, pressed=True)
    app._handle_key_event(fake_pygame, 1, pressed=False)
    assert machine.keypad.snapshot() == (False,) * 16


def test_window_expose_events_request_redraw() -> None:
    pygame2 = SimpleNamespace(WINDOWEXPOSED=0x8003, KEYDOWN=0x300)
    legacy = SimpleNamespace(VIDEOEXPOSE=17, KEYDOWN=2)

    assert _is_expose_event(pygame2, 0x8003)
    assert not _is_expose_event(pygame2, 0x300)
    assert _is_expose_event(legacy, 17)
    assert not _is_expose_event(legacy, 2)
