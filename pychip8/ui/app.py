"""Pygame front-end for the CHIP-8 interpreter."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pychip8.audio import SquareWaveBeeper
from pychip8.cpu import CPUError, TimerMode
from pychip8.loader import ProgramImage, RomFormatError, load_rom_from_path
from pychip8.system import Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import Renderer


@dataclass
class AppConfig:
    """Configuration for the CHIP-8 front-end."""

    rom_path: Optional[Path] = None
    scale: int = 10
    delay_ms: float = 1.0
    fullscreen: bool = False
    timer_mode: TimerMode = TimerMode.CYCLE
    sprite_wrap: bool = False
    seed: Optional[int] = None


class Chip8App:
    """Thin wrapper around the Pygame event loop."""

    def __init__(self, config: AppConfig) -> None:
        if config.scale <= 0:
            raise ValueError("scale must be positive")
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._program: ProgramImage | None = None
        self._beeper: SquareWaveBeeper | None = None
        self._pygame = None
        self._step_budget = 0.0
        self._timer_budget = 0.0
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._trace_recorder: TraceRecorder | None = None
        if debug_enabled("trace"):
            self._trace_recorder = TraceRecorder(512)

    @property
    def trace_recorder(self) -> TraceRecorder | None:
        return self._trace_recorder

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        if self._config.rom_path is None:
            raise RuntimeError("a ROM path is required")
        machine = self._create_machine(self._config.rom_path)

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        title = "CHIP-8 Emulator (Python)"
        if self._program is not None and self._program.name:
            title = f"{title} - {self._program.name}"
        pygame.display.set_caption(title)
        self._pygame = pygame
        self._initialise_audio(pygame)

        renderer = Renderer()
        surface_size = (machine.display.width * self._config.scale, machine.display.height * self._config.scale)
        flags = pygame.FULLSCREEN if self._config.fullscreen else 0
        screen = pygame.display.set_mode(surface_size, flags)

        clock = pygame.time.Clock()
        self._running = True
        last_time = time.perf_counter()

        try:
            while self._running:
                exposed = False
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                        self._running = False
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)
                    elif _is_expose_event(pygame, event.type):
                        exposed = True

                now = time.perf_counter()
                elapsed = now - last_time
                last_time = now

                steps = self._steps_due(elapsed)
                self._step_cpu(machine, steps)
                self._tick_timers(machine, elapsed)

                if self._beeper is not None:
                    self._beeper.set_state(machine.cpu.sound_active)

                if machine.display.dirty or exposed:
                    frame = renderer.render(machine.display, scale=self._config.scale)
                    screen.blit(frame.to_surface(), (0, 0))
                    pygame.display.flip()

                if self._perf_enabled and elapsed > 0:
                    self._perf_frame += 1
                    debug_log(
                        "perf",
                        "frame=%d steps=%d frame_ms=%.3f steps_per_sec=%.1f",
                        self._perf_frame,
                        steps,
                        elapsed * 1000.0,
                        steps / elapsed,
                    )

                clock.tick(_FRAME_RATE)
        finally:
            if self._beeper is not None:
                self._beeper.shutdown()
            pygame.quit()

    def _initialise_audio(self, pygame) -> None:
        # Audio is optional; without a mixer the interpreter runs silently.
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(44_100, -16, 1)
            sample_rate = pygame.mixer.get_init()[0]
            self._beeper = SquareWaveBeeper(sample_rate=sample_rate)
        except (pygame.error, RuntimeError, TypeError) as exc:
            self._beeper = None
            debug_log("audio", "beeper unavailable: %s", exc)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        machine = self._machine
        if machine is None:
            return
        name = pygame.key.name(key_code)
        if debug_enabled("input"):
            debug_log("input", "event=%s pressed=%s", name, pressed)
        if pressed:
            machine.keypad.press(name)
        else:
            machine.keypad.release(name)

    def _create_machine(self, rom_path: Path) -> Machine:
        machine = create_machine(
            MachineConfig(
                sprite_wrap=self._config.sprite_wrap,
                timer_mode=self._config.timer_mode,
                seed=self._config.seed,
            )
        )
        try:
            self._program = load_rom_from_path(rom_path, machine.cpu)
        except FileNotFoundError as exc:
            raise RuntimeError(f"ROM file not found: {rom_path}") from exc
        except RomFormatError as exc:
            raise RuntimeError(f"Failed to load ROM {rom_path}: {exc}") from exc
        self._machine = machine
        return machine

    # ------------------------------------------------------------------
    # Scheduling

    def _steps_due(self, elapsed: float) -> int:
        """Return how many instructions to run for ``elapsed`` seconds of wall time."""

        delay = self._config.delay_ms / 1000.0
        if delay <= 0:
            return _MAX_STEPS_PER_FRAME
        self._step_budget += elapsed / delay
        steps = int(self._step_budget)
        self._step_budget -= steps
        if steps > _MAX_STEPS_PER_FRAME:
            # Drop the backlog after a stall instead of fast-forwarding.
            steps = _MAX_STEPS_PER_FRAME
            self._step_budget = 0.0
        return steps

    def _tick_timers(self, machine: Machine, elapsed: float) -> int:
        if self._config.timer_mode is not TimerMode.CLOCK:
            return 0
        self._timer_budget += elapsed * _TIMER_RATE
        ticks = int(self._timer_budget)
        self._timer_budget -= ticks
        for _ in range(min(ticks, _TIMER_RATE)):
            machine.cpu.tick_timers()
        return ticks

    def _step_cpu(self, machine: Machine, steps: int) -> None:
        cpu = machine.cpu
        trace = self._trace_recorder

        try:
            for _ in range(steps):
                state_before = cpu.state.clone() if trace is not None else None
                instruction = cpu.step()
                if trace is not None and state_before is not None:
                    trace.record_step(
                        state_before,
                        instruction.opcode,
                        mnemonic=instruction.mnemonic,
                        note="unknown" if instruction.is_unknown else "",
                    )
        except CPUError as exc:
            self._running = False
            if trace is not None:
                trace.dump("trace", limit=64)
            raise RuntimeError(f"Interpreter stopped: {exc}") from exc


_FRAME_RATE = 60
_TIMER_RATE = 60
_MAX_STEPS_PER_FRAME = 10_000


def _is_expose_event(pygame, event_type: int) -> bool:
    """Return whether ``event_type`` means the window contents were lost."""

    # WINDOWEXPOSED is pygame 2's event; VIDEOEXPOSE is the SDL1-era one.
    for name in ("WINDOWEXPOSED", "VIDEOEXPOSE"):
        value = getattr(pygame, name, None)
        if value is not None and event_type == value:
            return True
    return False
