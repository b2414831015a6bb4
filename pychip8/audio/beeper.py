"""Buzzer for the CHIP-8 sound timer.

CHIP-8 has a single tone that sounds for as long as ST is non-zero. The
beeper pre-renders one period of a square wave and lets the mixer loop it.
"""

from __future__ import annotations

from array import array

DEFAULT_FREQUENCY = 440.0
_AMPLITUDE = 12_000


class SquareWaveBeeper:
    """Start or stop a looping tone on pygame's mixer."""

    def __init__(
        self,
        *,
        sample_rate: int = 44_100,
        frequency: float = DEFAULT_FREQUENCY,
        volume: float = 0.25,
    ) -> None:
        if frequency <= 0.0:
            raise ValueError("frequency must be positive")
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc
        if not pygame.mixer.get_init():
            raise RuntimeError("initialise pygame.mixer before creating a SquareWaveBeeper")

        samples = square_wave(max(1, sample_rate), frequency)
        try:
            self._tone = pygame.mixer.Sound(buffer=samples.tobytes())
        except pygame.error as exc:  # pragma: no cover - pygame error path
            raise RuntimeError(f"cannot create beeper tone: {exc}") from exc
        self._tone.set_volume(max(0.0, min(1.0, volume)))
        self._channel = None

    @property
    def playing(self) -> bool:
        return self._channel is not None

    def set_state(self, enabled: bool) -> None:
        """Sound the tone while ``enabled`` is true."""

        if enabled and self._channel is None:
            self._channel = self._tone.play(loops=-1)
        elif not enabled and self._channel is not None:
            self._channel.stop()
            self._channel = None

    def shutdown(self) -> None:
        self.set_state(False)


def square_wave(sample_rate: int, frequency: float) -> array:
    """Return one period of a signed 16-bit square wave."""

    period = max(2, round(sample_rate / frequency))
    high = period // 2
    return array("h", [_AMPLITUDE] * high + [-_AMPLITUDE] * (period - high))


__all__ = ["SquareWaveBeeper", "DEFAULT_FREQUENCY", "square_wave"]
