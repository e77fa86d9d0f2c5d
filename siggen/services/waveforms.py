"""
Waveform generators: one raw value in [-1, 1] per call to next().

- TableGenerator cycles over a fixed table (square, triangle, sawtooth).
- SineGenerator returns sin(phase) and then advances phase by a fixed step.

Generators are owned by the ticker; they are not thread-safe and do no I/O.
"""
import math
from typing import Protocol, Sequence

SQUARE: tuple[float, ...] = (1.0,) * 8 + (-1.0,) * 8

TRIANGLE: tuple[float, ...] = (
    -1.0, -0.75, -0.5, -0.25, 0.0, 0.25, 0.5, 0.75,
    1.0, 0.75, 0.5, 0.25, 0.0, -0.25, -0.5, -0.75,
)

SAWTOOTH: tuple[float, ...] = tuple(-1.0 + i * 0.125 for i in range(16))

TABLES: dict[str, tuple[float, ...]] = {
    "square": SQUARE,
    "triangle": TRIANGLE,
    "sawtooth": SAWTOOTH,
}


class Generator(Protocol):
    def next(self) -> float: ...


class TableGenerator:
    """Returns table[cursor], then moves the cursor on, wrapping to 0."""

    def __init__(self, table: Sequence[float]):
        if not table:
            raise ValueError("waveform table must not be empty")
        self._table = tuple(table)
        self._cursor = 0

    def next(self) -> float:
        value = self._table[self._cursor]
        self._cursor = (self._cursor + 1) % len(self._table)
        return value

    def reset(self) -> None:
        self._cursor = 0

    @property
    def cursor(self) -> int:
        return self._cursor


class SineGenerator:
    """
    Returns sin(phase), then adds step to phase.

    The phase is never reduced modulo 2*pi, so it grows without bound. The
    k-th call returns sin((k - 1) * step) exactly as a running sum would.
    """

    def __init__(self, step: float, phase: float = 0.0):
        self._step = step
        self._phase = phase

    def next(self) -> float:
        value = math.sin(self._phase)
        self._phase += self._step
        return value

    @property
    def phase(self) -> float:
        return self._phase


def make_generator(waveform: str, sine_step: float = math.pi / 8) -> Generator:
    """Build the generator for *waveform*; unknown names get a sine."""
    table = TABLES.get(waveform)
    if table is not None:
        return TableGenerator(table)
    return SineGenerator(step=sine_step)
