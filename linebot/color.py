"""RGB color sensor with white/black normalization and target colors."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from .board import (
    COLOR_OE,
    COLOR_OUT,
    COLOR_S0,
    COLOR_S1,
    COLOR_S2,
    COLOR_S3,
    Board,
    Level,
    PinMode,
)

_SETTLE_US = 100

# Filter selection (S2, S3) for each channel, in read order.
_FILTERS = (
    (Level.LOW, Level.LOW),    # red
    (Level.HIGH, Level.HIGH),  # green
    (Level.LOW, Level.HIGH),   # blue
)


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass(frozen=True)
class ColorRaw:
    r: int = 0
    g: int = 0
    b: int = 0


@dataclass
class ColorCal:
    white: ColorRaw = field(default_factory=ColorRaw)
    black: ColorRaw = field(default_factory=ColorRaw)


@dataclass(frozen=True)
class ColorValue:
    r: float = 0.0
    g: float = 0.0
    b: float = 0.0

    def distance(self, other: ColorValue) -> float:
        """Euclidean distance in normalized RGB space."""
        return math.dist((self.r, self.g, self.b), (other.r, other.g, other.b))


WHITE = ColorValue(1.0, 1.0, 1.0)


@dataclass
class ColorTargets:
    cardboard: ColorValue = field(default_factory=ColorValue)
    black: ColorValue = field(default_factory=ColorValue)
    red: ColorValue = field(default_factory=ColorValue)
    blue: ColorValue = field(default_factory=ColorValue)
    green: ColorValue = field(default_factory=ColorValue)


class ColorSensor:
    """Reads pulse widths per color filter and normalizes them to 0..1."""

    def __init__(
        self,
        board: Board,
        cal: ColorCal | None = None,
        targets: ColorTargets | None = None,
    ) -> None:
        self.board = board
        self.cal = cal if cal is not None else ColorCal()
        self.targets = targets if targets is not None else ColorTargets()

    def init(self) -> None:
        for pin in (COLOR_S0, COLOR_S1, COLOR_S2, COLOR_S3, COLOR_OE):
            self.board.pin_mode(pin, PinMode.OUTPUT)
        self.board.pin_mode(COLOR_OUT, PinMode.INPUT)
        self.board.digital_write(COLOR_OE, Level.LOW)
        self.board.digital_write(COLOR_S0, Level.HIGH)
        self.board.digital_write(COLOR_S1, Level.LOW)

    def read_raw(self) -> ColorRaw:
        readings = []
        for s2, s3 in _FILTERS:
            self.board.digital_write(COLOR_S2, s2)
            self.board.digital_write(COLOR_S3, s3)
            readings.append(self.board.pulse_in(COLOR_OUT, Level.LOW))
            self.board.delay_us(_SETTLE_US)
        return ColorRaw(*readings)

    def average_raw(self, samples: int) -> ColorRaw:
        """Average several raw reads, truncating each channel."""
        if samples <= 0:
            raise ValueError("sample count must be positive")
        reads = [self.read_raw() for _ in range(samples)]
        return ColorRaw(
            _trunc_div(sum(c.r for c in reads), samples),
            _trunc_div(sum(c.g for c in reads), samples),
            _trunc_div(sum(c.b for c in reads), samples),
        )

    def normalize(self, raw: ColorRaw) -> ColorValue:
        """Scale each channel between the black and white references, clamped."""

        def channel(value: int, white: int, black: int) -> float:
            span = white - black
            if span == 0:
                return 0.0
            return max(0.0, min(1.0, (value - black) / span))

        white, black = self.cal.white, self.cal.black
        return ColorValue(
            channel(raw.r, white.r, black.r),
            channel(raw.g, white.g, black.g),
            channel(raw.b, white.b, black.b),
        )

    def read_normalized(self) -> ColorValue:
        return self.normalize(self.read_raw())

    def calibrate(self, white_samples: int, black_samples: int) -> ColorCal:
        """Capture white then black references."""
        if white_samples <= 0 or black_samples <= 0:
            raise ValueError("sample counts must be positive")
        self.cal.white = self.average_raw(white_samples)
        self.cal.black = self.average_raw(black_samples)
        return self.cal