"""Ultrasonic range finder with a linear calibration."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence

from .board import ECHO_PIN, TRIG_PIN, Board, Level, PinMode
from .settings import ULTRA_CAL_SAMPLES, ULTRA_MEDIAN_MAX_SAMPLES

ECHO_TIMEOUT_US = 30000
_UNCALIBRATED_CM_PER_US = 0.034


class CalibrationError(ValueError):
    """Raised when calibration data cannot define a fit."""


@dataclass
class UltrasonicCal:
    slope: float = 1.0
    offset: float = 0.0
    min_cm: int = 2
    max_cm: int = 400
    max_spread: int = 5


def median(values: Sequence[int]) -> int:
    """Return the middle element after sorting (upper median for even counts)."""
    if not values:
        raise ValueError("median of no values")
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def fit_line(xs: Sequence[int], ys: Sequence[int]) -> tuple[float, float]:
    """Least-squares fit ``y = slope * x + offset``; returns (slope, offset)."""
    if len(xs) != len(ys):
        raise ValueError("xs and ys differ in length")
    n = len(xs)
    if n < 2:
        raise CalibrationError("at least two points are needed")
    sum_x = sum(xs)
    sum_y = sum(ys)
    sum_xx = sum(x * x for x in xs)
    sum_xy = sum(x * y for x, y in zip(xs, ys))
    denom = n * sum_xx - sum_x * sum_x
    if denom == 0:
        raise CalibrationError("points do not determine a line")
    slope = (n * sum_xy - sum_x * sum_y) / denom
    offset = (sum_y * sum_xx - sum_x * sum_xy) / denom
    return slope, offset


class UltrasonicSensor:
    """Reads echo times and turns them into distances in centimetres."""

    def __init__(self, board: Board, cal: UltrasonicCal | None = None) -> None:
        self.board = board
        self._cal = cal if cal is not None else UltrasonicCal()
        self.calibrated = cal is not None

    @property
    def cal(self) -> UltrasonicCal:
        return self._cal

    @cal.setter
    def cal(self, value: UltrasonicCal) -> None:
        self._cal = value
        self.calibrated = True

    def init(self) -> None:
        self.board.pin_mode(TRIG_PIN, PinMode.OUTPUT)
        self.board.pin_mode(ECHO_PIN, PinMode.INPUT)
        self.board.digital_write(TRIG_PIN, Level.LOW)

    def read_raw(self) -> int:
        """Trigger a ping and return the echo time in microseconds, 0 if none."""
        self.board.digital_write(TRIG_PIN, Level.LOW)
        self.board.delay_us(2)
        self.board.digital_write(TRIG_PIN, Level.HIGH)
        self.board.delay_us(10)
        self.board.digital_write(TRIG_PIN, Level.LOW)
        return self.board.pulse_in(ECHO_PIN, Level.HIGH, ECHO_TIMEOUT_US)

    def read_cm(self) -> int | None:
        """Distance in whole centimetres, or None when no valid echo."""
        raw = self.read_raw()
        if raw == 0:
            return None
        if self.calibrated:
            cm = int(self._cal.slope * raw + self._cal.offset)
        else:
            cm = int(raw * _UNCALIBRATED_CM_PER_US / 2.0)
        if not self._cal.min_cm <= cm <= self._cal.max_cm:
            return None
        return cm

    def _apply_fit(self, xs: Sequence[int], ys: Sequence[int]) -> UltrasonicCal:
        slope, offset = fit_line(xs, ys)
        self.cal = replace(self._cal, slope=slope, offset=offset)
        return self._cal

    def calibrate(self, known_cm: Sequence[int]) -> UltrasonicCal:
        """Take a median reading at each known distance in turn and fit."""
        if len(known_cm) < 2:
            raise CalibrationError("at least two points are needed")
        medians = [
            median([self.read_raw() for _ in range(ULTRA_CAL_SAMPLES)])
            for _ in known_cm
        ]
        return self._apply_fit(medians, list(known_cm))

    def read_raw_median(self, samples: int) -> int:
        """Median of up to ``ULTRA_MEDIAN_MAX_SAMPLES`` raw readings."""
        if samples <= 0:
            return self.read_raw()
        count = min(samples, ULTRA_MEDIAN_MAX_SAMPLES)
        return median([self.read_raw() for _ in range(count)])

    def calibrate_from_pairs(
        self, raw_medians: Sequence[int], known_cm: Sequence[int]
    ) -> UltrasonicCal:
        """Fit and store a calibration from measured raw values and distances."""
        return self._apply_fit(list(raw_medians), list(known_cm))