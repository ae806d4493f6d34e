"""Left and right IR line sensors with white/black calibration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable

from .board import IR_LEFT, IR_RIGHT, Board, PinMode

NORM_MAX = 1000


def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _mean(values: Iterable[int]) -> int:
    items = list(values)
    return _trunc_div(sum(items), len(items))


@dataclass
class IrCal:
    left_white: int = 0
    left_black: int = 1023
    right_white: int = 0
    right_black: int = 1023
    left_thresh: int = 512
    right_thresh: int = 512
    hysteresis: int = 20


class IrSensor:
    """Reads the two IR sensors raw or scaled to 0..1000."""

    def __init__(self, board: Board, cal: IrCal | None = None) -> None:
        self.board = board
        self.cal = cal if cal is not None else IrCal()

    def init(self) -> None:
        self.board.pin_mode(IR_LEFT, PinMode.INPUT)
        self.board.pin_mode(IR_RIGHT, PinMode.INPUT)

    def read_left_raw(self) -> int:
        return int(self.board.digital_read(IR_LEFT))

    def read_right_raw(self) -> int:
        return int(self.board.digital_read(IR_RIGHT))

    @staticmethod
    def _normalize(raw: int, white: int, black: int) -> int:
        denom = white - black
        if denom == 0:
            return 0
        norm = _trunc_div((raw - black) * NORM_MAX, denom)
        return max(0, min(NORM_MAX, norm))

    def read_left(self) -> int:
        return self._normalize(
            self.read_left_raw(), self.cal.left_white, self.cal.left_black
        )

    def read_right(self) -> int:
        return self._normalize(
            self.read_right_raw(), self.cal.right_white, self.cal.right_black
        )

    def calibrate(self, white_samples: int, black_samples: int) -> IrCal:
        """Sample white then black surfaces and derive thresholds."""
        if white_samples <= 0 or black_samples <= 0:
            raise ValueError("sample counts must be positive")

        def avg(read: Callable[[], int], samples: int) -> int:
            return _mean(read() for _ in range(samples))

        cal = self.cal
        cal.left_white = avg(self.read_left_raw, white_samples)
        cal.right_white = avg(self.read_right_raw, white_samples)
        cal.left_black = avg(self.read_left_raw, black_samples)
        cal.right_black = avg(self.read_right_raw, black_samples)
        cal.left_thresh = _trunc_div(cal.left_white + cal.left_black, 2)
        cal.right_thresh = _trunc_div(cal.right_white + cal.right_black, 2)
        return cal