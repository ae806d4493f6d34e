"""Basic motion commands, a cached millisecond clock and serial telemetry."""

from __future__ import annotations

from .board import Board, SerialPort
from .motor import MotorDriver
from .settings import DEFAULT_BAUD

_LINE_END = "\r\n"


class Motion:
    """Straight driving and turning on the spot."""

    def __init__(self, motors: MotorDriver) -> None:
        self.motors = motors

    def init(self) -> None:
        self.motors.init()

    def drive(self, speed: int) -> None:
        """Drive both wheels at the same speed; negative reverses."""
        self.motors.set(speed, speed)

    def turn(self, speed: int) -> None:
        """Spin in place; positive speed turns right."""
        self.motors.set(speed, -speed)

    def stop(self) -> None:
        self.motors.stop()


class Clock:
    """Holds the board time as of the last update, in milliseconds."""

    def __init__(self, board: Board) -> None:
        self.board = board
        self._now = 0

    def init(self) -> None:
        self._now = self.board.millis()

    def update(self) -> None:
        self._now = self.board.millis()

    def now(self) -> int:
        return self._now


class Telemetry:
    """Writes log lines to the serial port."""

    def __init__(self, serial: SerialPort, baud: int = DEFAULT_BAUD) -> None:
        self.serial = serial
        self.baud = baud
        self._since_flush = 0

    def init(self) -> None:
        self.serial.begin(self.baud)

    def log(self, message: str) -> None:
        self.serial.write(message + _LINE_END)
        self._since_flush += 1

    def flush(self) -> int:
        """Return how many lines were logged since the last flush and reset the count.

        Lines are written as they are logged, so no output is held back.
        """
        count = self._since_flush
        self._since_flush = 0
        return count