"""Pin assignments and an in-memory board and serial port."""

from __future__ import annotations

from collections import defaultdict, deque
from enum import Enum, IntEnum

# Ultrasonic sensor
TRIG_PIN = 2
ECHO_PIN = 3

# Motor driver (L298N)
MOTOR_A_EN = 13
MOTOR_A_IN1 = 12
MOTOR_A_IN2 = 11
MOTOR_B_EN = 8
MOTOR_B_IN1 = 10
MOTOR_B_IN2 = 9

# IR line sensors
IR_LEFT = 3
IR_RIGHT = 2

# Servo
SERVO_PIN = 4

# Analog header pins
A0, A1, A2, A3, A4, A5 = range(14, 20)

# Color sensor (TCS3200)
COLOR_S0 = A0
COLOR_S1 = A1
COLOR_S2 = A2
COLOR_S3 = A3
COLOR_OUT = A4
COLOR_OE = A5

DEFAULT_PULSE_TIMEOUT_US = 1_000_000
PWM_MAX = 255


class PinMode(Enum):
    INPUT = "input"
    OUTPUT = "output"


class Level(IntEnum):
    LOW = 0
    HIGH = 1


class Board:
    """A simulated board that records outputs and replays queued inputs.

    ``read_queue[pin]`` supplies successive digital reads; once empty, a read
    returns the last level written to the pin (LOW if none).
    ``pulse_queue[pin]`` supplies successive pulse widths in microseconds; once
    empty, no pulse is seen.
    """

    def __init__(self) -> None:
        self.modes: dict[int, PinMode] = {}
        self.levels: dict[int, Level] = {}
        self.pwm: dict[int, int] = {}
        self.servos: dict[int, int | None] = {}
        self.read_queue: defaultdict[int, deque[int]] = defaultdict(deque)
        self.pulse_queue: defaultdict[int, deque[int]] = defaultdict(deque)
        self.micros = 0

    def pin_mode(self, pin: int, mode: PinMode) -> None:
        self.modes[pin] = PinMode(mode)

    def digital_write(self, pin: int, level: Level | int) -> None:
        self.levels[pin] = Level(level)

    def digital_read(self, pin: int) -> Level:
        queue = self.read_queue.get(pin)
        if queue:
            return Level(queue.popleft())
        return self.levels.get(pin, Level.LOW)

    def analog_write(self, pin: int, value: int) -> None:
        if not 0 <= value <= PWM_MAX:
            raise ValueError(f"PWM value {value} outside 0..{PWM_MAX}")
        self.pwm[pin] = value

    def pulse_in(
        self, pin: int, level: Level | int, timeout_us: int = DEFAULT_PULSE_TIMEOUT_US
    ) -> int:
        """Return the width in microseconds of the next pulse, or 0 on timeout."""
        queue = self.pulse_queue.get(pin)
        duration = queue.popleft() if queue else 0
        if duration <= 0 or duration > timeout_us:
            self.micros += timeout_us
            return 0
        self.micros += duration
        return duration

    def delay_us(self, microseconds: int) -> None:
        if microseconds < 0:
            raise ValueError("delay must not be negative")
        self.micros += microseconds

    def millis(self) -> int:
        return self.micros // 1000

    def servo_attach(self, pin: int) -> None:
        self.servos.setdefault(pin, None)

    def servo_write(self, pin: int, angle: int) -> None:
        if pin not in self.servos:
            raise ValueError(f"no servo attached on pin {pin}")
        self.servos[pin] = angle


class SerialPort:
    """An in-memory serial line: ``incoming`` holds unread characters."""

    def __init__(self) -> None:
        self.baud: int | None = None
        self.incoming: deque[str] = deque()
        self.output: list[str] = []

    def begin(self, baud: int) -> None:
        if baud <= 0:
            raise ValueError("baud rate must be positive")
        self.baud = baud

    def available(self) -> int:
        return len(self.incoming)

    def read(self) -> str:
        if not self.incoming:
            raise EOFError("no serial data available")
        return self.incoming.popleft()

    def write(self, text: str) -> None:
        self.output.append(text)