"""Drive motors through an H-bridge and position a hobby servo."""

from __future__ import annotations

from .board import (
    MOTOR_A_EN,
    MOTOR_A_IN1,
    MOTOR_A_IN2,
    MOTOR_B_EN,
    MOTOR_B_IN1,
    MOTOR_B_IN2,
    PWM_MAX,
    SERVO_PIN,
    Board,
    Level,
    PinMode,
)
from .settings import INVERT_LEFT_MOTOR, INVERT_RIGHT_MOTOR

_MOTOR_A = (MOTOR_A_IN1, MOTOR_A_IN2, MOTOR_A_EN)
_MOTOR_B = (MOTOR_B_IN1, MOTOR_B_IN2, MOTOR_B_EN)


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


class MotorDriver:
    """Two DC motors; positive PWM drives forward."""

    def __init__(
        self,
        board: Board,
        invert_left: bool = INVERT_LEFT_MOTOR,
        invert_right: bool = INVERT_RIGHT_MOTOR,
    ) -> None:
        self.board = board
        self.invert_left = invert_left
        self.invert_right = invert_right

    def _set_motor(self, pins: tuple[int, int, int], pwm: int) -> None:
        in1, in2, en = pins
        pwm = _clamp(pwm, -PWM_MAX, PWM_MAX)
        if pwm > 0:
            self.board.digital_write(in1, Level.HIGH)
            self.board.digital_write(in2, Level.LOW)
        elif pwm < 0:
            self.board.digital_write(in1, Level.LOW)
            self.board.digital_write(in2, Level.HIGH)
        else:
            self.board.digital_write(in1, Level.LOW)
            self.board.digital_write(in2, Level.LOW)
        self.board.analog_write(en, abs(pwm))

    def init(self) -> None:
        for pin in (*_MOTOR_A, *_MOTOR_B):
            self.board.pin_mode(pin, PinMode.OUTPUT)
        self.stop()

    def set(self, left_pwm: int, right_pwm: int) -> None:
        left = -left_pwm if self.invert_left else left_pwm
        right = -right_pwm if self.invert_right else right_pwm
        self._set_motor(_MOTOR_A, left)
        self._set_motor(_MOTOR_B, right)

    def stop(self) -> None:
        self._set_motor(_MOTOR_A, 0)
        self._set_motor(_MOTOR_B, 0)


class Servo:
    """A servo positioned in whole degrees from 0 to 180."""

    MIN_ANGLE = 0
    MAX_ANGLE = 180
    CENTER = 90

    def __init__(self, board: Board, pin: int = SERVO_PIN) -> None:
        self.board = board
        self.pin = pin

    def init(self) -> None:
        self.board.servo_attach(self.pin)
        self.set_angle(self.CENTER)

    def set_angle(self, angle_deg: int) -> None:
        self.board.servo_write(
            self.pin, _clamp(angle_deg, self.MIN_ANGLE, self.MAX_ANGLE)
        )