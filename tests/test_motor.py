import pytest

from linebot.board import (
    MOTOR_A_EN,
    MOTOR_A_IN1,
    MOTOR_A_IN2,
    MOTOR_B_EN,
    MOTOR_B_IN1,
    MOTOR_B_IN2,
    SERVO_PIN,
    Board,
    Level,
    PinMode,
)
from linebot.motor import MotorDriver, Servo


@pytest.fixture
def board():
    return Board()


def test_init_sets_outputs_and_stops(board):
    MotorDriver(board).init()
    for pin in (MOTOR_A_EN, MOTOR_A_IN1, MOTOR_A_IN2, MOTOR_B_EN, MOTOR_B_IN1, MOTOR_B_IN2):
        assert board.modes[pin] is PinMode.OUTPUT
    assert board.pwm[MOTOR_A_EN] == 0
    assert board.pwm[MOTOR_B_EN] == 0
    assert board.levels[MOTOR_A_IN1] == Level.LOW
    assert board.levels[MOTOR_B_IN2] == Level.LOW


def test_forward_with_right_motor_inverted(board):
    MotorDriver(board).set(100, 100)
    assert board.levels[MOTOR_A_IN1] == Level.HIGH
    assert board.levels[MOTOR_A_IN2] == Level.LOW
    assert board.levels[MOTOR_B_IN1] == Level.LOW
    assert board.levels[MOTOR_B_IN2] == Level.HIGH
    assert board.pwm[MOTOR_A_EN] == 100
    assert board.pwm[MOTOR_B_EN] == 100


def test_pwm_is_clamped(board):
    MotorDriver(board).set(300, -400)
    assert board.pwm[MOTOR_A_EN] == 255
    assert board.pwm[MOTOR_B_EN] == 255
    assert board.levels[MOTOR_B_IN1] == Level.HIGH


def test_stop_after_motion(board):
    driver = MotorDriver(board)
    driver.set(-120, 80)
    driver.stop()
    assert board.pwm[MOTOR_A_EN] == board.pwm[MOTOR_B_EN] == 0
    assert board.levels[MOTOR_A_IN2] == Level.LOW
    assert board.levels[MOTOR_B_IN1] == Level.LOW


def test_inversion_can_be_overridden(board):
    MotorDriver(board, invert_left=True, invert_right=False).set(50, 50)
    assert board.levels[MOTOR_A_IN2] == Level.HIGH
    assert board.levels[MOTOR_B_IN1] == Level.HIGH


def test_servo_init_centres(board):
    Servo(board).init()
    assert board.servos[SERVO_PIN] == 90


@pytest.mark.parametrize("requested, expected", [(-10, 0), (200, 180), (45, 45)])
def test_servo_angle_is_clamped(board, requested, expected):
    servo = Servo(board)
    servo.init()
    servo.set_angle(requested)
    assert board.servos[SERVO_PIN] == expected


def test_servo_requires_attach(board):
    with pytest.raises(ValueError):
        Servo(board).set_angle(30)