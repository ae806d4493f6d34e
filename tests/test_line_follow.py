import pytest

from linebot.board import (
    COLOR_OUT,
    IR_LEFT,
    IR_RIGHT,
    MOTOR_A_EN,
    MOTOR_A_IN1,
    MOTOR_A_IN2,
    MOTOR_B_EN,
    MOTOR_B_IN1,
    MOTOR_B_IN2,
    Board,
    Level,
)
from linebot.color import ColorCal, ColorRaw, ColorSensor, ColorTargets, ColorValue
from linebot.ir import IrSensor
from linebot.line_follow import LineFollower
from linebot.motor import MotorDriver
from linebot.settings import LineColor, LineFollowConfig, color_mask

BLACK = ColorValue(0.0, 0.0, 0.0)
RED = ColorValue(1.0, 0.0, 0.0)
GREEN = ColorValue(0.0, 1.0, 0.0)
BLUE = ColorValue(0.0, 0.0, 1.0)
CARDBOARD = ColorValue(0.6, 0.5, 0.4)


def _signed(board, in1, in2, en):
    if board.levels[in1] == Level.HIGH:
        return board.pwm[en]
    if board.levels[in2] == Level.HIGH:
        return -board.pwm[en]
    return 0


def motor_outputs(board):
    left = _signed(board, MOTOR_A_IN1, MOTOR_A_IN2, MOTOR_A_EN)
    right = -_signed(board, MOTOR_B_IN1, MOTOR_B_IN2, MOTOR_B_EN)
    return left, right


def feed_color(board, r, g, b):
    board.pulse_queue[COLOR_OUT].extend([r, g, b])


def make_follower(config=None, cardboard=CARDBOARD):
    board = Board()
    cal = ColorCal(white=ColorRaw(100, 100, 100), black=ColorRaw(0, 0, 0))
    targets = ColorTargets(
        cardboard=cardboard, black=BLACK, red=RED, blue=BLUE, green=GREEN
    )
    color = ColorSensor(board, cal=cal, targets=targets)
    cfg = config if config is not None else LineFollowConfig()
    follower = LineFollower(color, IrSensor(board), MotorDriver(board), cfg)
    return board, follower


def test_allowed_targets_follow_mask_in_order():
    _, follower = make_follower()
    assert follower.allowed_targets() == [BLACK, RED]
    follower.config.allowed_mask = color_mask(LineColor.BLUE, LineColor.GREEN)
    assert follower.allowed_targets() == [GREEN, BLUE]


def test_no_allowed_colors_never_matches():
    _, follower = make_follower(LineFollowConfig(allowed_mask=0))
    assert follower.allowed_targets() == []
    assert follower.matches_line(BLACK) is False


def test_matches_near_black():
    _, follower = make_follower()
    assert follower.matches_line(ColorValue(0.05, 0.05, 0.05)) is True


def test_cardboard_is_not_line():
    _, follower = make_follower()
    assert follower.matches_line(CARDBOARD) is False


def test_disallowed_color_is_not_line():
    _, follower = make_follower()
    assert follower.matches_line(GREEN) is False
    follower.config.allowed_mask = color_mask(LineColor.GREEN)
    assert follower.matches_line(GREEN) is True


def test_background_margin_rejects_ambiguous_color():
    _, follower = make_follower(cardboard=ColorValue(0.1, 0.1, 0.1))
    # equally close to the black target and to the cardboard background
    assert follower.matches_line(ColorValue(0.05, 0.05, 0.05)) is False


def test_is_on_line_reads_sensor():
    board, follower = make_follower()
    feed_color(board, 5, 5, 5)
    assert follower.is_on_line() is True
    feed_color(board, 60, 50, 40)
    assert follower.is_on_line() is False


def test_update_drives_forward_on_line():
    board, follower = make_follower()
    feed_color(board, 5, 5, 5)
    assert follower.update() is True
    speed = follower.config.base_speed
    assert motor_outputs(board) == (speed, speed)


@pytest.mark.parametrize(
    "left, right, turns_left",
    [(1, 0, True), (0, 1, False), (1, 1, False), (0, 0, False)],
)
def test_search_direction(left, right, turns_left):
    board, follower = make_follower()
    board.read_queue[IR_LEFT].append(left)
    board.read_queue[IR_RIGHT].append(right)
    follower.search()
    speed = follower.config.turn_speed
    expected = (-speed, speed) if turns_left else (speed, -speed)
    assert motor_outputs(board) == expected


def test_update_searches_off_line():
    board, follower = make_follower()
    feed_color(board, 60, 50, 40)
    board.read_queue[IR_LEFT].append(1)
    board.read_queue[IR_RIGHT].append(0)
    assert follower.update() is False
    speed = follower.config.turn_speed
    assert motor_outputs(board) == (-speed, speed)