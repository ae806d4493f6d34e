import pytest

from linebot.board import IR_LEFT, IR_RIGHT, Board, PinMode
from linebot.ir import IrCal, IrSensor


@pytest.fixture
def board():
    return Board()


def test_init_sets_inputs(board):
    IrSensor(board).init()
    assert board.modes[IR_LEFT] is PinMode.INPUT
    assert board.modes[IR_RIGHT] is PinMode.INPUT


def test_raw_reads_follow_queue(board):
    board.read_queue[IR_LEFT].extend([1, 0])
    sensor = IrSensor(board)
    assert [sensor.read_left_raw(), sensor.read_left_raw()] == [1, 0]


def test_default_cal_maps_low_to_full_scale(board):
    assert IrSensor(board).read_left() == 1000


def test_scaled_read_with_digital_cal(board):
    sensor = IrSensor(board, IrCal(right_white=1, right_black=0))
    board.read_queue[IR_RIGHT].extend([1, 0])
    assert sensor.read_right() == 1000
    assert sensor.read_right() == 0


def test_zero_span_reads_zero(board):
    board.read_queue[IR_LEFT].append(1)
    sensor = IrSensor(board, IrCal(left_white=5, left_black=5))
    assert sensor.read_left() == 0


def test_scaled_read_is_clamped(board):
    sensor = IrSensor(board, IrCal(left_white=2, left_black=1))
    board.read_queue[IR_LEFT].append(0)
    assert sensor.read_left() == 0


def test_calibrate_white_then_black(board):
    board.read_queue[IR_LEFT].extend([1] * 4 + [0] * 4)
    board.read_queue[IR_RIGHT].extend([1] * 4 + [0] * 4)
    sensor = IrSensor(board)
    cal = sensor.calibrate(4, 4)
    assert (cal.left_white, cal.left_black) == (1, 0)
    assert (cal.right_white, cal.right_black) == (1, 0)
    assert cal.left_thresh == (cal.left_white + cal.left_black) // 2
    assert sensor.cal is cal
    assert not board.read_queue[IR_LEFT]


def test_calibrate_average_truncates(board):
    board.read_queue[IR_LEFT].extend([1, 1, 0, 0])
    sensor = IrSensor(board)
    cal = sensor.calibrate(3, 1)
    assert cal.left_white == 0
    assert cal.hysteresis == IrCal().hysteresis


@pytest.mark.parametrize("white, black", [(0, 5), (5, 0), (-1, 3)])
def test_calibrate_rejects_nonpositive_counts(board, white, black):
    with pytest.raises(ValueError):
        IrSensor(board).calibrate(white, black)