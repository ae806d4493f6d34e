"""Drive around an obstacle with a timed box manoeuvre, then find the line."""

from __future__ import annotations

from enum import Enum, auto
from typing import Callable

from .board import Board
from .line_follow import LineFollower
from .motor import MotorDriver
from .settings import ObstacleAvoidConfig
from .ultrasonic import UltrasonicSensor


class Phase(Enum):
    IDLE = auto()
    TURN_LEFT_1 = auto()
    DRIVE_LEFT_CLEAR = auto()
    TURN_RIGHT_1 = auto()
    DRIVE_FORWARD_PASS = auto()
    TURN_RIGHT_2 = auto()
    DRIVE_RIGHT_CLEAR = auto()
    TURN_LEFT_2 = auto()
    REACQUIRE = auto()


class ObstacleAvoider:
    """Steps through the avoidance phases, one call of update() at a time."""

    def __init__(
        self,
        board: Board,
        ultrasonic: UltrasonicSensor,
        motors: MotorDriver,
        follower: LineFollower,
        config: ObstacleAvoidConfig | None = None,
    ) -> None:
        self.board = board
        self.ultrasonic = ultrasonic
        self.motors = motors
        self.follower = follower
        self.config = config if config is not None else ObstacleAvoidConfig()
        self.phase = Phase.IDLE
        self._phase_start = 0
        self._phase_duration = 0

    def reset(self) -> None:
        self.phase = Phase.IDLE

    def cm_to_ms(self, cm: int) -> int:
        """Time needed to drive ``cm`` centimetres, 0 if the speed is unset."""
        if self.config.cm_per_ms <= 0:
            return 0
        return int(cm / self.config.cm_per_ms)

    def obstacle_detected(self) -> bool:
        cm = self.ultrasonic.read_cm()
        return cm is not None and 0 < cm <= self.config.avoidance_threshold_cm

    def _start(self, phase: Phase, duration_ms: int) -> None:
        self.phase = phase
        self._phase_start = self.board.millis()
        self._phase_duration = duration_ms

    def _done(self) -> bool:
        return self.board.millis() - self._phase_start >= self._phase_duration

    def _forward(self) -> None:
        speed = self.config.drive_speed
        self.motors.set(speed, speed)

    def _turn_left(self) -> None:
        speed = self.config.turn_speed
        self.motors.set(-speed, speed)

    def _turn_right(self) -> None:
        speed = self.config.turn_speed
        self.motors.set(speed, -speed)

    def _steps(self) -> dict[Phase, tuple[Callable[[], None], Phase, int]]:
        turn = self.config.turn_90_ms
        side = self.cm_to_ms(self.config.max_obstacle_width_cm + self.config.clearance_cm)
        return {
            Phase.TURN_LEFT_1: (self._turn_left, Phase.DRIVE_LEFT_CLEAR, side),
            Phase.DRIVE_LEFT_CLEAR: (self._forward, Phase.TURN_RIGHT_1, turn),
            Phase.TURN_RIGHT_1: (self._turn_right, Phase.DRIVE_FORWARD_PASS, side),
            Phase.DRIVE_FORWARD_PASS: (self._forward, Phase.TURN_RIGHT_2, turn),
            Phase.TURN_RIGHT_2: (self._turn_right, Phase.DRIVE_RIGHT_CLEAR, side),
            Phase.DRIVE_RIGHT_CLEAR: (self._forward, Phase.TURN_LEFT_2, turn),
            Phase.TURN_LEFT_2: (self._turn_left, Phase.REACQUIRE, 0),
        }

    def update(self) -> None:
        if self.phase is Phase.IDLE:
            self._start(Phase.TURN_LEFT_1, self.config.turn_90_ms)
            return
        if self.phase is Phase.REACQUIRE:
            slow = int(self.config.drive_speed / 2)
            self.motors.set(slow, slow)
            if self.follower.is_on_line():
                self.motors.stop()
                self.phase = Phase.IDLE
            return
        drive, next_phase, duration = self._steps()[self.phase]
        drive()
        if self._done():
            self._start(next_phase, duration)