"""Tunable settings for the robot's behaviours and calibration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

DEFAULT_BAUD = 115200

IR_SAMPLES = 20
COLOR_SAMPLES = 20
ULTRA_SAMPLES = 15
ULTRA_POINTS = (10, 20, 30, 40, 60, 80)
ULTRA_CAL_SAMPLES = 15
ULTRA_MEDIAN_MAX_SAMPLES = 20

INVERT_LEFT_MOTOR = False
INVERT_RIGHT_MOTOR = True


class LineColor(IntEnum):
    BLACK = 0
    RED = 1
    GREEN = 2
    BLUE = 3


def color_mask(*colors: LineColor) -> int:
    """Return the bit mask selecting the given line colors."""
    mask = 0
    for color in colors:
        mask |= 1 << LineColor(color)
    return mask & 0xFF


@dataclass
class LineFollowConfig:
    base_speed: int = 140
    turn_speed: int = 110
    match_thresh: float = 0.18
    bg_margin: float = 0.05
    allowed_mask: int = field(
        default_factory=lambda: color_mask(LineColor.BLACK, LineColor.RED)
    )

    def allows(self, color: LineColor) -> bool:
        """True if the line may be of this color."""
        return bool(self.allowed_mask & (1 << LineColor(color)))


@dataclass
class ObstacleAvoidConfig:
    avoidance_threshold_cm: int = 20
    max_obstacle_width_cm: int = 20
    clearance_cm: int = 5
    turn_90_ms: int = 600
    cm_per_ms: float = 0.05
    drive_speed: int = 140
    turn_speed: int = 120


def default_line_follow_config() -> LineFollowConfig:
    """The line-following settings the robot runs with."""
    return LineFollowConfig(
        base_speed=150,
        turn_speed=120,
        match_thresh=0.18,
        bg_margin=0.05,
        allowed_mask=color_mask(LineColor.BLACK, LineColor.RED),
    )


def default_obstacle_avoid_config() -> ObstacleAvoidConfig:
    """The obstacle-avoidance settings the robot runs with."""
    return ObstacleAvoidConfig(
        avoidance_threshold_cm=20,
        max_obstacle_width_cm=20,
        clearance_cm=5,
        turn_90_ms=600,
        cm_per_ms=0.05,
        drive_speed=150,
        turn_speed=120,
    )