"""Follow a colored line using the color sensor, searching with the IR pair."""

from __future__ import annotations

from .color import WHITE, ColorSensor, ColorValue
from .ir import IrSensor
from .motor import MotorDriver
from .settings import LineColor, LineFollowConfig


class LineFollower:
    """Drives forward while over an allowed line color, otherwise searches."""

    def __init__(
        self,
        color: ColorSensor,
        ir: IrSensor,
        motors: MotorDriver,
        config: LineFollowConfig | None = None,
    ) -> None:
        self.color = color
        self.ir = ir
        self.motors = motors
        self.config = config if config is not None else LineFollowConfig()

    def allowed_targets(self) -> list[ColorValue]:
        """Target colors the line may have, in black, red, green, blue order."""
        targets = self.color.targets
        by_color = {
            LineColor.BLACK: targets.black,
            LineColor.RED: targets.red,
            LineColor.GREEN: targets.green,
            LineColor.BLUE: targets.blue,
        }
        return [value for line_color, value in by_color.items() if self.config.allows(line_color)]

    def matches_line(self, color: ColorValue) -> bool:
        """True if the color is near an allowed target and clearly off the background."""
        allowed = self.allowed_targets()
        if not allowed:
            return False
        best = min(color.distance(target) for target in allowed)
        if best > self.config.match_thresh:
            return False
        background = min(
            color.distance(self.color.targets.cardboard), color.distance(WHITE)
        )
        return best + self.config.bg_margin < background

    def is_on_line(self) -> bool:
        return self.matches_line(self.color.read_normalized())

    def search(self) -> None:
        """Turn toward the side whose IR sensor alone sees something, else right."""
        left = self.ir.read_left_raw()
        right = self.ir.read_right_raw()
        speed = self.config.turn_speed
        if left and not right:
            self.motors.set(-speed, speed)
        else:
            self.motors.set(speed, -speed)

    def update(self) -> bool:
        """Drive one step; returns whether the line was under the sensor."""
        if self.is_on_line():
            self.motors.set(self.config.base_speed, self.config.base_speed)
            return True
        self.search()
        return False