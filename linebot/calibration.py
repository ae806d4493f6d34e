"""Interactive sensor calibration driven by line commands over serial."""

from __future__ import annotations

import re
from dataclasses import dataclass, fields, replace
from enum import Enum, auto
from typing import Callable, Iterable, Sequence

from .board import SerialPort
from .color import ColorCal, ColorRaw, ColorSensor, ColorTargets, ColorValue
from .ir import IrCal, IrSensor
from .settings import (
    COLOR_SAMPLES,
    DEFAULT_BAUD,
    IR_SAMPLES,
    ULTRA_POINTS,
    ULTRA_SAMPLES,
)
from .ultrasonic import CalibrationError, UltrasonicSensor

COMMAND_MAX_LEN = 31
_LINE_END = "\r\n"

_INT = re.compile(r"\s*([+-]?\d+)")
_FLOAT = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

HELP_TEXT = (
    "CMD: CAL_IR_PROFILE | CAL_COLOR | CAL_ULTRA | NEXT | SET_IR | "
    "SET_COLOR | SET_COLOR_TARGETS | SET_ULTRA"
)


class CalibrationStep(Enum):
    IDLE = auto()
    IR_PROFILE_CARDBOARD = auto()
    IR_PROFILE_RED = auto()
    IR_PROFILE_BLUE = auto()
    IR_PROFILE_GREEN = auto()
    COLOR_WHITE = auto()
    COLOR_BLACK = auto()
    COLOR_CARDBOARD = auto()
    COLOR_RED = auto()
    COLOR_BLUE = auto()
    COLOR_GREEN = auto()
    ULTRA_POINT = auto()


@dataclass
class IrProfile:
    """Raw IR readings over each surface material."""

    cardboard_left: int = 0
    cardboard_right: int = 0
    red_left: int = 0
    red_right: int = 0
    blue_left: int = 0
    blue_right: int = 0
    green_left: int = 0
    green_right: int = 0


_S = CalibrationStep

# step -> (material, next step, prompt lines for the next step)
_IR_PROFILE_STEPS: dict[CalibrationStep, tuple[str, CalibrationStep, tuple[str, ...]]] = {
    _S.IR_PROFILE_CARDBOARD: (
        "cardboard",
        _S.IR_PROFILE_RED,
        ("IRP:STEP2 Place sensors over RED, press ENTER (or type NEXT).", "IRP:READY_RED"),
    ),
    _S.IR_PROFILE_RED: (
        "red",
        _S.IR_PROFILE_BLUE,
        ("IRP:STEP3 Place sensors over BLUE, press ENTER (or type NEXT).", "IRP:READY_BLUE"),
    ),
    _S.IR_PROFILE_BLUE: (
        "blue",
        _S.IR_PROFILE_GREEN,
        ("IRP:STEP4 Place sensors over GREEN, press ENTER (or type NEXT).", "IRP:READY_GREEN"),
    ),
    _S.IR_PROFILE_GREEN: ("green", _S.IDLE, ()),
}

_COLOR_TARGET_STEPS: dict[CalibrationStep, tuple[str, CalibrationStep, tuple[str, ...]]] = {
    _S.COLOR_CARDBOARD: (
        "cardboard",
        _S.COLOR_RED,
        ("COLOR:STEP4 Place sensor over RED, press ENTER (or type NEXT).", "COLOR:READY_RED"),
    ),
    _S.COLOR_RED: (
        "red",
        _S.COLOR_BLUE,
        ("COLOR:STEP5 Place sensor over BLUE, press ENTER (or type NEXT).", "COLOR:READY_BLUE"),
    ),
    _S.COLOR_BLUE: (
        "blue",
        _S.COLOR_GREEN,
        ("COLOR:STEP6 Place sensor over GREEN, press ENTER (or type NEXT).", "COLOR:READY_GREEN"),
    ),
}


def _scan(text: str, pattern: re.Pattern[str], count: int, convert: Callable[[str], object]) -> list | None:
    """Read ``count`` whitespace-separated numbers from the start of ``text``."""
    values = []
    pos = 0
    for _ in range(count):
        match = pattern.match(text, pos)
        if match is None:
            return None
        values.append(convert(match.group(1)))
        pos = match.end()
    return values


def _trunc_mean(values: Iterable[int]) -> int:
    items = list(values)
    total = sum(items)
    q = abs(total) // len(items)
    return q if total >= 0 else -q


def _json_line(sensor: str, items: Iterable[tuple[str, str]]) -> str:
    body = "".join(f',"{key}":{value}' for key, value in items)
    return f'{{"sensor":"{sensor}"{body}}}'


def _f6(value: float) -> str:
    return f"{value:.6f}"


class CalibrationConsole:
    """Reads commands from a serial port and walks through calibration steps."""

    def __init__(
        self,
        serial: SerialPort,
        ir: IrSensor,
        color: ColorSensor,
        ultrasonic: UltrasonicSensor,
    ) -> None:
        self.serial = serial
        self.ir = ir
        self.color = color
        self.ultrasonic = ultrasonic
        self.step = CalibrationStep.IDLE
        self.ir_profile = IrProfile()
        self._targets = ColorTargets()
        self._ultra_raw: list[int] = []
        self._buffer: list[str] = []
        self._setters: dict[str, tuple[re.Pattern[str], Callable[[str], object], int, Callable[[Sequence], None]]] = {
            "SET_IR": (_INT, int, 6, self._set_ir),
            "SET_COLOR": (_INT, int, 6, self._set_color),
            "SET_COLOR_TARGETS": (_FLOAT, float, 15, self._set_color_targets),
            "SET_ULTRA": (_FLOAT, str, 4, self._set_ultra),
        }

    def _println(self, text: str = "") -> None:
        self.serial.write(text + _LINE_END)

    def init(self, baud: int) -> None:
        """Open the serial port (default speed if ``baud`` is not positive)."""
        self.serial.begin(baud if baud > 0 else DEFAULT_BAUD)
        self._println("CAL:READY")

    def poll(self) -> None:
        """Consume every waiting character from the serial port."""
        while self.serial.available() > 0:
            self.feed(self.serial.read())

    def feed(self, data: str) -> None:
        """Process characters; each CR or LF ends a command line."""
        for char in data:
            if char in "\r\n":
                if self._buffer:
                    line = "".join(self._buffer)
                    self._buffer.clear()
                    self.handle_command(line)
                continue
            if len(self._buffer) < COMMAND_MAX_LEN:
                self._buffer.append(char)

    def handle_command(self, line: str) -> None:
        """Run one command line."""
        cmd, _, args = line.partition(" ")
        setter = self._setters.get(cmd)
        if setter is not None:
            pattern, convert, count, apply = setter
            if cmd == "SET_ULTRA":
                values = self._scan_ultra(args)
            else:
                values = _scan(args, pattern, count, convert)
            if values is None:
                self._println("ERR:BAD_ARGS")
                return
            apply(values)
            self._println(f"OK:{cmd}")
            return

        if cmd == "CAL_IR_PROFILE":
            self._start_ir_profile()
        elif cmd == "CAL_COLOR":
            self._start_color()
        elif cmd == "CAL_ULTRA":
            self._start_ultra()
        elif cmd == "NEXT":
            self.next_step()
        elif cmd == "HELP":
            self._println(HELP_TEXT)
        else:
            self._println("ERR:UNKNOWN_CMD")

    @staticmethod
    def _scan_ultra(args: str) -> list | None:
        floats = _scan(args, _FLOAT, 2, float)
        if floats is None:
            return None
        rest = args
        for _ in range(2):
            match = _FLOAT.match(rest)
            rest = rest[match.end():] if match else rest
        ints = _scan(rest, _INT, 2, int)
        if ints is None:
            return None
        return floats + ints

    def _set_ir(self, values: Sequence[int]) -> None:
        lw, lb, rw, rb, lt, rt = values
        self.ir.cal = IrCal(
            left_white=lw,
            left_black=lb,
            right_white=rw,
            right_black=rb,
            left_thresh=lt,
            right_thresh=rt,
        )

    def _set_color(self, values: Sequence[int]) -> None:
        wr, wg, wb, br, bg, bb = values
        self.color.cal = ColorCal(white=ColorRaw(wr, wg, wb), black=ColorRaw(br, bg, bb))

    def _set_color_targets(self, values: Sequence[float]) -> None:
        triples = [ColorValue(*values[i:i + 3]) for i in range(0, 15, 3)]
        cardboard, black, red, blue, green = triples
        self.color.targets = ColorTargets(
            cardboard=cardboard, black=black, red=red, blue=blue, green=green
        )

    def _set_ultra(self, values: Sequence) -> None:
        slope, offset, min_cm, max_cm = values
        self.ultrasonic.cal = replace(
            self.ultrasonic.cal, slope=slope, offset=offset, min_cm=min_cm, max_cm=max_cm
        )

    def _start_ir_profile(self) -> None:
        self.step = CalibrationStep.IR_PROFILE_CARDBOARD
        self._println("IRP:STEP1 Place sensors over CARDBOARD, press ENTER (or type NEXT).")
        self._println("IRP:READY_CARDBOARD")

    def _start_color(self) -> None:
        self.step = CalibrationStep.COLOR_WHITE
        self._println("COLOR:STEP1 Place sensor over WHITE reference, press ENTER (or type NEXT).")
        self._println("COLOR:READY_WHITE")

    def _prompt_ultra_point(self) -> None:
        point = ULTRA_POINTS[len(self._ultra_raw)]
        self._println(f"ULTRA:READY_{point}")
        self._println(f"ULTRA:PLACE target at {point} cm, press ENTER (or type NEXT).")

    def _start_ultra(self) -> None:
        self.step = CalibrationStep.ULTRA_POINT
        self._ultra_raw = []
        self._println("ULTRA:STEP1 Place a flat target at the shown distance.")
        self._prompt_ultra_point()

    def _average_norm(self, samples: int) -> ColorValue:
        reads = [self.color.read_normalized() for _ in range(samples)]
        return ColorValue(
            sum(c.r for c in reads) / samples,
            sum(c.g for c in reads) / samples,
            sum(c.b for c in reads) / samples,
        )

    def next_step(self) -> None:
        """Take the readings for the current step and move to the next one."""
        step = self.step
        if step in _IR_PROFILE_STEPS:
            material, following, prompts = _IR_PROFILE_STEPS[step]
            left = _trunc_mean(self.ir.read_left_raw() for _ in range(IR_SAMPLES))
            right = _trunc_mean(self.ir.read_right_raw() for _ in range(IR_SAMPLES))
            setattr(self.ir_profile, f"{material}_left", left)
            setattr(self.ir_profile, f"{material}_right", right)
            self.step = following
            for prompt in prompts:
                self._println(prompt)
            if following is CalibrationStep.IDLE:
                self._print_ir_profile()
        elif step is CalibrationStep.COLOR_WHITE:
            self.color.cal.white = self.color.average_raw(COLOR_SAMPLES)
            self.step = CalibrationStep.COLOR_BLACK
            self._println("COLOR:STEP2 Place sensor over BLACK reference, press ENTER (or type NEXT).")
            self._println("COLOR:READY_BLACK")
        elif step is CalibrationStep.COLOR_BLACK:
            self.color.cal.black = self.color.average_raw(COLOR_SAMPLES)
            self.step = CalibrationStep.COLOR_CARDBOARD
            self._targets.black = ColorValue(0.0, 0.0, 0.0)
            self._println("COLOR:STEP3 Place sensor over CARDBOARD, press ENTER (or type NEXT).")
            self._println("COLOR:READY_CARDBOARD")
        elif step in _COLOR_TARGET_STEPS:
            material, following, prompts = _COLOR_TARGET_STEPS[step]
            setattr(self._targets, material, self._average_norm(COLOR_SAMPLES))
            self.step = following
            for prompt in prompts:
                self._println(prompt)
        elif step is CalibrationStep.COLOR_GREEN:
            self._targets.green = self._average_norm(COLOR_SAMPLES)
            self.color.targets = replace(self._targets)
            self.step = CalibrationStep.IDLE
            self._print_color()
        elif step is CalibrationStep.ULTRA_POINT:
            self._ultra_raw.append(self.ultrasonic.read_raw_median(ULTRA_SAMPLES))
            if len(self._ultra_raw) >= len(ULTRA_POINTS):
                try:
                    self.ultrasonic.calibrate_from_pairs(self._ultra_raw, ULTRA_POINTS)
                except CalibrationError:
                    pass
                self.step = CalibrationStep.IDLE
                self._print_ultra()
                return
            self._println("ULTRA:NEXT Place target at the next distance shown.")
            self._prompt_ultra_point()

    def _print_ir_profile(self) -> None:
        profile = self.ir_profile
        items = [(f.name, str(getattr(profile, f.name))) for f in fields(profile)]
        self._println(_json_line("ir_profile", items))

    def _print_color(self) -> None:
        cal, targets = self.color.cal, self.color.targets
        items: list[tuple[str, str]] = []
        for name, raw in (("white", cal.white), ("black", cal.black)):
            items += [(f"{name}_{ch}", str(getattr(raw, ch))) for ch in "rgb"]
        for key, value in (
            ("cardboard", targets.cardboard),
            ("target_black", targets.black),
            ("red", targets.red),
            ("blue", targets.blue),
            ("green", targets.green),
        ):
            items += [(f"{key}_{ch}", _f6(getattr(value, ch))) for ch in "rgb"]
        self._println(_json_line("color", items))

    def _print_ultra(self) -> None:
        cal = self.ultrasonic.cal
        self._println(
            _json_line(
                "ultrasonic",
                [
                    ("slope", _f6(cal.slope)),
                    ("offset", _f6(cal.offset)),
                    ("min_cm", str(cal.min_cm)),
                    ("max_cm", str(cal.max_cm)),
                ],
            )
        )