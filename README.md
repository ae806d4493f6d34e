# linebot

`linebot` holds the control logic for a small two-wheeled robot. The robot
follows a coloured line and drives around obstacles it meets on the way. Its
sensors can be calibrated interactively over a serial link.

All I/O goes through two classes in `linebot.board`. Both are in-memory
simulations:

- `Board` records pin modes, digital levels, PWM values and servo angles. It
  replays queued inputs: `read_queue[pin]` feeds `digital_read` and
  `pulse_queue[pin]` feeds `pulse_in`. It also keeps a simulated microsecond
  counter, which `delay_us` and `pulse_in` advance and `millis` reports.
- `SerialPort` has `begin`, `available`, `read` and `write`. Unread characters
  sit in `incoming` and everything written is kept in `output`.

The rest of the package only calls these methods. To drive real hardware or a
different simulator, pass in any object that provides the same methods.

## What is inside

| Module | Purpose |
| --- | --- |
| `linebot.board` | Pin numbers, `PinMode`, `Level`, `Board` and `SerialPort`. |
| `linebot.settings` | Tunables: `LineFollowConfig` (with `allows`), `ObstacleAvoidConfig`, `LineColor`, `color_mask`, sample counts, calibration distances (`ULTRA_POINTS`) and the running defaults from `default_line_follow_config()` and `default_obstacle_avoid_config()`. |
| `linebot.motor` | `MotorDriver` for a dual H-bridge. PWM is clamped to ±255 and the right motor is inverted by default. `Servo` clamps its angle to 0–180° and centres at 90° on `init()`. |
| `linebot.ultrasonic` | `UltrasonicSensor` and its `UltrasonicCal`. `read_cm()` returns `None` when there is no valid echo. The helpers `median` and `fit_line` do the least-squares calibration, and `CalibrationError` is raised for fits that cannot be solved. |
| `linebot.ir` | `IrSensor` with white/black calibration (`IrCal`) and readings normalised to 0–1000. |
| `linebot.color` | `ColorSensor` for a frequency-output RGB sensor. Readings are normalised against white and black references (`ColorCal`) and compared with `ColorTargets` using `ColorValue.distance`. |
| `linebot.core` | Small helpers. `Motion` drives straight or turns. `Clock` caches the board time. `Telemetry` writes log lines to serial; its `flush()` returns how many lines were logged since the last flush. |
| `linebot.line_follow` | `LineFollower` checks whether the sensor is over an allowed line colour that is clearly off the background. If not, it searches by turning with the IR sensors. |
| `linebot.obstacle_avoid` | `ObstacleAvoider` drives around an obstacle in timed phases (`Phase`), then creeps forward until the line is found again. |
| `linebot.state_machine` | `StateMachine` with `StateId`, `State`, `IdleState`, `LineFollowState` and `ObstacleAvoidState`. Unknown state ids fall back to `RAMP_CLIMB`. |
| `linebot.calibration` | `CalibrationConsole` is the line-based serial command console (`CalibrationStep`, `IrProfile`). |

## Putting it together

```python
from linebot.board import Board, SerialPort
from linebot.calibration import CalibrationConsole
from linebot.color import ColorSensor
from linebot.ir import IrSensor
from linebot.line_follow import LineFollower
from linebot.motor import MotorDriver
from linebot.obstacle_avoid import ObstacleAvoider
from linebot.settings import (
    DEFAULT_BAUD,
    default_line_follow_config,
    default_obstacle_avoid_config,
)
from linebot.state_machine import StateMachine
from linebot.ultrasonic import UltrasonicSensor

board, serial = Board(), SerialPort()
motors = MotorDriver(board)
ir, color, ultra = IrSensor(board), ColorSensor(board), UltrasonicSensor(board)

follower = LineFollower(color, ir, motors, default_line_follow_config())
avoider = ObstacleAvoider(board, ultra, motors, follower, default_obstacle_avoid_config())
machine = StateMachine(follower, avoider)
console = CalibrationConsole(serial, ir, color, ultra)

ultra.init(); ir.init(); color.init(); motors.init()
console.init(DEFAULT_BAUD)
machine.start()

while True:
    console.poll()
    machine.update()
```

The machine starts in line following. It switches to obstacle avoidance when
the ultrasonic sensor reports something within the configured threshold, and
back again once the line is seen.

## Calibration console

The console reads commands ending in CR or LF, either from the serial port
with `poll()` or directly with `feed(text)`. Each line is cut off after 31
characters. Replies are single lines ending in `\r\n`, and each finished
calibration is reported as one JSON object on a line.

| Command | Effect |
| --- | --- |
| `CAL_IR_PROFILE` | Record IR readings over cardboard, red, blue and green. |
| `CAL_COLOR` | Capture white and black references, then the cardboard, red, blue and green targets. |
| `CAL_ULTRA` | Measure the echo time at 10, 20, 30, 40, 60 and 80 cm and fit a line through the points. |
| `NEXT` | Take the current step's sample and move on. |
| `SET_IR lw lb rw rb lt rt` | Load IR calibration values directly. |
| `SET_COLOR wr wg wb br bg bb` | Load the colour white/black references directly. |
| `SET_COLOR_TARGETS` + 15 numbers | Load the cardboard, black, red, blue and green targets. |
| `SET_ULTRA slope offset min_cm max_cm` | Load the ultrasonic calibration directly. |
| `HELP` | List the commands. |

Malformed arguments are answered with `ERR:BAD_ARGS`. Unknown commands are
answered with `ERR:UNKNOWN_CMD`.

```python
console.feed("HELP\n")
serial.output[-1]   # "CMD: CAL_IR_PROFILE | CAL_COLOR | ... | SET_ULTRA\r\n"
```

## Fitting ultrasonic data yourself

```python
from linebot.ultrasonic import median, fit_line

median([7, 3, 5])                          # 5
fit_line([580, 1160, 1740], [10, 20, 30])  # (slope, offset)
```

`fit_line` needs at least two points that do not all share the same x value.
Otherwise it raises `CalibrationError`.

## What this package does not do

- It has no command-line program and no ready-made main loop or task
  selection. You wire the parts together yourself, as shown above.
- It has no driver for any real board or serial device; `Board` and
  `SerialPort` only simulate them.
- Calibration values live in memory only and are not saved anywhere.
- Apart from line following and obstacle avoidance, the states in
  `StateMachine` (ramp climb, find black, push cube, obstacle course, return
  home) are `IdleState`s that do nothing.