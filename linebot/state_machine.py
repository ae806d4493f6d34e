"""The robot's top-level states and the machine that switches between them."""

from __future__ import annotations

from enum import IntEnum
from typing import Mapping

from .line_follow import LineFollower
from .obstacle_avoid import ObstacleAvoider


class StateId(IntEnum):
    RAMP_CLIMB = 0
    FIND_BLACK = 1
    PUSH_CUBE = 2
    OBSTACLE_COURSE = 3
    RETURN_HOME = 4
    LINE_FOLLOW = 5
    OBSTACLE_AVOID = 6


class State:
    """A state; tracks whether it is active, and otherwise does nothing unless overridden."""

    active: bool = False

    def enter(self) -> None:
        """Called when the machine switches to this state."""
        self.active = True

    def update(self, machine: StateMachine) -> None:
        """Called once per control loop while this state is current."""

    def exit(self) -> None:
        """Called when the machine leaves this state."""
        self.active = False


class IdleState(State):
    """A state that holds the robot without acting."""

    def __init__(self, state_id: StateId) -> None:
        self.state_id = state_id


class LineFollowState(State):
    """Follows the line, handing over to avoidance when an obstacle is near."""

    def __init__(self, follower: LineFollower, avoider: ObstacleAvoider) -> None:
        self.follower = follower
        self.avoider = avoider

    def enter(self) -> None:
        super().enter()

    def update(self, machine: StateMachine) -> None:
        if self.avoider.obstacle_detected():
            machine.transition_to(StateId.OBSTACLE_AVOID)
            return
        self.follower.update()


class ObstacleAvoidState(State):
    """Runs the avoidance manoeuvre until the line is seen again."""

    def __init__(self, avoider: ObstacleAvoider, follower: LineFollower) -> None:
        self.avoider = avoider
        self.follower = follower

    def enter(self) -> None:
        super().enter()
        self.avoider.reset()

    def update(self, machine: StateMachine) -> None:
        self.avoider.update()
        if self.follower.is_on_line():
            machine.transition_to(StateId.LINE_FOLLOW)


class StateMachine:
    """Holds one state per StateId and runs the current one."""

    def __init__(
        self,
        follower: LineFollower,
        avoider: ObstacleAvoider,
        overrides: Mapping[StateId, State] | None = None,
    ) -> None:
        self.states: dict[StateId, State] = {
            state_id: IdleState(state_id) for state_id in StateId
        }
        self.states[StateId.LINE_FOLLOW] = LineFollowState(follower, avoider)
        self.states[StateId.OBSTACLE_AVOID] = ObstacleAvoidState(avoider, follower)
        if overrides:
            self.states.update(overrides)
        self.current_id: StateId | None = None

    @property
    def current(self) -> State | None:
        return None if self.current_id is None else self.states[self.current_id]

    def start(self) -> None:
        """Enter the line-following state."""
        self.current_id = StateId.LINE_FOLLOW
        self.states[self.current_id].enter()

    def update(self) -> None:
        state = self.current
        if state is not None:
            state.update(self)

    def transition_to(self, state_id: int) -> None:
        """Leave the current state and enter another; unknown ids go to RAMP_CLIMB."""
        state = self.current
        if state is not None:
            state.exit()
        try:
            next_id = StateId(state_id)
        except ValueError:
            next_id = StateId.RAMP_CLIMB
        self.current_id = next_id
        self.states[next_id].enter()