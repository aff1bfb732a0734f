"""
Robot kinematic core

Owns the robot pose and wheels, runs the per-tick update through the active
drivetrain, validates its output, moves the robot and hands a body
description to the renderer.
"""

import logging
from typing import Callable, List, Optional, Sequence

from drivesim.body import BodyDescription, build_body, corners as body_corners
from drivesim.canvas import Renderer
from drivesim.drivetrain import Drivetrain
from drivesim.errors import RobotFaultedError, WheelCountMismatchError
from drivesim.geometry import Point, Vector, normalize_bearing
from drivesim.params import RobotSettings, SettingsSnapshot, SimulatorConfig
from drivesim.state import ControlInput, RobotState, RobotStatus, Wheel

logger = logging.getLogger(__name__)

ErrorObserver = Callable[[Exception], None]


class Robot:
    """A single robot driven by a pluggable drivetrain"""

    def __init__(
        self,
        drivetrain: Drivetrain,
        settings: RobotSettings,
        config: Optional[SimulatorConfig] = None,
        renderer: Optional[Renderer] = None,
        position: Optional[Point] = None,
        bearing: float = 0.0,
        on_error: Optional[ErrorObserver] = None,
    ) -> None:
        """
        Initialize robot

        Args:
            drivetrain: Strategy computing wheel vectors; also fixes the wheel count
            settings: Live tunables, read once at the start of every tick
            config: Simulator configuration (frame period, strict mode, drawing constants)
            renderer: Receives the body description after every tick
            position: Starting position in the world frame, defaults to the origin
            bearing: Starting bearing (rad, clockwise from +y)
            on_error: Called with every error reported during a tick
        """
        self.drivetrain = drivetrain
        self.settings = settings
        self.config = config or SimulatorConfig()
        self.renderer = renderer
        self.on_error = on_error
        self.state = RobotState(
            position=position if position is not None else Point.origin(),
            bearing=normalize_bearing(bearing),
            wheels=drivetrain.build_wheels(),
        )
        self.status = RobotStatus.IDLE
        self.last_error: Optional[Exception] = None

    @property
    def position(self) -> Point:
        return self.state.position

    @position.setter
    def position(self, value: Point) -> None:
        self.state.position = value

    @property
    def bearing(self) -> float:
        return self.state.bearing

    @bearing.setter
    def bearing(self, value: float) -> None:
        self.state.bearing = normalize_bearing(value)

    @property
    def wheels(self) -> Sequence[Wheel]:
        return self.state.wheels

    @property
    def number_of_wheels(self) -> int:
        return self.state.number_of_wheels

    def snapshot(self) -> SettingsSnapshot:
        return self.settings.snapshot(self.config.frame_period_ms)

    @property
    def max_velocity_per_frame(self) -> float:
        return self.snapshot().max_velocity_per_frame

    @property
    def half_width(self) -> float:
        return self.snapshot().half_width

    @property
    def half_length(self) -> float:
        return self.snapshot().half_length

    @property
    def corners(self) -> List[Point]:
        return body_corners(self.snapshot())

    def tick(self, control: Optional[ControlInput] = None) -> BodyDescription:
        """
        Run one simulation step

        Args:
            control: Operator input for this tick, defaults to no input

        Returns:
            The body description handed to the renderer

        Raises:
            WheelCountMismatchError: In strict mode, when the drivetrain output has the wrong length
            RobotFaultedError: If a previous strict-mode failure has not been cleared by reset()
        """
        if self.status is RobotStatus.FAULTED:
            raise RobotFaultedError(f"Robot is faulted ({self.last_error}); call reset() first")

        control = control or ControlInput()
        snapshot = self.snapshot()
        vectors = list(self.drivetrain.compute_wheel_vectors(self.state, control, snapshot))

        if len(vectors) != self.number_of_wheels:
            error = WheelCountMismatchError(self.number_of_wheels, len(vectors))
            self._report(error)
            if self.config.strict_wheel_count:
                self.status = RobotStatus.FAULTED
                logger.error("Robot faulted: %s", error)
                raise error
            logger.warning("Skipping wheel update: %s", error)
        else:
            for wheel, vector in zip(self.state.wheels, vectors):
                wheel.vector = vector
            self._integrate(vectors, snapshot)
            self.last_error = None

        self.status = RobotStatus.ACTIVE
        body = self.build_body(snapshot)
        if self.renderer is not None:
            self.renderer.render(body, self.state.position, self.state.bearing)
        return body

    def _integrate(self, vectors: Sequence[Vector], snapshot: SettingsSnapshot) -> None:
        """Move the robot by one frame of the rigid body motion fitted to the wheel vectors"""
        translation, rotation = self.drivetrain.body_motion(self.state.wheels, vectors, snapshot)
        self.state.position = self.state.position + translation.rotated(self.state.bearing)
        self.state.bearing = normalize_bearing(self.state.bearing + rotation)

    def _report(self, error: Exception) -> None:
        self.last_error = error
        if self.on_error is not None:
            self.on_error(error)

    def build_body(self, snapshot: Optional[SettingsSnapshot] = None) -> BodyDescription:
        """Describe the outline and wheel arrows for the current state, without side effects"""
        return build_body(self.state.wheels, snapshot or self.snapshot(), self.config)

    def reset(self) -> None:
        """Return to the origin facing forward with stopped wheels and default settings"""
        self.state.position = Point.origin()
        self.state.bearing = 0.0
        for wheel in self.state.wheels:
            wheel.vector = Vector.zero()
        self.settings.reset_all()
        self.status = RobotStatus.IDLE
        self.last_error = None
