"""
Simulation session

Owns the settings, the active robot and the latest operator input, and
drives the robot one tick at a time.
"""

from collections import deque
import logging
import threading
from typing import Callable, Deque, List, Optional, Tuple, Union

import numpy as np

from drivesim.body import BodyDescription
from drivesim.canvas import Renderer
from drivesim.drivetrain import create_drivetrain
from drivesim.geometry import Point
from drivesim.params import DrivetrainType, RobotSettings, SimulatorConfig
from drivesim.robot import Robot
from drivesim.state import ControlInput

logger = logging.getLogger(__name__)


class Simulator:
    """Runs one robot and lets the UI swap its drivetrain and settings between ticks"""

    def __init__(
        self,
        settings: Optional[RobotSettings] = None,
        config: Optional[SimulatorConfig] = None,
        renderer: Optional[Renderer] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        """
        Initialize simulator

        Args:
            settings: Robot tunables, defaults to RobotSettings()
            config: Simulator configuration, defaults to SimulatorConfig()
            renderer: Canvas receiving every tick's body description
            on_error: Observer for errors reported by the robot during a tick
        """
        self.settings = settings or RobotSettings()
        self.config = config or SimulatorConfig()
        self.renderer = renderer
        self.on_error = on_error
        self.controls = ControlInput()
        self.tick_count = 0
        self.errors: List[Exception] = []
        self.history: Deque[Tuple[float, float, float]] = deque(maxlen=self.config.history_length)
        self._lock = threading.RLock()
        self.robot = self._build_robot(self.settings.drivetrain_type)
        self._record_pose()

    @property
    def frame_period_ms(self) -> float:
        return self.config.frame_period_ms

    def _build_robot(
        self, kind: DrivetrainType, position: Optional[Point] = None, bearing: float = 0.0
    ) -> Robot:
        return Robot(
            drivetrain=create_drivetrain(kind),
            settings=self.settings,
            config=self.config,
            renderer=self.renderer,
            position=position,
            bearing=bearing,
            on_error=self._handle_error,
        )

    def _handle_error(self, error: Exception) -> None:
        self.errors.append(error)
        if self.on_error is not None:
            self.on_error(error)

    def _record_pose(self) -> None:
        self.history.append((self.robot.position.x, self.robot.position.y, self.robot.bearing))

    def set_controls(self, controls: ControlInput) -> None:
        """Replace the operator input used from the next tick on"""
        with self._lock:
            self.controls = controls

    def step(self) -> BodyDescription:
        """
        Advance the simulation by one tick

        A drivetrain type written to the settings since the last tick
        replaces the robot before it runs.
        """
        with self._lock:
            if self.settings.drivetrain_type is not self.robot.drivetrain.kind:
                self._replace_robot(self.settings.drivetrain_type)
            body = self.robot.tick(self.controls)
            self.tick_count += 1
            self._record_pose()
            return body

    def run(self, ticks: int) -> Optional[BodyDescription]:
        """Run a number of ticks back to back, returning the last body description"""
        body = None
        for _ in range(ticks):
            body = self.step()
        return body

    def switch_drivetrain(self, kind: Union[DrivetrainType, str]) -> Robot:
        """
        Replace the robot with one using another drivetrain

        The new robot keeps the old position and bearing. The swap happens
        between ticks.

        Args:
            kind: DrivetrainType or its display name

        Returns:
            The new robot

        Raises:
            UnknownDrivetrainError: If kind is not a registered drivetrain
        """
        with self._lock:
            return self._replace_robot(self.settings.set_drivetrain_type(kind))

    def _replace_robot(self, kind: DrivetrainType) -> Robot:
        old = self.robot
        self.robot = self._build_robot(kind, position=old.position, bearing=old.bearing)
        logger.info(
            "Switched drivetrain to %s (%d wheels)", kind.value, self.robot.number_of_wheels
        )
        return self.robot

    def reset_all(self) -> None:
        """Send the robot home and restore default settings"""
        with self._lock:
            self.robot.reset()
            self.history.clear()
            self._record_pose()
            logger.info("Simulation reset")

    def trail(self) -> np.ndarray:
        """Recent world positions as an [N x 2] array"""
        with self._lock:
            if not self.history:
                return np.zeros((0, 2))
            return np.array(self.history)[:, :2]
