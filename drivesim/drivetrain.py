"""
Drivetrain strategies

A drivetrain turns the robot state and the latest operator input into one
velocity vector per wheel, in robot frame and in units per frame. It never
mutates the robot; the robot core applies the result.
"""

from abc import ABC, abstractmethod
import math
from typing import Dict, Sequence, Tuple, Type, Union

import numpy as np

from drivesim.geometry import Vector
from drivesim.params import DrivetrainType, SettingsSnapshot
from drivesim.state import ControlInput, RobotState, Wheel


class Drivetrain(ABC):
    """Shared contract of all drivetrain variants"""

    kind: DrivetrainType

    @abstractmethod
    def wheel_layout(self) -> Tuple[Tuple[float, float], ...]:
        """
        Wheel mounting positions as (rx, ry) fractions of width and length

        The order of this tuple is the order of the robot's wheels and of
        the vectors returned by compute_wheel_vectors.
        """

    @abstractmethod
    def compute_wheel_vectors(
        self, state: RobotState, control: ControlInput, settings: SettingsSnapshot
    ) -> Sequence[Vector]:
        """
        Compute the commanded velocity of every wheel for this tick

        Args:
            state: Current robot state, read only
            control: Operator input for this tick
            settings: Settings snapshot taken at the start of the tick

        Returns:
            One vector per wheel, in wheel order
        """

    @property
    def wheel_count(self) -> int:
        return len(self.wheel_layout())

    def build_wheels(self) -> Tuple[Wheel, ...]:
        return tuple(Wheel(rx, ry) for rx, ry in self.wheel_layout())

    def body_motion(
        self, wheels: Sequence[Wheel], vectors: Sequence[Vector], settings: SettingsSnapshot
    ) -> Tuple[Vector, float]:
        """
        Fit a rigid body motion to the wheel vectors

        Solves, in the least squares sense, v_i = t + w x r_i for every wheel,
        where r_i is the wheel's mounting point. With a clockwise rotation
        rate w this reads v_x = t_x + w * r_y and v_y = t_y - w * r_x.

        Args:
            wheels: The robot's wheels, giving mounting positions
            vectors: Wheel velocities in robot frame, units per frame
            settings: Settings snapshot supplying the body size

        Returns:
            Tuple of (translation per frame in robot frame, clockwise rotation in rad per frame)
        """
        if not wheels:
            return Vector.zero(), 0.0

        rows = []
        rhs = []
        for wheel, vector in zip(wheels, vectors):
            mount = wheel.mount_point(settings.robot_width, settings.robot_length)
            rows.append([1.0, 0.0, mount.y])
            rhs.append(vector.x)
            rows.append([0.0, 1.0, -mount.x])
            rhs.append(vector.y)

        solution, _, _, _ = np.linalg.lstsq(np.array(rows), np.array(rhs), rcond=None)
        tx, ty, omega = (float(v) for v in solution)
        return Vector(tx, ty), omega


class TankDrive(Drivetrain):
    """Two independently driven sides, steering by speed difference"""

    kind = DrivetrainType.TANK

    def wheel_layout(self) -> Tuple[Tuple[float, float], ...]:
        return ((-0.5, 0.0), (0.5, 0.0))  # left, right

    def compute_wheel_vectors(
        self, state: RobotState, control: ControlInput, settings: SettingsSnapshot
    ) -> Sequence[Vector]:
        budget = settings.max_velocity_per_frame
        # Tank wheels only roll along the robot's length; reverse is bearing pi
        return [
            Vector(0.0, control.left * budget),
            Vector(0.0, control.right * budget),
        ]


class SwerveDrive(Drivetrain):
    """Four corner modules, each with its own speed and heading"""

    kind = DrivetrainType.SWERVE

    def __init__(self, field_centric: bool = False) -> None:
        """
        Args:
            field_centric: Interpret strafe/forward in the world frame instead of the robot frame
        """
        self.field_centric = field_centric

    def wheel_layout(self) -> Tuple[Tuple[float, float], ...]:
        return (
            (0.5, 0.5),  # top right
            (0.5, -0.5),  # bottom right
            (-0.5, -0.5),  # bottom left
            (-0.5, 0.5),  # top left
        )

    def compute_wheel_vectors(
        self, state: RobotState, control: ControlInput, settings: SettingsSnapshot
    ) -> Sequence[Vector]:
        budget = settings.max_velocity_per_frame
        translation = Vector(control.strafe, control.forward) * budget
        if self.field_centric:
            translation = translation.rotated(-state.bearing)

        mounts = [
            wheel.mount_point(settings.robot_width, settings.robot_length) for wheel in state.wheels
        ]
        reach = max((math.hypot(m.x, m.y) for m in mounts), default=0.0)
        # Full rotate input spins the outermost wheel at the speed limit
        omega = control.rotate * budget / reach if reach > 0 else 0.0

        vectors = [Vector(translation.x + omega * m.y, translation.y - omega * m.x) for m in mounts]

        peak = max((v.magnitude for v in vectors), default=0.0)
        if peak > budget and peak > 0:
            vectors = [v * (budget / peak) for v in vectors]
        return vectors


DRIVETRAINS: Dict[DrivetrainType, Type[Drivetrain]] = {
    DrivetrainType.TANK: TankDrive,
    DrivetrainType.SWERVE: SwerveDrive,
}


def create_drivetrain(kind: Union[DrivetrainType, str], **options: object) -> Drivetrain:
    """
    Instantiate the strategy registered for a drivetrain type

    Args:
        kind: DrivetrainType or its display name ("Tank", "Swerve")
        **options: Passed to the strategy constructor

    Raises:
        UnknownDrivetrainError: If the name is not registered
    """
    return DRIVETRAINS[DrivetrainType.parse(kind)](**options)  # type: ignore[arg-type]
