"""
Robot state representation
"""

from dataclasses import dataclass, field
from enum import Enum
import math
from typing import Tuple

from drivesim.errors import InvalidControlInputError
from drivesim.geometry import Point, Vector


class RobotStatus(Enum):
    """Lifecycle of the robot core"""

    IDLE = "idle"  # constructed or reset, no tick run yet
    ACTIVE = "active"
    FAULTED = "faulted"  # strict mode only, cleared by reset()


@dataclass
class Wheel:
    """A wheel mounted at a fixed fraction of the robot's width and length"""

    rx: float  # fraction of robot width, +0.5 is the right edge
    ry: float  # fraction of robot length, +0.5 is the front edge
    vector: Vector = field(default_factory=Vector.zero)  # units per frame, robot frame

    def __setattr__(self, name: str, value: object) -> None:
        if name in ("rx", "ry") and name in self.__dict__:
            raise AttributeError(f"Wheel mounting is fixed, cannot change {name}")
        super().__setattr__(name, value)

    def mount_point(self, width: float, length: float) -> Point:
        """Mounting position relative to the robot centre for the given body size"""
        return Point(width * self.rx, length * self.ry)


@dataclass
class RobotState:
    """Pose and wheels of one robot"""

    position: Point = field(default_factory=Point.origin)  # world frame
    bearing: float = 0.0  # rad, clockwise from +y
    wheels: Tuple[Wheel, ...] = ()

    @property
    def number_of_wheels(self) -> int:
        return len(self.wheels)

    def wheel_vectors(self) -> Tuple[Vector, ...]:
        return tuple(wheel.vector for wheel in self.wheels)


def _clamp(name: str, value: float) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise InvalidControlInputError(f"Control input {name} must be finite (got {value!r})")
    return max(-1.0, min(1.0, number))


@dataclass(frozen=True)
class ControlInput:
    """
    Operator input captured for one tick

    Every axis is a fraction of the maximum speed in [-1, 1]; out of range
    values are clamped and non-finite values are rejected.
    """

    left: float = 0.0  # tank, left side
    right: float = 0.0  # tank, right side
    strafe: float = 0.0  # swerve, +x is right
    forward: float = 0.0  # swerve, +y is front
    rotate: float = 0.0  # swerve, positive turns clockwise

    def __post_init__(self) -> None:
        for name in ("left", "right", "strafe", "forward", "rotate"):
            object.__setattr__(self, name, _clamp(name, getattr(self, name)))
