"""
Robot tunables and simulator configuration
"""

from dataclasses import dataclass, field, fields
from enum import Enum
import logging
import math
import threading
from typing import Dict, Union

from drivesim.errors import InvalidSettingValueError, UnknownDrivetrainError

logger = logging.getLogger(__name__)


class DrivetrainType(Enum):
    """Wheel arrangement and control strategy of the robot"""

    TANK = "Tank"
    SWERVE = "Swerve"

    @classmethod
    def parse(cls, value: Union["DrivetrainType", str]) -> "DrivetrainType":
        """
        Resolve a drivetrain from an enum member, its value ("Tank") or its name ("TANK")

        Raises:
            UnknownDrivetrainError: If nothing matches
        """
        if isinstance(value, cls):
            return value
        for member in cls:
            if value in (member.value, member.name) or str(value).lower() == member.value.lower():
                return member
        choices = ", ".join(member.value for member in cls)
        raise UnknownDrivetrainError(f"Unknown drivetrain {value!r}, expected one of: {choices}")


@dataclass
class BoundedValue:
    """A numeric setting with a declared range and a default to reset to"""

    name: str
    default: float
    minimum: float
    maximum: float
    value: float = field(init=False)

    def __post_init__(self) -> None:
        if self.minimum > self.maximum:
            raise ValueError(f"{self.name}: minimum {self.minimum} exceeds maximum {self.maximum}")
        self.value = self.validate(self.default)

    def validate(self, value: object) -> float:
        """
        Check a candidate value against the range

        Returns:
            The value as a float

        Raises:
            InvalidSettingValueError: If the value is not a number or lies outside [minimum, maximum]
        """
        if isinstance(value, bool):
            raise InvalidSettingValueError(self.name, value, self.minimum, self.maximum)
        try:
            number = float(value)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise InvalidSettingValueError(self.name, value, self.minimum, self.maximum) from None
        if math.isnan(number) or not self.minimum <= number <= self.maximum:
            raise InvalidSettingValueError(self.name, value, self.minimum, self.maximum)
        return number

    def set(self, value: object) -> float:
        """Validate and store a new value, keeping the old one on failure"""
        self.value = self.validate(value)
        return self.value

    def reset(self) -> None:
        self.value = self.default


@dataclass(frozen=True)
class SettingsSnapshot:
    """Settings as seen by a single tick"""

    max_velocity: float
    robot_width: float
    robot_length: float
    drivetrain_type: DrivetrainType
    frame_period_ms: float

    @property
    def max_velocity_per_frame(self) -> float:
        """Per-second speed limit converted to a per-tick displacement budget"""
        return self.max_velocity * self.frame_period_ms / 1000

    @property
    def half_width(self) -> float:
        return self.robot_width / 2

    @property
    def half_length(self) -> float:
        return self.robot_length / 2


def _max_velocity() -> BoundedValue:
    return BoundedValue("max_velocity", default=500.0, minimum=0.0, maximum=1000.0)


def _robot_width() -> BoundedValue:
    return BoundedValue("robot_width", default=100.0, minimum=50.0, maximum=150.0)


def _robot_length() -> BoundedValue:
    return BoundedValue("robot_length", default=100.0, minimum=50.0, maximum=150.0)


@dataclass
class RobotSettings:
    """
    Live robot tunables shared between the UI and the simulation

    Writes may come from a UI thread; the robot reads a consistent
    snapshot once at the start of each tick.
    """

    max_velocity: BoundedValue = field(default_factory=_max_velocity)  # units/s
    robot_width: BoundedValue = field(default_factory=_robot_width)  # units
    robot_length: BoundedValue = field(default_factory=_robot_length)  # units
    drivetrain_type: DrivetrainType = DrivetrainType.TANK
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    def ranges(self) -> Dict[str, BoundedValue]:
        """All bounded settings keyed by name"""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if isinstance(getattr(self, f.name), BoundedValue)
        }

    def _range(self, name: str) -> BoundedValue:
        try:
            return self.ranges()[name]
        except KeyError:
            raise KeyError(f"No bounded setting named {name!r}") from None

    def get(self, name: str) -> float:
        with self._lock:
            return self._range(name).value

    def set(self, name: str, value: object) -> float:
        """
        Write one bounded setting

        Args:
            name: Setting name, e.g. "max_velocity"
            value: New value

        Returns:
            The stored value

        Raises:
            InvalidSettingValueError: If the value is out of range; the prior value is retained
        """
        with self._lock:
            try:
                return self._range(name).set(value)
            except InvalidSettingValueError as e:
                logger.warning("Rejected setting: %s", e)
                raise

    def update(self, **values: object) -> None:
        """Write several bounded settings at once; nothing changes if any value is invalid"""
        with self._lock:
            ranges = self.ranges()
            checked = {}
            for name, value in values.items():
                try:
                    checked[name] = self._range(name).validate(value)
                except InvalidSettingValueError as e:
                    logger.warning("Rejected setting: %s", e)
                    raise
            for name, value in checked.items():
                ranges[name].value = value

    def set_drivetrain_type(self, kind: Union[DrivetrainType, str]) -> DrivetrainType:
        with self._lock:
            self.drivetrain_type = DrivetrainType.parse(kind)
            return self.drivetrain_type

    def reset_all(self) -> None:
        """Restore every bounded setting to its default; the drivetrain type is kept"""
        with self._lock:
            for bounded in self.ranges().values():
                bounded.reset()

    def snapshot(self, frame_period_ms: float) -> SettingsSnapshot:
        with self._lock:
            return SettingsSnapshot(
                max_velocity=self.max_velocity.value,
                robot_width=self.robot_width.value,
                robot_length=self.robot_length.value,
                drivetrain_type=self.drivetrain_type,
                frame_period_ms=frame_period_ms,
            )


@dataclass
class SimulatorConfig:
    """Fixed simulator parameters"""

    frame_period_ms: float = 20.0  # ms per tick
    strict_wheel_count: bool = False  # raise and fault on a wheel count mismatch
    history_length: int = 500  # poses kept for the trail
    # Drawing constants for wheel arrows and outline
    full_arrow_length: float = 60.0  # arrow length at max_velocity_per_frame
    arrow_width: float = 5.0
    arrow_head_scale: float = 20.0  # head length at max_velocity_per_frame
    arrow_head_angle: float = 45.0 / 360.0 * math.pi  # rad
    outline_width: float = 2.0
    canvas_extent: float = 600.0  # half-size of the visible world square

    def __post_init__(self) -> None:
        if self.frame_period_ms <= 0:
            raise ValueError(f"frame_period_ms must be positive (got {self.frame_period_ms})")
        if self.history_length < 1:
            raise ValueError(f"history_length must be at least 1 (got {self.history_length})")
