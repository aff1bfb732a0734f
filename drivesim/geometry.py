"""
Immutable 2D vector and point primitives

Bearings follow the compass convention used throughout the simulator:
0 points along +y (the robot's front) and angles grow clockwise, so a
vector of magnitude m and bearing b has components (m*sin(b), m*cos(b)).
"""

from __future__ import annotations

from dataclasses import dataclass
import math

from drivesim.errors import InvalidVectorError

TWO_PI = 2 * math.pi


def normalize_bearing(bearing: float) -> float:
    """
    Wrap an angle into [0, 2*pi)

    Args:
        bearing: Angle in radians, any real value

    Returns:
        Equivalent angle in [0, 2*pi)
    """
    wrapped = math.fmod(bearing, TWO_PI)
    if wrapped < 0:
        wrapped += TWO_PI
    # fmod of values a hair below a full turn can round up to exactly 2*pi
    if wrapped >= TWO_PI:
        wrapped = 0.0
    return wrapped


@dataclass(frozen=True)
class Vector:
    """Immutable 2D vector, e.g. a wheel velocity in units per frame"""

    x: float = 0.0
    y: float = 0.0

    def __post_init__(self) -> None:
        if not (math.isfinite(self.x) and math.isfinite(self.y)):
            raise InvalidVectorError(f"Vector components must be finite (got {self.x}, {self.y})")

    @classmethod
    def from_cartesian(cls, x: float, y: float) -> Vector:
        return cls(float(x), float(y))

    @classmethod
    def polar(cls, magnitude: float, bearing: float) -> Vector:
        """
        Build a vector from magnitude and compass bearing

        Args:
            magnitude: Length of the vector, must be >= 0
            bearing: Clockwise angle from +y in radians

        Returns:
            The equivalent cartesian vector

        Raises:
            InvalidVectorError: If magnitude is negative or either argument is not finite
        """
        if not (math.isfinite(magnitude) and math.isfinite(bearing)):
            raise InvalidVectorError(
                f"Polar vector needs finite arguments (got {magnitude}, {bearing})"
            )
        if magnitude < 0:
            raise InvalidVectorError(f"Vector magnitude must be non-negative (got {magnitude})")
        return cls(magnitude * math.sin(bearing), magnitude * math.cos(bearing))

    @classmethod
    def zero(cls) -> Vector:
        return cls(0.0, 0.0)

    @property
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)

    @property
    def bearing(self) -> float:
        """Compass bearing in [0, 2*pi), 0 for the zero vector"""
        if self.x == 0 and self.y == 0:
            return 0.0
        return normalize_bearing(math.atan2(self.x, self.y))

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Vector:
        return Vector(-self.x, -self.y)

    def __mul__(self, scalar: float) -> Vector:
        return Vector(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector:
        return self * scalar

    def scaled(self, factor: float) -> Vector:
        return self * factor

    def rotated(self, angle: float) -> Vector:
        """Rotate clockwise by angle (radians)"""
        s = math.sin(angle)
        c = math.cos(angle)
        return Vector(c * self.x + s * self.y, -s * self.x + c * self.y)

    def is_zero(self) -> bool:
        return self.x == 0 and self.y == 0


@dataclass(frozen=True)
class Point:
    """Immutable 2D point"""

    x: float = 0.0
    y: float = 0.0

    @classmethod
    def origin(cls) -> Point:
        return cls(0.0, 0.0)

    def __add__(self, other: Vector | Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Vector:
        return Vector(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Point:
        return self * scalar

    def distance_to(self, other: Point) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


def rotate_point(point: Point, angle: float, origin: Point | None = None) -> Point:
    """
    Rotate a point around another point

    Args:
        point: The point to rotate
        angle: Angle in radians, clockwise rotation
        origin: Centre of the rotation, defaults to (0, 0)

    Returns:
        A new rotated Point
    """
    if origin is None:
        origin = Point.origin()
    offset = (point - origin).rotated(angle)
    return origin + offset
