"""
Render-ready description of the robot body

Everything here is in the robot frame; the renderer places it in the world
using the robot's position and bearing.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from drivesim.geometry import Point, Vector
from drivesim.params import SettingsSnapshot, SimulatorConfig
from drivesim.state import Wheel

OUTLINE_COLOR = "black"
FRONT_EDGE_COLOR = "green"
MOVING_COLOR = "blue"
STOPPED_COLOR = "red"


@dataclass(frozen=True)
class Line:
    """Straight segment of the body outline"""

    start: Point
    end: Point
    width: float = 2.0
    color: str = OUTLINE_COLOR


@dataclass(frozen=True)
class Arrow:
    """A wheel velocity drawn from the wheel's mounting point"""

    start: Point
    vector: Vector
    width: float
    head_length: float
    head_angle: float  # rad, half opening of the head
    color: str

    @property
    def end(self) -> Point:
        return self.start + self.vector

    def head(self) -> Tuple[Point, Point]:
        """The two barb end points of the arrow head"""
        tip = self.end
        if self.vector.is_zero() or self.head_length == 0:
            return tip, tip
        back = Vector.polar(self.head_length, self.vector.bearing)
        return (
            tip - back.rotated(self.head_angle),
            tip - back.rotated(-self.head_angle),
        )


@dataclass(frozen=True)
class BodyDescription:
    """Outline lines followed by one arrow per wheel, in wheel order"""

    lines: Tuple[Line, ...]
    arrows: Tuple[Arrow, ...]

    @property
    def primitives(self) -> Tuple[object, ...]:
        return self.lines + self.arrows


def corners(settings: SettingsSnapshot) -> List[Point]:
    """Body corners: top right, bottom right, bottom left, top left"""
    hw = settings.half_width
    hl = settings.half_length
    return [
        Point(hw, hl),
        Point(hw, -hl),
        Point(-hw, -hl),
        Point(-hw, hl),
    ]


def arrow_scale(magnitude: float, settings: SettingsSnapshot) -> float:
    """Wheel speed as a fraction of the per-frame speed limit, 0 when the limit is 0"""
    budget = settings.max_velocity_per_frame
    if budget <= 0:
        return 0.0
    return magnitude / budget


def build_body(
    wheels: Sequence[Wheel], settings: SettingsSnapshot, config: SimulatorConfig
) -> BodyDescription:
    """
    Describe the body outline and wheel arrows

    Args:
        wheels: Wheels whose current vectors are drawn
        settings: Snapshot giving body size and speed limit
        config: Drawing constants

    Returns:
        BodyDescription; the closing top edge is drawn in the front edge colour
    """
    points = corners(settings)
    lines = [
        Line(start=points[i], end=points[i + 1], width=config.outline_width)
        for i in range(3)
    ]
    lines.append(
        Line(start=points[0], end=points[3], width=config.outline_width, color=FRONT_EDGE_COLOR)
    )

    arrows = []
    for wheel in wheels:
        vector = wheel.vector
        scale = arrow_scale(vector.magnitude, settings)
        arrows.append(
            Arrow(
                start=wheel.mount_point(settings.robot_width, settings.robot_length),
                vector=Vector.polar(config.full_arrow_length * scale, vector.bearing),
                width=config.arrow_width,
                head_length=config.arrow_head_scale * abs(scale),
                head_angle=config.arrow_head_angle,
                color=MOVING_COLOR if vector.magnitude > 0 else STOPPED_COLOR,
            )
        )

    return BodyDescription(lines=tuple(lines), arrows=tuple(arrows))
