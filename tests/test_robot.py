"""
Unit tests for the robot kinematic core.

Tests the per-tick update, wheel count validation, body building and reset.
"""

import math
from typing import List, Sequence

import pytest

from drivesim.canvas import RecordingRenderer
from drivesim.drivetrain import SwerveDrive, TankDrive
from drivesim.errors import RobotFaultedError, WheelCountMismatchError
from drivesim.geometry import Point, Vector
from drivesim.params import DrivetrainType, RobotSettings, SettingsSnapshot, SimulatorConfig
from drivesim.robot import Robot
from drivesim.state import ControlInput, RobotState, RobotStatus

FORWARD = ControlInput(left=1.0, right=1.0)


class MiscountedDrive(TankDrive):
    """Tank drive that returns one vector too many once broken"""

    def __init__(self) -> None:
        self.broken = False

    def compute_wheel_vectors(
        self, state: RobotState, control: ControlInput, settings: SettingsSnapshot
    ) -> Sequence[Vector]:
        vectors = list(super().compute_wheel_vectors(state, control, settings))
        if self.broken:
            vectors.append(Vector.zero())
        return vectors


class TestRobotTick:
    """Test suite for Robot.tick"""

    @pytest.fixture
    def settings(self) -> RobotSettings:
        return RobotSettings()

    @pytest.fixture
    def renderer(self) -> RecordingRenderer:
        return RecordingRenderer()

    @pytest.fixture
    def robot(self, settings: RobotSettings, renderer: RecordingRenderer) -> Robot:
        """Tank robot with a 10 unit per-frame budget"""
        return Robot(TankDrive(), settings, SimulatorConfig(), renderer=renderer)

    def test_initial_state(self, robot: Robot) -> None:
        """Test that a new robot is idle at the origin with stopped wheels"""
        assert robot.status is RobotStatus.IDLE
        assert robot.position == Point(0.0, 0.0)
        assert robot.bearing == 0.0
        assert robot.number_of_wheels == 2
        assert all(wheel.vector == Vector.zero() for wheel in robot.wheels)

    def test_tick_applies_vectors(self, robot: Robot) -> None:
        """Test that wheel vectors are stored in wheel order"""
        robot.tick(ControlInput(left=1.0, right=0.5))

        assert robot.wheels[0].vector == Vector(0.0, 10.0)
        assert robot.wheels[1].vector == Vector(0.0, 5.0)
        assert robot.status is RobotStatus.ACTIVE

    def test_tick_renders(self, robot: Robot, renderer: RecordingRenderer) -> None:
        """Test that every tick hands the body and pose to the renderer"""
        body = robot.tick(FORWARD)

        assert len(renderer.frames) == 1
        rendered, position, bearing = renderer.frames[0]
        assert rendered == body
        assert position == robot.position
        assert bearing == robot.bearing

    def test_tick_without_input(self, robot: Robot) -> None:
        """Test that a tick without input leaves the robot still"""
        robot.tick()

        assert robot.position == Point(0.0, 0.0)
        assert robot.status is RobotStatus.ACTIVE

    def test_tick_moves_forward(self, robot: Robot) -> None:
        """Test that equal sides move the robot one budget along its bearing"""
        robot.tick(FORWARD)
        robot.tick(FORWARD)

        assert robot.position.x == pytest.approx(0.0, abs=1e-9)
        assert robot.position.y == pytest.approx(20.0)
        assert math.sin(robot.bearing) == pytest.approx(0.0, abs=1e-9)
        assert math.cos(robot.bearing) == pytest.approx(1.0)

    def test_motion_follows_bearing(self, settings: RobotSettings) -> None:
        """Test that forward motion is rotated into the world frame"""
        robot = Robot(TankDrive(), settings, bearing=math.pi / 2)

        robot.tick(FORWARD)

        assert (robot.position.x, robot.position.y) == pytest.approx((10.0, 0.0), abs=1e-9)

    def test_spin_in_place(self, robot: Robot) -> None:
        """Test that opposite sides turn without translating"""
        robot.tick(ControlInput(left=1.0, right=-1.0))

        assert robot.position.x == pytest.approx(0.0, abs=1e-9)
        assert robot.position.y == pytest.approx(0.0, abs=1e-9)
        assert robot.bearing == pytest.approx(0.2)

    def test_settings_read_each_tick(self, robot: Robot, settings: RobotSettings) -> None:
        """Test that a settings change applies from the next tick"""
        robot.tick(FORWARD)
        settings.set("max_velocity", 1000)
        robot.tick(FORWARD)

        assert robot.wheels[0].vector == Vector(0.0, 20.0)

    def test_max_velocity_per_frame(self, robot: Robot, settings: RobotSettings) -> None:
        """Test the per-frame budget at 600 units/s and 20ms"""
        settings.set("max_velocity", 600)

        assert robot.max_velocity_per_frame == pytest.approx(12.0)

    def test_full_speed_renders_full_arrow(self, robot: Robot, settings: RobotSettings) -> None:
        """Test that a wheel at the budget draws the full-length arrow"""
        settings.set("max_velocity", 600)

        body = robot.tick(ControlInput(left=1.0, right=0.0))

        assert robot.wheels[0].vector.magnitude == pytest.approx(12.0)
        assert body.arrows[0].vector.magnitude == pytest.approx(60.0)
        assert body.arrows[1].vector.magnitude == 0.0
        assert body.arrows[1].color == "red"

    def test_bearing_setter_normalizes(self, robot: Robot) -> None:
        """Test that bearings are kept in [0, 2*pi)"""
        robot.bearing = -math.pi / 2

        assert robot.bearing == pytest.approx(3 * math.pi / 2)

    def test_wheel_mounting_fixed(self, robot: Robot) -> None:
        """Test that wheel positions cannot change after construction"""
        with pytest.raises(AttributeError):
            robot.wheels[0].rx = 0.25


class TestWheelCountMismatch:
    """Test suite for drivetrain output validation"""

    @pytest.fixture
    def drivetrain(self) -> MiscountedDrive:
        return MiscountedDrive()

    @pytest.fixture
    def renderer(self) -> RecordingRenderer:
        return RecordingRenderer()

    def test_lenient_mode_keeps_prior_vectors(
        self, drivetrain: MiscountedDrive, renderer: RecordingRenderer
    ) -> None:
        """Test that a mismatch is reported and the previous vectors kept"""
        errors: List[Exception] = []
        robot = Robot(drivetrain, RobotSettings(), renderer=renderer, on_error=errors.append)
        robot.tick(ControlInput(left=0.5, right=0.5))
        position = robot.position

        drivetrain.broken = True
        robot.tick(FORWARD)

        assert robot.wheels[0].vector == Vector(0.0, 5.0)
        assert robot.wheels[1].vector == Vector(0.0, 5.0)
        assert robot.position == position
        assert robot.status is RobotStatus.ACTIVE
        assert len(renderer.frames) == 2
        assert len(errors) == 1
        assert isinstance(errors[0], WheelCountMismatchError)
        assert (errors[0].expected, errors[0].actual) == (2, 3)
        assert robot.last_error is errors[0]

    def test_lenient_mode_recovers(self, drivetrain: MiscountedDrive) -> None:
        """Test that the robot keeps running once the drivetrain behaves again"""
        robot = Robot(drivetrain, RobotSettings())
        drivetrain.broken = True
        robot.tick(FORWARD)

        drivetrain.broken = False
        robot.tick(FORWARD)

        assert robot.wheels[0].vector == Vector(0.0, 10.0)

    def test_strict_mode_faults(
        self, drivetrain: MiscountedDrive, renderer: RecordingRenderer
    ) -> None:
        """Test that strict mode raises, skips rendering and faults the robot"""
        robot = Robot(
            drivetrain,
            RobotSettings(),
            SimulatorConfig(strict_wheel_count=True),
            renderer=renderer,
        )
        drivetrain.broken = True

        with pytest.raises(WheelCountMismatchError):
            robot.tick(FORWARD)

        assert robot.status is RobotStatus.FAULTED
        assert renderer.frames == []
        assert all(wheel.vector == Vector.zero() for wheel in robot.wheels)

        with pytest.raises(RobotFaultedError):
            robot.tick(FORWARD)

    def test_reset_clears_fault(self, drivetrain: MiscountedDrive) -> None:
        """Test that reset returns a faulted robot to idle"""
        robot = Robot(drivetrain, RobotSettings(), SimulatorConfig(strict_wheel_count=True))
        drivetrain.broken = True
        with pytest.raises(WheelCountMismatchError):
            robot.tick(FORWARD)

        robot.reset()
        drivetrain.broken = False
        robot.tick(FORWARD)

        assert robot.status is RobotStatus.ACTIVE


class TestBuildBodyAndReset:
    """Test suite for build_body and reset"""

    @pytest.fixture
    def settings(self) -> RobotSettings:
        return RobotSettings()

    @pytest.fixture
    def robot(self, settings: RobotSettings) -> Robot:
        return Robot(SwerveDrive(), settings)

    def test_build_body_is_pure(self, robot: Robot) -> None:
        """Test that building the body twice gives the same result and changes nothing"""
        robot.tick(ControlInput(forward=0.5, rotate=0.3))
        position = robot.position
        vectors = robot.state.wheel_vectors()

        first = robot.build_body()
        second = robot.build_body()

        assert first == second
        assert robot.position == position
        assert robot.state.wheel_vectors() == vectors

    def test_corners_and_half_sizes(self, robot: Robot, settings: RobotSettings) -> None:
        """Test derived body dimensions"""
        settings.update(robot_width=80, robot_length=120)

        assert robot.half_width == 40.0
        assert robot.half_length == 60.0
        assert robot.corners[2] == Point(-40.0, -60.0)

    def test_reset(self, robot: Robot, settings: RobotSettings) -> None:
        """Test that reset restores pose and settings but keeps the drivetrain"""
        settings.set_drivetrain_type(DrivetrainType.SWERVE)
        drivetrain = robot.drivetrain
        for _ in range(5):
            robot.tick(ControlInput(strafe=0.4, forward=1.0, rotate=0.2))
        settings.update(max_velocity=900, robot_width=60)

        robot.reset()

        assert robot.position == Point(0.0, 0.0)
        assert robot.bearing == 0.0
        assert robot.status is RobotStatus.IDLE
        assert settings.max_velocity.value == 500.0
        assert settings.robot_width.value == 100.0
        assert settings.drivetrain_type is DrivetrainType.SWERVE
        assert robot.drivetrain is drivetrain
        assert robot.number_of_wheels == 4

    def test_reset_idempotent(self, robot: Robot, settings: RobotSettings) -> None:
        """Test that resetting twice matches resetting once"""
        robot.tick(ControlInput(forward=1.0, rotate=1.0))
        settings.set("robot_length", 55)

        robot.reset()
        once = (robot.position, robot.bearing, robot.status, settings.snapshot(20.0),
                robot.state.wheel_vectors())
        robot.reset()
        twice = (robot.position, robot.bearing, robot.status, settings.snapshot(20.0),
                 robot.state.wheel_vectors())

        assert once == twice
