"""
Wheeled Robot Drivetrain Simulator

This package simulates the motion of a wheeled robot with a pluggable
drivetrain (tank or swerve) and describes its body and wheel velocities
for drawing on a 2D canvas.
"""

from drivesim.body import Arrow, BodyDescription, Line
from drivesim.canvas import PlotlyCanvas, RecordingRenderer
from drivesim.drivetrain import Drivetrain, SwerveDrive, TankDrive, create_drivetrain
from drivesim.errors import (
    DrivesimError,
    InvalidControlInputError,
    InvalidSettingValueError,
    InvalidVectorError,
    RobotFaultedError,
    UnknownDrivetrainError,
    WheelCountMismatchError,
)
from drivesim.geometry import Point, Vector
from drivesim.params import BoundedValue, DrivetrainType, RobotSettings, SimulatorConfig
from drivesim.robot import Robot
from drivesim.simulator import Simulator
from drivesim.state import ControlInput, RobotState, RobotStatus, Wheel

__all__ = [
    "Arrow",
    "BodyDescription",
    "BoundedValue",
    "ControlInput",
    "Drivetrain",
    "DrivetrainType",
    "DrivesimError",
    "InvalidControlInputError",
    "InvalidSettingValueError",
    "InvalidVectorError",
    "Line",
    "PlotlyCanvas",
    "Point",
    "RecordingRenderer",
    "Robot",
    "RobotFaultedError",
    "RobotSettings",
    "RobotState",
    "RobotStatus",
    "Simulator",
    "SimulatorConfig",
    "SwerveDrive",
    "TankDrive",
    "UnknownDrivetrainError",
    "Vector",
    "Wheel",
    "WheelCountMismatchError",
    "create_drivetrain",
]
