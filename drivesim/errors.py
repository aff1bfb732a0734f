"""
Exceptions raised by the drivetrain simulator
"""


class DrivesimError(Exception):
    """Base class for all simulator errors"""


class InvalidVectorError(DrivesimError, ValueError):
    """A vector was requested with a negative or non-finite magnitude"""


class InvalidSettingValueError(DrivesimError, ValueError):
    """A setting write fell outside its declared range"""

    def __init__(self, name: str, value: object, minimum: float, maximum: float) -> None:
        self.name = name
        self.value = value
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(
            f"{name} must be between {minimum:g} and {maximum:g} (got {value!r})"
        )


class WheelCountMismatchError(DrivesimError):
    """A drivetrain returned a different number of vectors than the robot has wheels"""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Number of wheels ({expected}) didn't match robot update output ({actual})."
        )


class RobotFaultedError(DrivesimError):
    """The robot stopped after a fatal update error and must be reset"""


class UnknownDrivetrainError(DrivesimError, KeyError):
    """No drivetrain is registered under the requested name"""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class InvalidControlInputError(DrivesimError, ValueError):
    """An operator input axis was not a finite number"""
