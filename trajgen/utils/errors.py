"""
Error kinds and exception types for the trajectory generation pipeline.

Each failure condition maps to exactly one ErrorKind. Inside the pipeline the
matching exception is raised; TrajectoryGenerator.generate turns it into a
structured MotionPlanResponse.
"""

from enum import Enum


class ErrorKind(Enum):
    """Failure categories reported in a MotionPlanResponse."""

    SUCCESS = "SUCCESS"
    INVALID_SCALING_FACTOR = "INVALID_SCALING_FACTOR"
    UNKNOWN_GROUP = "UNKNOWN_GROUP"
    INVALID_START_STATE = "INVALID_START_STATE"
    INVALID_GOAL_CONSTRAINTS = "INVALID_GOAL_CONSTRAINTS"
    NO_KINEMATICS_SOLVER = "NO_KINEMATICS_SOLVER"
    NO_SOLUTION_FOUND = "NO_SOLUTION_FOUND"
    LIMITS_VIOLATED = "LIMITS_VIOLATED"
    DEGENERATE_INPUT = "DEGENERATE_INPUT"
    INVALID_LIMITS = "INVALID_LIMITS"
    INVALID_MOTION_PLAN = "INVALID_MOTION_PLAN"


class TrajectoryGenerationError(RuntimeError):
    """Base class for all trajectory generation failures."""

    kind: ErrorKind = ErrorKind.INVALID_MOTION_PLAN
    label: str = "Trajectory Generation Error"

    def __init__(self, message: str):
        self.original_message = message
        super().__init__(f"{self.label}: {message}")

    def __str__(self):
        return f"{self.label}: {self.original_message}"


class InvalidScalingFactorError(TrajectoryGenerationError):
    """Velocity or acceleration scaling factor outside (0.0001, 1.0]."""

    kind = ErrorKind.INVALID_SCALING_FACTOR
    label = "Invalid Scaling Factor"


class UnknownGroupError(TrajectoryGenerationError):
    """Planning group is not part of the robot model."""

    kind = ErrorKind.UNKNOWN_GROUP
    label = "Unknown Group"


class InvalidStartStateError(TrajectoryGenerationError):
    """Start state is empty, mismatched, out of limits or moving."""

    kind = ErrorKind.INVALID_START_STATE
    label = "Invalid Start State"


class InvalidGoalConstraintsError(TrajectoryGenerationError):
    """Goal constraints are missing, ambiguous or out of limits."""

    kind = ErrorKind.INVALID_GOAL_CONSTRAINTS
    label = "Invalid Goal Constraints"


class NoKinematicsSolverError(TrajectoryGenerationError):
    """No inverse kinematics solver configured for the link/group."""

    kind = ErrorKind.NO_KINEMATICS_SOLVER
    label = "No Kinematics Solver"


class IKError(TrajectoryGenerationError):
    """Inverse kinematics failure (no solution, collision, timeout)."""

    kind = ErrorKind.NO_SOLUTION_FOUND
    label = "IK ERROR"


NoSolutionFoundError = IKError


class LimitsViolatedError(TrajectoryGenerationError):
    """A sampled joint velocity, acceleration or deceleration is out of bounds."""

    kind = ErrorKind.LIMITS_VIOLATED
    label = "Limits Violated"


class DegenerateInputError(TrajectoryGenerationError):
    """Input is too small or too short to be differentiated or sampled."""

    kind = ErrorKind.DEGENERATE_INPUT
    label = "Degenerate Input"


class SamplingTimeMismatchError(DegenerateInputError):
    """An interior interval of a trajectory differs from the common sampling time."""

    label = "Sampling Time Mismatch"

    def __init__(self, message: str, trajectory: str, index: int):
        self.trajectory = trajectory
        self.index = index
        super().__init__(message)


class InvalidLimitsError(TrajectoryGenerationError):
    """The robot model lacks a limit required by the generator."""

    kind = ErrorKind.INVALID_LIMITS
    label = "Invalid Limits"


class InvalidMotionPlanError(TrajectoryGenerationError):
    """Motion specific request data could not be turned into a plan."""

    kind = ErrorKind.INVALID_MOTION_PLAN
    label = "Invalid Motion Plan"
