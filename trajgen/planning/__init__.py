"""
Motion planning front end: requests, validation and the PTP/LIN/CIRC generators.
"""

from trajgen.planning.generator import (
    MotionPlanner,
    MotionType,
    TrajectoryGenerator,
    create_generator,
    register_generator,
    registered_generators,
)
from trajgen.planning.request import (
    Constraints,
    JointConstraint,
    MotionPlanInfo,
    MotionPlanRequest,
    MotionPlanResponse,
    OrientationConstraint,
    PositionConstraint,
    StartState,
)
from trajgen.planning.validation import RequestValidator, is_scaling_factor_valid

__all__ = [
    "MotionPlanner",
    "MotionType",
    "TrajectoryGenerator",
    "create_generator",
    "register_generator",
    "registered_generators",
    "Constraints",
    "JointConstraint",
    "MotionPlanInfo",
    "MotionPlanRequest",
    "MotionPlanResponse",
    "OrientationConstraint",
    "PositionConstraint",
    "StartState",
    "RequestValidator",
    "is_scaling_factor_valid",
]
