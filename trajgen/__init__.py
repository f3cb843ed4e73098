"""
trajgen Python Package

Industrial motion trajectory generation: PTP, LIN and CIRC primitives sampled
into time-parameterized joint trajectories that respect per-joint velocity,
acceleration and deceleration limits.

Key components:
- MotionPlanner: dispatches a MotionPlanRequest to the PTP/LIN/CIRC generator
- RobotModel / PlannerLimits: robot description and limit tables
- RtbKinematics: IK/FK on top of a roboticstoolbox robot
- JointTrajectoryGenerator: samples Cartesian paths into joint trajectories
- TrajectoryAppender: merges consecutive segments
"""

from ._version import __version__
from .kinematics import RtbKinematics, compute_link_fk, compute_pose_ik
from .motion import JointTrajectoryGenerator, RobotTrajectory, TrajectoryAppender
from .planning import MotionPlanner, MotionPlanRequest, MotionPlanResponse, create_generator
from .robot_model import CartesianLimits, JointLimit, JointLimitsContainer, PlannerLimits, RobotModel

__all__ = [
    "__version__",
    "MotionPlanner",
    "MotionPlanRequest",
    "MotionPlanResponse",
    "create_generator",
    "RobotModel",
    "JointLimit",
    "JointLimitsContainer",
    "CartesianLimits",
    "PlannerLimits",
    "RtbKinematics",
    "compute_pose_ik",
    "compute_link_fk",
    "JointTrajectoryGenerator",
    "RobotTrajectory",
    "TrajectoryAppender",
]
