"""
Motion core: limit checks, profiles, paths, sampling and trajectory merging.

Key components:
- verify_sample_joint_limits: per-sample velocity/acceleration/deceleration check
- cartesian_trap_velocity_profile: timing of a Cartesian path under scaled limits
- JointTrajectoryGenerator: sample continuous paths or explicit pose sequences
- is_robot_state_equal / is_robot_state_stationary: waypoint comparisons
- determine_and_check_sampling_time / linear_search_intersection_point: blending helpers
- TrajectoryAppender: merge segments without duplicated boundaries
"""

from trajgen.motion.appender import TrajectoryAppender
from trajgen.motion.blending import (
    determine_and_check_sampling_time,
    intersection_found,
    linear_search_intersection_point,
)
from trajgen.motion.limits import verify_sample_joint_limits
from trajgen.motion.paths import CircularPath, GeometricPath, LinearPath
from trajgen.motion.profile import TrapezoidalProfile, cartesian_trap_velocity_profile
from trajgen.motion.sampling import JointTrajectoryGenerator, time_samples
from trajgen.motion.state import is_robot_state_equal, is_robot_state_stationary
from trajgen.motion.types import (
    CartesianTrajectory,
    JointTrajectory,
    JointTrajectoryPoint,
    PoseSample,
    RobotTrajectory,
    WaypointState,
)

__all__ = [
    # Trajectory containers
    "JointTrajectory",
    "JointTrajectoryPoint",
    "PoseSample",
    "CartesianTrajectory",
    "RobotTrajectory",
    "WaypointState",
    # Generation
    "JointTrajectoryGenerator",
    "time_samples",
    "verify_sample_joint_limits",
    "TrapezoidalProfile",
    "cartesian_trap_velocity_profile",
    "GeometricPath",
    "LinearPath",
    "CircularPath",
    # Composition helpers
    "TrajectoryAppender",
    "is_robot_state_equal",
    "is_robot_state_stationary",
    "determine_and_check_sampling_time",
    "intersection_found",
    "linear_search_intersection_point",
]
