"""
Motion plan request/response structures.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from spatialmath import SE3, UnitQuaternion

from trajgen.motion.types import RobotTrajectory
from trajgen.robot_model import JointState
from trajgen.utils.errors import ErrorKind


@dataclass
class StartState:
    """Joint state the motion starts from."""

    name: list[str] = field(default_factory=list)
    position: list[float] = field(default_factory=list)
    velocity: list[float] = field(default_factory=list)

    def positions(self) -> JointState:
        return dict(zip(self.name, (float(p) for p in self.position)))


@dataclass
class JointConstraint:
    joint_name: str
    position: float
    tolerance_above: float = 0.0
    tolerance_below: float = 0.0
    weight: float = 1.0


@dataclass
class PositionConstraint:
    """
    Target position of a link.

    primitive_positions holds candidate target points [x, y, z] in frame_id;
    the first one is used.
    """

    link_name: str
    primitive_positions: list[Sequence[float]] = field(default_factory=list)
    frame_id: str = "world"
    weight: float = 1.0


@dataclass
class OrientationConstraint:
    """Target orientation of a link as quaternion [w, x, y, z]."""

    link_name: str
    orientation: Sequence[float] = (1.0, 0.0, 0.0, 0.0)
    frame_id: str = "world"
    weight: float = 1.0


@dataclass
class Constraints:
    name: str = ""
    joint_constraints: list[JointConstraint] = field(default_factory=list)
    position_constraints: list[PositionConstraint] = field(default_factory=list)
    orientation_constraints: list[OrientationConstraint] = field(default_factory=list)

    @classmethod
    def from_joint_goal(cls, goal: dict[str, float]) -> Constraints:
        return cls(joint_constraints=[JointConstraint(name, float(value)) for name, value in goal.items()])

    @classmethod
    def from_pose_goal(cls, link_name: str, pose: SE3, frame_id: str = "world") -> Constraints:
        q = UnitQuaternion(pose.R).vec
        return cls(
            position_constraints=[PositionConstraint(link_name, [list(pose.t)], frame_id)],
            orientation_constraints=[OrientationConstraint(link_name, list(q), frame_id)],
        )

    def is_joint_goal(self) -> bool:
        return len(self.joint_constraints) >= 1

    def is_cartesian_goal(self) -> bool:
        return len(self.position_constraints) == 1 and len(self.orientation_constraints) == 1

    def is_only_one_goal_type(self) -> bool:
        return self.is_joint_goal() != self.is_cartesian_goal()

    def goal_pose(self) -> SE3:
        """Pose from the first primitive position and the orientation constraint."""
        position = np.asarray(self.position_constraints[0].primitive_positions[0], dtype=float)
        R = UnitQuaternion(np.asarray(self.orientation_constraints[0].orientation, dtype=float)).R
        return SE3.Rt(R, position)


@dataclass
class MotionPlanRequest:
    """
    Request for one motion primitive.

    planner_id selects the motion type ("PTP", "LIN", "CIRC"); for CIRC the
    auxiliary point is given as path_constraints named "center" or "interim".
    """

    planner_id: str
    group_name: str
    start_state: StartState
    goal_constraints: list[Constraints] = field(default_factory=list)
    path_constraints: Constraints | None = None
    max_velocity_scaling_factor: float = 1.0
    max_acceleration_scaling_factor: float = 1.0


@dataclass
class MotionPlanInfo:
    """Normalized data extracted from a request, read only during planning."""

    group_name: str
    link_name: str | None = None
    start_pose: SE3 | None = None
    goal_pose: SE3 | None = None
    start_joint_position: JointState = field(default_factory=dict)
    goal_joint_position: JointState = field(default_factory=dict)
    circ_path_point: tuple[str, NDArray[np.float64]] | None = None


@dataclass
class MotionPlanResponse:
    """Outcome of a generate call; trajectory is None on failure."""

    error_kind: ErrorKind
    planning_time: float
    trajectory: RobotTrajectory | None = None
    message: str = ""
    group_name: str = ""
    start_state: StartState | None = None

    @property
    def success(self) -> bool:
        return self.error_kind is ErrorKind.SUCCESS
