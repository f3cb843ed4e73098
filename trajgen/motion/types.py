"""
Trajectory containers shared by the samplers, the appender and the planners.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from spatialmath import SE3

from trajgen.robot_model import JointState


@dataclass
class JointTrajectoryPoint:
    """One timestamped joint-space sample."""

    time_from_start: float
    positions: JointState
    velocities: JointState
    accelerations: JointState


@dataclass
class JointTrajectory:
    """
    Ordered joint-space samples over a fixed joint set.

    Every point's maps are keyed by exactly joint_names and time_from_start
    never decreases.
    """

    joint_names: list[str] = field(default_factory=list)
    points: list[JointTrajectoryPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[JointTrajectoryPoint]:
        return iter(self.points)

    def __getitem__(self, idx: int) -> JointTrajectoryPoint:
        return self.points[idx]

    @property
    def duration(self) -> float:
        return self.points[-1].time_from_start if self.points else 0.0

    def positions_array(self) -> NDArray[np.float64]:
        """(N, n_joints) array of positions in joint_names order."""
        return np.array([[p.positions[j] for j in self.joint_names] for p in self.points], dtype=np.float64)

    def velocities_array(self) -> NDArray[np.float64]:
        return np.array([[p.velocities[j] for j in self.joint_names] for p in self.points], dtype=np.float64)

    def times(self) -> NDArray[np.float64]:
        return np.array([p.time_from_start for p in self.points], dtype=np.float64)


@dataclass
class PoseSample:
    """Cartesian sample: rigid transform plus elapsed time from start."""

    pose: SE3
    time_from_start: float


@dataclass
class CartesianTrajectory:
    """Explicit sequence of pose samples with increasing time_from_start."""

    link_name: str
    points: list[PoseSample] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)


@dataclass
class WaypointState:
    """Joint state snapshot of a RobotTrajectory waypoint."""

    positions: JointState
    velocities: JointState = field(default_factory=dict)
    accelerations: JointState = field(default_factory=dict)

    def vector(self, attr: str, joint_names: Sequence[str]) -> NDArray[np.float64]:
        values: Mapping[str, float] = getattr(self, attr)
        return np.array([values.get(j, 0.0) for j in joint_names], dtype=np.float64)


class RobotTrajectory:
    """
    Waypoints of a joint group with their durations from the previous waypoint.

    This is the representation returned in a MotionPlanResponse and merged by
    the TrajectoryAppender.
    """

    def __init__(self, group_name: str, joint_names: Sequence[str]):
        self.group_name = group_name
        self.joint_names = list(joint_names)
        self._waypoints: list[WaypointState] = []
        self._durations: list[float] = []

    @classmethod
    def from_joint_trajectory(
        cls,
        group_name: str,
        joint_trajectory: JointTrajectory,
        start_state: Mapping[str, float] | None = None,
    ) -> RobotTrajectory:
        """
        Convert a JointTrajectory; each waypoint keeps the interval to its predecessor.

        Joints of start_state that are not part of the trajectory are carried
        into every waypoint's positions unchanged.
        """
        traj = cls(group_name, joint_trajectory.joint_names)
        extra = {k: float(v) for k, v in (start_state or {}).items() if k not in joint_trajectory.joint_names}
        t_prev = 0.0
        for point in joint_trajectory.points:
            positions = dict(extra)
            positions.update(point.positions)
            traj.add_suffix_waypoint(
                WaypointState(positions, dict(point.velocities), dict(point.accelerations)),
                point.time_from_start - t_prev,
            )
            t_prev = point.time_from_start
        return traj

    def to_joint_trajectory(self) -> JointTrajectory:
        points = []
        t = 0.0
        for wp, dt in zip(self._waypoints, self._durations):
            t += dt
            points.append(
                JointTrajectoryPoint(
                    time_from_start=t,
                    positions={j: wp.positions[j] for j in self.joint_names},
                    velocities={j: wp.velocities.get(j, 0.0) for j in self.joint_names},
                    accelerations={j: wp.accelerations.get(j, 0.0) for j in self.joint_names},
                )
            )
        return JointTrajectory(list(self.joint_names), points)

    def __len__(self) -> int:
        return len(self._waypoints)

    @property
    def waypoint_count(self) -> int:
        return len(self._waypoints)

    def empty(self) -> bool:
        return not self._waypoints

    def waypoint(self, idx: int) -> WaypointState:
        return self._waypoints[idx]

    def first_waypoint(self) -> WaypointState:
        return self._waypoints[0]

    def last_waypoint(self) -> WaypointState:
        return self._waypoints[-1]

    def duration_from_previous(self, idx: int) -> float:
        return self._durations[idx]

    def durations(self) -> list[float]:
        return list(self._durations)

    @property
    def duration(self) -> float:
        return float(sum(self._durations))

    def add_suffix_waypoint(self, state: WaypointState, dt: float) -> None:
        self._waypoints.append(state)
        self._durations.append(float(dt))

    def append(self, other: RobotTrajectory, dt: float) -> None:
        """Append all waypoints of other; its first waypoint follows after dt."""
        for i in range(other.waypoint_count):
            self.add_suffix_waypoint(other.waypoint(i), dt if i == 0 else other.duration_from_previous(i))

    def clear(self) -> None:
        self._waypoints.clear()
        self._durations.clear()
