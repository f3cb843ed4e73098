"""
Helpers for callers combining two generated trajectories (e.g. blending).

  - determine_and_check_sampling_time: common uniform sampling interval
  - linear_search_intersection_point: where a link crosses a sphere boundary
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike

from trajgen.kinematics import KinematicsSolver
from trajgen.motion.types import RobotTrajectory
from trajgen.utils.errors import DegenerateInputError, SamplingTimeMismatchError

logger = logging.getLogger(__name__)


def determine_and_check_sampling_time(
    first_trajectory: RobotTrajectory,
    second_trajectory: RobotTrajectory,
    epsilon: float,
) -> float:
    """
    Return the sampling time shared by both trajectories.

    The last waypoint of each trajectory may close with a shorter interval
    and is ignored. The interval is taken from the first trajectory if it has
    at least two interior intervals, otherwise from the second.

    Raises:
        DegenerateInputError: Neither trajectory has enough points
        SamplingTimeMismatchError: An interior interval differs by more than epsilon
    """
    n1 = first_trajectory.waypoint_count - 1
    n2 = second_trajectory.waypoint_count - 1
    if n1 < 2 and n2 < 2:
        logger.error("Both trajectories do not have enough points to determine sampling time.")
        raise DegenerateInputError("Both trajectories do not have enough points to determine sampling time")

    if n1 >= 2:
        sampling_time = first_trajectory.duration_from_previous(1)
    else:
        sampling_time = second_trajectory.duration_from_previous(1)

    for i in range(1, max(n1, n2)):
        for label, traj, n in (("first", first_trajectory, n1), ("second", second_trajectory, n2)):
            if i < n and abs(sampling_time - traj.duration_from_previous(i)) > epsilon:
                logger.error(
                    "%s trajectory violates sampling time %s between points %d and %d (indices).",
                    label.capitalize(),
                    sampling_time,
                    i - 1,
                    i,
                )
                raise SamplingTimeMismatchError(
                    f"{label} trajectory violates sampling time {sampling_time} between points {i - 1} and {i}",
                    trajectory=label,
                    index=i,
                )

    return sampling_time


def intersection_found(p_center: ArrayLike, p_current: ArrayLike, p_next: ArrayLike, r: float) -> bool:
    """True if p_current is inside or on the sphere and p_next is on or outside it."""
    c = np.asarray(p_center, dtype=float)
    return bool(
        np.linalg.norm(np.asarray(p_current, dtype=float) - c) <= r
        and np.linalg.norm(np.asarray(p_next, dtype=float) - c) >= r
    )


def linear_search_intersection_point(
    kinematics: KinematicsSolver,
    link_name: str,
    center_position: ArrayLike,
    r: float,
    traj: RobotTrajectory,
    inverse_order: bool = False,
) -> int | None:
    """
    Index of the first waypoint where the link leaves the sphere (center, r).

    Forward: first i with waypoint i inside and i+1 outside.
    Backward (inverse_order): scanning from the end, first i with waypoint i
    inside and i-1 outside. Returns None if no such transition exists.
    """
    logger.debug("Start linear search for intersection point.")

    def link_position(i: int) -> np.ndarray:
        pose = kinematics.solve_fk(link_name, traj.waypoint(i).positions)
        if pose is None:
            raise KeyError(f"The target link {link_name} is not known by robot.")
        return np.asarray(pose.t, dtype=float)

    n = traj.waypoint_count
    if inverse_order:
        for i in range(n - 1, 0, -1):
            if intersection_found(center_position, link_position(i), link_position(i - 1), r):
                return i
    else:
        for i in range(0, n - 1):
            if intersection_found(center_position, link_position(i), link_position(i + 1), r):
                return i

    return None
