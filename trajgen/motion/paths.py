"""
Time-parameterized Cartesian paths.

A path combines a geometric shape with a TrapezoidalProfile; pose_at(t)
evaluates the shape at the profile's progress for time t.
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
from numpy.typing import NDArray
from scipy.spatial.transform import Rotation, Slerp
from spatialmath import SE3

from trajgen.motion.profile import TrapezoidalProfile
from trajgen.utils.errors import InvalidMotionPlanError

logger = logging.getLogger(__name__)

# Geometry below this (m / rad) is treated as degenerate
GEOMETRY_EPSILON = 1e-6


class GeometricPath(Protocol):
    """Continuous path sampled by the joint trajectory generator."""

    def duration(self) -> float: ...

    def pose_at(self, t: float) -> SE3: ...


def angular_distance(start: SE3, goal: SE3) -> float:
    """Rotation angle (rad) between the orientations of two poses."""
    R_rel = start.R.T @ goal.R
    return float(Rotation.from_matrix(R_rel).magnitude())


def _orientation_slerp(start: SE3, goal: SE3) -> Slerp:
    rotations = Rotation.from_matrix(np.stack([start.R, goal.R]))
    return Slerp([0.0, 1.0], rotations)


class LinearPath:
    """Straight line between two poses with slerped orientation."""

    def __init__(self, start: SE3, goal: SE3, profile: TrapezoidalProfile):
        self.start = start
        self.goal = goal
        self.profile = profile
        self._p0 = np.asarray(start.t, dtype=float)
        self._p1 = np.asarray(goal.t, dtype=float)
        self._slerp = _orientation_slerp(start, goal)

    @staticmethod
    def distances(start: SE3, goal: SE3) -> tuple[float, float]:
        """(translational, angular) distance between start and goal."""
        return float(np.linalg.norm(goal.t - start.t)), angular_distance(start, goal)

    def duration(self) -> float:
        return self.profile.duration

    def pose_at(self, t: float) -> SE3:
        s = self.profile.fraction(t)
        position = self._p0 + s * (self._p1 - self._p0)
        R = self._slerp([s]).as_matrix()[0]
        return SE3.Rt(R, position)


class CircularPath:
    """
    Circular arc from start to goal around a center, orientation slerped.

    Build with from_center (shortest arc, center must be equidistant) or
    from_interim (arc passing through an intermediate point).
    """

    def __init__(
        self,
        start: SE3,
        goal: SE3,
        center: NDArray[np.float64],
        normal: NDArray[np.float64],
        angle: float,
        profile: TrapezoidalProfile | None = None,
    ):
        self.start = start
        self.goal = goal
        self.center = np.asarray(center, dtype=float)
        self.normal = np.asarray(normal, dtype=float)
        self.angle = float(angle)
        self.radius = float(np.linalg.norm(np.asarray(start.t) - self.center))
        self.profile = profile
        self._r0 = np.asarray(start.t, dtype=float) - self.center
        self._slerp = _orientation_slerp(start, goal)

    @classmethod
    def from_center(cls, start: SE3, goal: SE3, center) -> CircularPath:
        c = np.asarray(center, dtype=float)
        r0 = np.asarray(start.t, dtype=float) - c
        r1 = np.asarray(goal.t, dtype=float) - c
        n0, n1 = np.linalg.norm(r0), np.linalg.norm(r1)
        if n0 < GEOMETRY_EPSILON or n1 < GEOMETRY_EPSILON:
            raise InvalidMotionPlanError("Start or goal coincides with the circle center")
        if abs(n0 - n1) > max(GEOMETRY_EPSILON, 1e-3 * n0):
            raise InvalidMotionPlanError(
                f"Distances from center to start ({n0:.6g}) and goal ({n1:.6g}) differ"
            )
        axis = np.cross(r0, r1)
        if np.linalg.norm(axis) < GEOMETRY_EPSILON * n0 * n1:
            raise InvalidMotionPlanError("Start, goal and center are colinear, circle plane is undefined")
        normal = axis / np.linalg.norm(axis)
        angle = float(np.arccos(np.clip(np.dot(r0, r1) / (n0 * n1), -1.0, 1.0)))
        return cls(start, goal, c, normal, angle)

    @classmethod
    def from_interim(cls, start: SE3, goal: SE3, interim) -> CircularPath:
        p0 = np.asarray(start.t, dtype=float)
        p1 = np.asarray(goal.t, dtype=float)
        pi = np.asarray(interim, dtype=float)
        u = pi - p0
        v = p1 - p0
        w = np.cross(u, v)
        w2 = float(np.dot(w, w))
        if w2 < GEOMETRY_EPSILON**2:
            raise InvalidMotionPlanError("Start, interim and goal are colinear, circle is undefined")
        center = p0 + (np.dot(u, u) * np.cross(v, w) + np.dot(v, v) * np.cross(w, u)) / (2.0 * w2)
        normal = w / np.sqrt(w2)
        r0 = p0 - center
        r1 = p1 - center
        angle = float(np.arctan2(np.dot(normal, np.cross(r0, r1)), np.dot(r0, r1)))
        if angle <= 0.0:
            angle += 2.0 * np.pi
        return cls(start, goal, center, normal, angle)

    def distances(self) -> tuple[float, float]:
        """(arc length, angular distance) of the path."""
        return self.radius * self.angle, angular_distance(self.start, self.goal)

    def with_profile(self, profile: TrapezoidalProfile) -> CircularPath:
        return CircularPath(self.start, self.goal, self.center, self.normal, self.angle, profile)

    def duration(self) -> float:
        return self.profile.duration if self.profile is not None else 0.0

    def position_at_fraction(self, s: float) -> NDArray[np.float64]:
        rot = Rotation.from_rotvec(self.normal * (self.angle * s))
        return self.center + rot.apply(self._r0)

    def pose_at(self, t: float) -> SE3:
        s = self.profile.fraction(t) if self.profile is not None else 1.0
        R = self._slerp([s]).as_matrix()[0]
        return SE3.Rt(R, self.position_at_fraction(s))
