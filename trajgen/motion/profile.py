"""
Trapezoidal velocity profiles used to time geometric paths.
"""

import logging

import numpy as np

from trajgen.robot_model import CartesianLimits

logger = logging.getLogger(__name__)


def _trapezoid_timings(distance: float, v_max: float, a_max: float) -> tuple[float, float, float, float, bool]:
    """
    Compute trapezoid or triangular profile timing.

    Returns: (T, t_a, t_c, v_peak, triangular)
      - T: total time
      - t_a: accel time
      - t_c: constant velocity time (0 for triangular)
      - v_peak: peak velocity reached
      - triangular: True if triangular profile (no cruise), else False
    """
    if distance <= 0 or v_max <= 0 or a_max <= 0:
        return 0.0, 0.0, 0.0, 0.0, True

    if np.isinf(a_max):
        # Unbounded acceleration: constant velocity over the whole distance
        T = distance / v_max
        return T, 0.0, T, v_max, False

    t_a = v_max / a_max
    s_a = 0.5 * a_max * t_a**2  # distance covered during accel

    if 2 * s_a < distance:
        # Trapezoidal: accel, cruise, decel
        s_c = distance - 2 * s_a
        t_c = s_c / v_max
        T = 2 * t_a + t_c
        return T, t_a, t_c, v_max, False
    else:
        # Triangular: peak velocity determined by distance
        v_peak = float(np.sqrt(a_max * distance))
        t_a = v_peak / a_max
        T = 2 * t_a
        return T, t_a, 0.0, v_peak, True


class TrapezoidalProfile:
    """
    Rest-to-rest trapezoidal (or triangular) motion over a distance.

    position(t) runs from 0 to distance over [0, duration]. A zero distance
    gives a zero-duration profile that is already at its goal.
    """

    __slots__ = ("distance", "v_max", "a_max", "duration", "t_a", "t_c", "v_peak", "triangular")

    def __init__(self, distance: float, v_max: float, a_max: float):
        self.distance = max(0.0, float(distance))
        self.v_max = float(v_max)
        self.a_max = float(a_max)
        self.duration, self.t_a, self.t_c, self.v_peak, self.triangular = _trapezoid_timings(
            self.distance, self.v_max, self.a_max
        )

    def __repr__(self) -> str:
        return (
            f"TrapezoidalProfile(distance={self.distance:.6g}, duration={self.duration:.6g}, "
            f"t_a={self.t_a:.6g}, t_c={self.t_c:.6g}, v_peak={self.v_peak:.6g})"
        )

    def _phase(self, t: float) -> tuple[int, float]:
        t = min(max(float(t), 0.0), self.duration)
        if t <= self.t_a:
            return 0, t
        if t <= self.t_a + self.t_c:
            return 1, t - self.t_a
        return 2, t - self.t_a - self.t_c

    def position(self, t: float) -> float:
        if self.duration <= 0.0:
            return self.distance
        if t >= self.duration:
            return self.distance
        if t <= 0.0:
            return 0.0
        phase, tau = self._phase(t)
        s_a = 0.5 * self.v_peak * self.t_a
        if phase == 0:
            return 0.5 * self.a_max * tau**2
        if phase == 1:
            return s_a + self.v_peak * tau
        return s_a + self.v_peak * self.t_c + self.v_peak * tau - 0.5 * self.a_max * tau**2

    def velocity(self, t: float) -> float:
        if self.duration <= 0.0 or t <= 0.0 or t >= self.duration:
            return 0.0
        phase, tau = self._phase(t)
        if phase == 0:
            return self.a_max * tau
        if phase == 1:
            return self.v_peak
        return self.v_peak - self.a_max * tau

    def acceleration(self, t: float) -> float:
        if self.duration <= 0.0 or t < 0.0 or t > self.duration:
            return 0.0
        phase, _ = self._phase(t)
        if phase == 0:
            return self.a_max
        if phase == 1:
            return 0.0
        return -self.a_max

    def fraction(self, t: float) -> float:
        """Normalized progress in [0, 1]."""
        if self.distance <= 0.0:
            return 1.0
        return min(1.0, max(0.0, self.position(t) / self.distance))


def cartesian_trap_velocity_profile(
    max_velocity_scaling_factor: float,
    max_acceleration_scaling_factor: float,
    cartesian_limits: CartesianLimits,
    translational_distance: float,
    angular_distance: float,
) -> TrapezoidalProfile:
    """
    Build the profile timing a Cartesian path.

    A translational and a rotational profile are built with the scaled limits;
    the slower one is returned so neither motion exceeds its bound. Its
    fraction(t) is the path progress used to sample poses.
    """
    trans = TrapezoidalProfile(
        translational_distance,
        max_velocity_scaling_factor * cartesian_limits.max_trans_vel,
        max_acceleration_scaling_factor * cartesian_limits.max_trans_acc,
    )
    rot = TrapezoidalProfile(
        angular_distance,
        max_velocity_scaling_factor * cartesian_limits.max_rot_vel,
        max_acceleration_scaling_factor * cartesian_limits.rot_acc,
    )
    profile = trans if trans.duration >= rot.duration else rot
    logger.debug(
        "Cartesian profile: trans %.6g m, rot %.6g rad -> %s limited, duration %.6gs",
        translational_distance,
        angular_distance,
        "translation" if profile is trans else "rotation",
        profile.duration,
    )
    return profile
