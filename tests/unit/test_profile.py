import math

import numpy as np
import pytest

from trajgen.motion.profile import TrapezoidalProfile, _trapezoid_timings, cartesian_trap_velocity_profile
from trajgen.robot_model import CartesianLimits


@pytest.mark.parametrize(
    "distance,v_max,a_max,expected",
    [
        (0.3, 0.5, 1.0, (1.1, 0.5, 0.1, 0.5, False)),  # trapezoidal
        (0.04, 0.5, 1.0, (0.4, 0.2, 0.0, 0.2, True)),  # triangular
        (0.0, 0.5, 1.0, (0.0, 0.0, 0.0, 0.0, True)),  # no motion
    ],
)
def test_trapezoid_timings(distance, v_max, a_max, expected):
    T, t_a, t_c, v_peak, triangular = _trapezoid_timings(distance, v_max, a_max)
    assert np.allclose([T, t_a, t_c, v_peak], expected[:4])
    assert triangular is expected[4]


def test_unbounded_acceleration_is_constant_velocity():
    p = TrapezoidalProfile(1.0, 2.0, float("inf"))
    assert math.isclose(p.duration, 0.5)
    assert p.position(0.0) == 0.0
    assert math.isclose(p.position(0.25), 0.5)
    assert p.velocity(0.1) == 2.0
    assert p.acceleration(0.1) == 0.0


def test_profile_endpoints_and_monotonic():
    p = TrapezoidalProfile(0.3, 0.5, 1.0)
    ts = np.linspace(0.0, p.duration, 50)
    s = [p.position(t) for t in ts]
    assert s[0] == 0.0
    assert math.isclose(s[-1], 0.3)
    assert np.all(np.diff(s) >= -1e-12)
    assert p.velocity(0.0) == 0.0 and p.velocity(p.duration) == 0.0
    assert max(p.velocity(t) for t in ts) <= 0.5 + 1e-12


def test_profile_phases():
    p = TrapezoidalProfile(0.3, 0.5, 1.0)
    assert math.isclose(p.position(0.5), 0.125)
    assert math.isclose(p.velocity(0.55), 0.5)
    assert p.acceleration(0.25) == 1.0
    assert p.acceleration(0.55) == 0.0
    assert p.acceleration(0.9) == -1.0


def test_zero_distance_fraction_is_complete():
    p = TrapezoidalProfile(0.0, 1.0, 1.0)
    assert p.duration == 0.0
    assert p.fraction(0.0) == 1.0


def test_cartesian_profile_picks_slower_motion():
    limits = CartesianLimits(max_trans_vel=0.5, max_trans_acc=1.0, max_trans_dec=-1.0, max_rot_vel=1.0)

    trans_bound = cartesian_trap_velocity_profile(1.0, 1.0, limits, 0.3, 0.1)
    assert math.isclose(trans_bound.distance, 0.3)

    # rot_acc defaults to 1.0 / 0.5 * 1.0 = 2.0
    rot_bound = cartesian_trap_velocity_profile(1.0, 1.0, limits, 0.01, math.pi)
    assert math.isclose(rot_bound.distance, math.pi)
    assert math.isclose(rot_bound.a_max, 2.0)


def test_cartesian_profile_applies_scaling():
    limits = CartesianLimits(max_trans_vel=0.5, max_trans_acc=1.0, max_trans_dec=-1.0, max_rot_vel=1.0)
    full = cartesian_trap_velocity_profile(1.0, 1.0, limits, 0.3, 0.0)
    half = cartesian_trap_velocity_profile(0.5, 0.5, limits, 0.3, 0.0)
    assert math.isclose(half.v_max, 0.25)
    assert half.duration > full.duration
