import pytest

from trajgen.motion.limits import is_accelerating, verify_sample_joint_limits
from trajgen.robot_model import JointLimitsContainer
from trajgen.utils.errors import DegenerateInputError


@pytest.fixture
def limits():
    return JointLimitsContainer.from_dict(
        {
            "j": {"max_velocity": 1.0, "max_acceleration": 2.0, "max_deceleration": -1.0},
            "free": {"max_velocity": 1.0},
        }
    )


def check(limits, last, v_last, current, dl=0.1, dc=0.1, joint="j"):
    return verify_sample_joint_limits({joint: last}, {joint: v_last}, {joint: current}, dl, dc, limits)


def test_is_accelerating_counts_equal_magnitudes():
    assert is_accelerating(0.5, 0.6)
    assert is_accelerating(-0.5, 0.5)
    assert not is_accelerating(0.6, -0.5)


def test_sample_within_limits():
    lim = JointLimitsContainer.from_dict({"j": {"max_velocity": 1.0, "max_acceleration": 2.0}})
    # v = 0.1, a = (0.1 - 0) / 0.2 * 2 = 1.0
    assert check(lim, 0.0, 0.0, 0.01)


def test_velocity_at_limit_is_accepted(limits):
    # v = 1.0 exactly; a = (1.0 - 0.9) / 0.2 * 2 = 1.0
    assert check(limits, 0.0, 0.9, 0.1)


def test_velocity_rounding_above_limit_is_tolerated(limits):
    # v = 1.0000000005 over a 1 s interval: inside the relative slack, rejected by a strict check
    assert check(limits, 0.0, 1.0, 1.0 + 5e-10, dl=1.0, dc=1.0)
    assert not limits.verify_velocity_limit("j", 1.0 + 5e-10)
    assert not check(limits, 0.0, 1.0, 1.0 + 1e-6, dl=1.0, dc=1.0)


def test_velocity_violation(limits):
    assert not check(limits, 0.0, 0.0, 0.2)


def test_acceleration_violation(limits):
    # v = 0.3, a = 3.0 > 2.0
    assert not check(limits, 0.0, 0.0, 0.03)


@pytest.mark.parametrize(
    "current,ok",
    [
        (0.04, True),  # v 0.5 -> 0.4, deceleration 1.0 (at limit)
        (0.03, False),  # v 0.5 -> 0.3, deceleration 2.0 > 1.0
    ],
)
def test_deceleration_uses_deceleration_limit(limits, current, ok):
    assert check(limits, 0.0, 0.5, current) is ok


def test_missing_acceleration_limit_is_not_checked(limits):
    # v jumps 0 -> 1.0 within one sample; only velocity is bounded
    assert check(limits, 0.0, 0.0, 0.1, joint="free")


def test_unequal_intervals_use_half_sum():
    lim = JointLimitsContainer.from_dict({"j": {"max_velocity": 10.0, "max_acceleration": 4.0}})
    # v = 0.05 / 0.05 = 1.0, a = (1.0 - 0.8) / (0.1 + 0.05) * 2 = 2.667
    assert check(lim, 0.0, 0.8, 0.05, dl=0.1, dc=0.05)
    # a = (1.0 - 0.6) / 0.15 * 2 = 5.333 > 4
    assert not check(lim, 0.0, 0.6, 0.05, dl=0.1, dc=0.05)


def test_degenerate_duration_raises(limits):
    with pytest.raises(DegenerateInputError):
        check(limits, 0.0, 0.0, 0.0, dc=1e-6)


def test_first_violating_joint_stops_check(limits, caplog):
    ok = verify_sample_joint_limits(
        {"j": 0.0, "free": 0.0},
        {"j": 0.0, "free": 0.0},
        {"j": 0.5, "free": 0.0},
        0.1,
        0.1,
        limits,
    )
    assert not ok
    assert any("velocity limit of j violated" in r.getMessage() for r in caplog.records)
