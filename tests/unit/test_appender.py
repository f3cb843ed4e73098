import math

import pytest

from trajgen.motion.appender import TrajectoryAppender
from trajgen.motion.state import is_robot_state_equal, is_robot_state_stationary
from trajgen.motion.types import RobotTrajectory, WaypointState

JOINTS = ["j1", "j2"]


def wp(p1, p2, v=(0.0, 0.0), a=(0.0, 0.0)):
    return WaypointState({"j1": p1, "j2": p2}, dict(zip(JOINTS, v)), dict(zip(JOINTS, a)))


def trajectory(*positions, dt=0.1):
    traj = RobotTrajectory("arm", JOINTS)
    for i, (p1, p2) in enumerate(positions):
        traj.add_suffix_waypoint(wp(p1, p2), 0.0 if i == 0 else dt)
    return traj


@pytest.mark.parametrize(
    "other,equal",
    [
        (wp(1.0, 2.0), True),
        (wp(1.0, 2.00005), True),
        (wp(1.0, 2.001), False),
        (wp(1.0, 2.0, v=(0.01, 0.0)), False),
        (wp(1.0, 2.0, a=(0.0, 0.01)), False),
    ],
)
def test_is_robot_state_equal(other, equal):
    assert is_robot_state_equal(wp(1.0, 2.0), other, JOINTS, 1e-4) is equal


def test_is_robot_state_stationary():
    assert is_robot_state_stationary(wp(3.0, -3.0), JOINTS, 1e-4)
    assert not is_robot_state_stationary(wp(0.0, 0.0, v=(0.0, 0.1)), JOINTS, 1e-4)
    assert not is_robot_state_stationary(wp(0.0, 0.0, a=(0.1, 0.0)), JOINTS, 1e-4)


def test_merge_drops_shared_boundary():
    result = trajectory((0.0, 0.0), (0.1, 0.0), (0.2, 0.0))
    source = trajectory((0.2, 0.0), (0.3, 0.0), dt=0.2)

    TrajectoryAppender().merge(result, source)

    assert result.waypoint_count == 4
    assert result.last_waypoint().positions["j1"] == 0.3
    assert result.duration_from_previous(3) == 0.2
    assert math.isclose(result.duration, 0.4)


def test_merge_different_boundary_appends_everything():
    result = trajectory((0.0, 0.0), (0.1, 0.0))
    source = trajectory((0.5, 0.0), (0.6, 0.0))

    TrajectoryAppender().merge(result, source)

    assert result.waypoint_count == 4
    assert result.waypoint(2).positions["j1"] == 0.5
    assert result.duration_from_previous(2) == 0.0


def test_merge_into_empty_result():
    result = RobotTrajectory("arm", JOINTS)
    TrajectoryAppender().merge(result, trajectory((0.0, 0.0), (0.1, 0.0)))
    assert result.waypoint_count == 2


def test_merge_empty_source_is_noop():
    result = trajectory((0.0, 0.0), (0.1, 0.0))
    TrajectoryAppender().merge(result, RobotTrajectory("arm", JOINTS))
    assert result.waypoint_count == 2


def test_merge_respects_epsilon():
    result = trajectory((0.0, 0.0), (0.2, 0.0))
    source = trajectory((0.2005, 0.0), (0.3, 0.0))

    TrajectoryAppender(epsilon=1e-4).merge(result, source)
    assert result.waypoint_count == 4

    result = trajectory((0.0, 0.0), (0.2, 0.0))
    TrajectoryAppender(epsilon=1e-2).merge(result, source)
    assert result.waypoint_count == 3
