"""
Pytest configuration and shared fixtures for the trajgen tests.

Provides a deterministic Cartesian gantry (joints x, y, z move the tool
directly along the world axes) and a two-joint revolute group, plus request
builders used across the unit tests.
"""

import logging

import numpy as np
import pytest
from spatialmath import SE3

from trajgen.planning.request import Constraints, MotionPlanRequest, StartState
from trajgen.robot_model import CartesianLimits, JointGroup, JointLimitsContainer, PlannerLimits, RobotModel

logger = logging.getLogger(__name__)

GANTRY_GROUP = "gantry"
GANTRY_JOINTS = ("x", "y", "z")
TOOL = "tool0"


class GantryKinematics:
    """
    Exact kinematics of a three-axis gantry with a fixed tool orientation.

    IK ignores the orientation of the requested pose and fails for any pose
    outside the reach box. Every call is recorded for assertions.
    """

    def __init__(self, reach: float = 5.0, tip_link: str = TOOL):
        self.reach = reach
        self.tip_link = tip_link
        self.ik_calls = []
        self.fk_calls = 0

    def solve_fk(self, link_name, joint_state):
        self.fk_calls += 1
        if link_name != self.tip_link:
            return None
        return SE3(*(float(joint_state.get(j, 0.0)) for j in GANTRY_JOINTS))

    def solve_ik(self, group_name, link_name, pose, seed, timeout):
        self.ik_calls.append((group_name, link_name, dict(seed)))
        if link_name != self.tip_link:
            return None
        t = np.asarray(pose.t, dtype=float)
        if np.any(np.abs(t) > self.reach):
            return None
        return dict(zip(GANTRY_JOINTS, (float(v) for v in t)))


class AlwaysColliding:
    def __init__(self):
        self.calls = 0

    def is_colliding(self, robot_model, joint_state, group_name):
        self.calls += 1
        return True


def gantry_limits(max_velocity=1.0, max_acceleration=10.0):
    return JointLimitsContainer.from_dict(
        {
            j: {
                "max_velocity": max_velocity,
                "max_acceleration": max_acceleration,
                "max_deceleration": -max_acceleration,
                "min_position": -5.0,
                "max_position": 5.0,
            }
            for j in GANTRY_JOINTS
        }
    )


@pytest.fixture
def gantry_model():
    group = JointGroup(GANTRY_GROUP, GANTRY_JOINTS, TOOL, frozenset({TOOL}))
    return RobotModel([group], gantry_limits(), model_frame="world", links=("base_link",))


@pytest.fixture
def gantry_kinematics():
    return GantryKinematics()


@pytest.fixture
def cartesian_limits():
    return CartesianLimits(max_trans_vel=0.5, max_trans_acc=1.0, max_trans_dec=-1.0, max_rot_vel=1.0)


@pytest.fixture
def gantry_planner_limits(gantry_model, cartesian_limits):
    return PlannerLimits(gantry_model.joint_limits, cartesian_limits)


@pytest.fixture
def colliding_checker():
    return AlwaysColliding()


@pytest.fixture
def two_joint_model():
    """Group 'arm' with joints j1, j2: position [-3.14, 3.14], velocity 1.0 rad/s."""
    limits = JointLimitsContainer.from_dict(
        {
            "j1": {"max_velocity": 1.0, "min_position": -3.14, "max_position": 3.14},
            "j2": {"max_velocity": 1.0, "min_position": -3.14, "max_position": 3.14},
        }
    )
    return RobotModel([JointGroup("arm", ("j1", "j2"), "flange", frozenset())], limits)


def gantry_request(planner_id="LIN", goal=(0.3, 0.0, 0.0), start=(0.0, 0.0, 0.0), **kwargs):
    """Request moving the gantry from start to a Cartesian goal position."""
    return MotionPlanRequest(
        planner_id=planner_id,
        group_name=GANTRY_GROUP,
        start_state=StartState(list(GANTRY_JOINTS), list(start), [0.0, 0.0, 0.0]),
        goal_constraints=[Constraints.from_pose_goal(TOOL, SE3(*goal))],
        **kwargs,
    )


def joint_request(planner_id, group_name, start, goal, **kwargs):
    return MotionPlanRequest(
        planner_id=planner_id,
        group_name=group_name,
        start_state=StartState(list(start), list(start.values()), [0.0] * len(start)),
        goal_constraints=[Constraints.from_joint_goal(goal)],
        **kwargs,
    )


@pytest.fixture
def make_gantry_request():
    return gantry_request


@pytest.fixture
def make_joint_request():
    return joint_request


@pytest.fixture
def kinematics_factory():
    return GantryKinematics
