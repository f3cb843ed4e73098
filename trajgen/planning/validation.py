"""
Validation of motion plan requests common to all motion types.
"""

import logging
from collections.abc import Sequence

from trajgen.config import MAX_SCALING_FACTOR, MIN_SCALING_FACTOR, VELOCITY_TOLERANCE
from trajgen.planning.request import Constraints, MotionPlanRequest, StartState
from trajgen.robot_model import RobotModel
from trajgen.utils.errors import (
    InvalidGoalConstraintsError,
    InvalidScalingFactorError,
    InvalidStartStateError,
    NoKinematicsSolverError,
    UnknownGroupError,
)

logger = logging.getLogger(__name__)


def is_scaling_factor_valid(scaling_factor: float) -> bool:
    return MIN_SCALING_FACTOR < scaling_factor <= MAX_SCALING_FACTOR


class RequestValidator:
    """
    Checks a request against the robot model before any sampling.

    Checks run in order and each raises its own error kind:
      1. scaling factors in (0.0001, 1]
      2. known planning group
      3. start state: names given, size matches group, positions in limits, at rest
      4. exactly one goal constraint of exactly one type (joint or Cartesian)
      5. joint goal: same joints as start state, all in group, within limits
      6. Cartesian goal: matching link names, IK solver for link, target pose given
    Nothing is mutated.
    """

    def __init__(self, robot_model: RobotModel):
        self.robot_model = robot_model

    def validate(self, req: MotionPlanRequest) -> None:
        self.check_velocity_scaling(req.max_velocity_scaling_factor)
        self.check_acceleration_scaling(req.max_acceleration_scaling_factor)
        self.check_group_name(req.group_name)
        self.check_start_state(req.start_state, req.group_name)
        self.check_goal_constraints(req.goal_constraints, req.start_state.name, req.group_name)

    @staticmethod
    def check_velocity_scaling(scaling_factor: float) -> None:
        if not is_scaling_factor_valid(scaling_factor):
            raise InvalidScalingFactorError(
                f"Velocity scaling not in range [{MIN_SCALING_FACTOR}, {MAX_SCALING_FACTOR}], "
                f"actual value is: {scaling_factor}"
            )

    @staticmethod
    def check_acceleration_scaling(scaling_factor: float) -> None:
        if not is_scaling_factor_valid(scaling_factor):
            raise InvalidScalingFactorError(
                f"Acceleration scaling not in range [{MIN_SCALING_FACTOR}, {MAX_SCALING_FACTOR}], "
                f"actual value is: {scaling_factor}"
            )

    def check_group_name(self, group_name: str) -> None:
        if not group_name or not self.robot_model.has_group(group_name):
            raise UnknownGroupError(f"Unknown planning group: {group_name}")

    def check_start_state(self, start_state: StartState, group_name: str) -> None:
        if not start_state.name:
            raise InvalidStartStateError("No joint names for start state given.")

        if len(start_state.name) != len(start_state.position):
            raise InvalidStartStateError("Joint state name and position do not match in start state.")

        if len(start_state.name) != len(self.robot_model.active_joint_names(group_name)):
            raise InvalidStartStateError(
                f"Start state has {len(start_state.name)} joints, group '{group_name}' has "
                f"{len(self.robot_model.active_joint_names(group_name))}."
            )

        if len(set(start_state.name)) != len(start_state.name):
            raise InvalidStartStateError(f"Duplicate joint names in start state: {start_state.name}")

        if set(start_state.name) != set(self.robot_model.active_joint_names(group_name)):
            raise InvalidStartStateError(
                f"Start state joints {sorted(start_state.name)} do not match the active joints of group "
                f"'{group_name}': {sorted(self.robot_model.active_joint_names(group_name))}"
            )

        for name, position in zip(start_state.name, start_state.position):
            if not self.robot_model.has_joint(name) or not self.robot_model.satisfies_position_bounds(name, position):
                raise InvalidStartStateError(f"Joint state out of range in start state: {name}={position}")

        # Derived generators do not support a start velocity
        if any(abs(v) > VELOCITY_TOLERANCE for v in start_state.velocity):
            raise InvalidStartStateError("Trajectory Generator does not allow non-zero start velocity")

    def check_goal_constraints(
        self,
        goal_constraints: Sequence[Constraints],
        expected_joint_names: Sequence[str],
        group_name: str,
    ) -> None:
        if len(goal_constraints) != 1:
            raise InvalidGoalConstraintsError("Exactly one goal constraint required")

        constraint = goal_constraints[0]
        if not constraint.is_only_one_goal_type():
            raise InvalidGoalConstraintsError("Only one goal type (joint or Cartesian) allowed")

        if constraint.is_joint_goal():
            self.check_joint_goal_constraint(constraint, expected_joint_names, group_name)
        else:
            self.check_cartesian_goal_constraint(constraint, group_name)

    def check_joint_goal_constraint(
        self,
        constraint: Constraints,
        expected_joint_names: Sequence[str],
        group_name: str,
    ) -> None:
        goal_names = [jc.joint_name for jc in constraint.joint_constraints]
        if len(goal_names) != len(set(goal_names)) or set(goal_names) != set(expected_joint_names):
            raise InvalidGoalConstraintsError("Cannot find joint names of goal constraint in start state")

        group_joints = set(self.robot_model.active_joint_names(group_name))
        for jc in constraint.joint_constraints:
            if jc.joint_name not in group_joints:
                raise InvalidGoalConstraintsError(
                    f"Joint '{jc.joint_name}' does not belong to group '{group_name}'"
                )
            if not self.robot_model.satisfies_position_bounds(jc.joint_name, jc.position):
                raise InvalidGoalConstraintsError(
                    f"Joint '{jc.joint_name}' violates joint limits in goal constraints"
                )

    def check_cartesian_goal_constraint(self, constraint: Constraints, group_name: str) -> None:
        position = constraint.position_constraints[0]
        orientation = constraint.orientation_constraints[0]

        if not position.link_name:
            raise InvalidGoalConstraintsError("Link name of position constraint missing")

        if not orientation.link_name:
            raise InvalidGoalConstraintsError("Link name of orientation constraint missing")

        if position.link_name != orientation.link_name:
            raise InvalidGoalConstraintsError(
                f"Position and orientation constraint name do not match: "
                f"{position.link_name} != {orientation.link_name}"
            )

        if not self.robot_model.can_set_state_from_ik(group_name, position.link_name):
            raise NoKinematicsSolverError(
                f"No IK solver available for link '{position.link_name}' in group '{group_name}'"
            )

        if not position.primitive_positions:
            raise InvalidGoalConstraintsError("Primitive pose in position constraints of goal missing")
