"""
Kinematics capability and IK/FK helpers.

The planners only talk to the KinematicsSolver and CollisionChecker protocols.
RtbKinematics implements them on top of a roboticstoolbox robot, using the same
Levenberg-Marquardt solver setup as the controller's IK helpers.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any, Protocol

import numpy as np
from spatialmath import SE3

from trajgen.config import IK_TIMEOUT_S
from trajgen.robot_model import JointState, RobotModel

logger = logging.getLogger(__name__)


class KinematicsSolver(Protocol):
    """Forward/inverse kinematics capability."""

    def solve_ik(
        self,
        group_name: str,
        link_name: str,
        pose: SE3,
        seed: Mapping[str, float],
        timeout: float,
    ) -> JointState | None: ...

    def solve_fk(self, link_name: str, joint_state: Mapping[str, float]) -> SE3 | None: ...


class CollisionChecker(Protocol):
    """Self-collision capability."""

    def is_colliding(self, robot_model: RobotModel, joint_state: Mapping[str, float], group_name: str) -> bool: ...


def unwrap_angles(q_solution, q_current):
    """
    Vectorized unwrap: bring solution angles near current by adding/subtracting 2*pi.
    This minimizes joint motion between consecutive configurations.
    """
    qs = np.asarray(q_solution, dtype=float)
    qc = np.asarray(q_current, dtype=float)
    diff = qs - qc
    q_unwrapped = qs.copy()
    q_unwrapped[diff > np.pi] -= 2 * np.pi
    q_unwrapped[diff < -np.pi] += 2 * np.pi
    return q_unwrapped


def compute_pose_ik(
    robot_model: RobotModel,
    kinematics: KinematicsSolver,
    group_name: str,
    link_name: str,
    pose: SE3,
    frame_id: str,
    seed: Mapping[str, float],
    check_self_collision: bool = False,
    timeout: float = IK_TIMEOUT_S,
    collision_checker: CollisionChecker | None = None,
) -> JointState | None:
    """
    Solve IK for a pose of a link, seeded by a (possibly partial) joint state.

    Returns the solution over the group's active joints, or None if the group
    is unknown, no solver is configured for the link, the frame differs from
    the model frame, the solver finds nothing within the timeout, or the
    solution is in self-collision (only checked when requested).
    """
    if not robot_model.has_group(group_name):
        logger.error("Robot model has no planning group named as %s", group_name)
        return None

    if not robot_model.can_set_state_from_ik(group_name, link_name):
        logger.error("No valid IK solver exists for %s in planning group %s", link_name, group_name)
        return None

    if frame_id != robot_model.model_frame:
        logger.error("Given frame (%s) is unequal to model frame(%s)", frame_id, robot_model.model_frame)
        return None

    active = robot_model.active_joint_names(group_name)
    # Unspecified seed entries default to zero
    full_seed = {name: float(seed.get(name, 0.0)) for name in active}

    solution = kinematics.solve_ik(group_name, link_name, pose, full_seed, timeout)
    if solution is None:
        logger.error("Inverse kinematics for pose %s has no solution.", np.round(pose.t, 6).tolist())
        return None

    result = {name: float(solution[name]) for name in active}

    if check_self_collision:
        if collision_checker is None:
            logger.warning("Self-collision check requested but no collision checker configured")
        elif collision_checker.is_colliding(robot_model, result, group_name):
            logger.error("IK solution for pose %s is in self-collision.", np.round(pose.t, 6).tolist())
            return None

    return result


def compute_link_fk(
    kinematics: KinematicsSolver,
    robot_model: RobotModel,
    link_name: str,
    joint_state: Mapping[str, float],
) -> SE3 | None:
    """Forward kinematics of a link; None if the link is unknown."""
    if not robot_model.has_link(link_name):
        logger.error("The target link %s is not known by robot.", link_name)
        return None
    return kinematics.solve_fk(link_name, joint_state)


class RtbKinematics:
    """
    KinematicsSolver backed by a roboticstoolbox robot.

    Parameters
    ----------
    robot : roboticstoolbox.Robot | DHRobot
        Robot model used for fkine and ets().ik_LM
    joint_names : sequence of str
        Names of the robot joints in chain order
    tip_link : str
        Name under which the end-effector frame is exposed
    mask : sequence of float, optional
        Task-space weights passed to ik_LM (use for robots with fewer than 6 DOF)
    """

    def __init__(
        self,
        robot: Any,
        joint_names: Sequence[str],
        tip_link: str = "tool0",
        mask: Sequence[float] | None = None,
        tol: float = 1e-10,
    ):
        self.robot = robot
        self.joint_names = list(joint_names)
        self.tip_link = tip_link
        self.mask = None if mask is None else np.asarray(mask, dtype=float)
        self.tol = tol

    def _to_vector(self, joint_state: Mapping[str, float]) -> np.ndarray:
        return np.array([float(joint_state.get(name, 0.0)) for name in self.joint_names], dtype=float)

    def solve_fk(self, link_name: str, joint_state: Mapping[str, float]) -> SE3 | None:
        if link_name != self.tip_link:
            return None
        return SE3(self.robot.fkine(self._to_vector(joint_state)))

    def solve_ik(
        self,
        group_name: str,
        link_name: str,
        pose: SE3,
        seed: Mapping[str, float],
        timeout: float,
    ) -> JointState | None:
        if link_name != self.tip_link:
            return None

        current_q = self._to_vector(seed)
        t0 = time.perf_counter()
        result = self.robot.ets().ik_LM(
            pose,
            q0=current_q,
            tol=self.tol,
            mask=self.mask,
            joint_limits=True,
            k=0.0,
            method="sugihara",
        )
        elapsed = time.perf_counter() - t0
        q = result[0]
        success = result[1] > 0

        if success and elapsed > timeout:
            logger.warning("IK for group %s took %.4fs (timeout %.4fs)", group_name, elapsed, timeout)
            success = False
        if not success:
            return None

        # Stay on the branch closest to the seed if the unwrapped solution is still legal
        q_unwrapped = unwrap_angles(q, current_q)
        qlim = getattr(self.robot, "qlim", None)
        if qlim is None or np.all((q_unwrapped >= qlim[0, :]) & (q_unwrapped <= qlim[1, :])):
            q = q_unwrapped
        return {name: float(v) for name, v in zip(self.joint_names, q)}
