"""
Joint trajectory generation from Cartesian paths.

Pipeline per sample (strictly in time order):
  1. Solve IK for the sampled pose, seeded with the previous solution
  2. Verify joint velocity/acceleration/deceleration limits
  3. Append the JointTrajectoryPoint and carry position/velocity forward

Any failure raises and the partially built trajectory is dropped.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from trajgen.config import CHECK_SELF_COLLISION, IK_TIMEOUT_S, SAMPLE_DURATION_EPSILON, TRACE
from trajgen.kinematics import CollisionChecker, KinematicsSolver, compute_pose_ik
from trajgen.motion.limits import verify_sample_joint_limits
from trajgen.motion.paths import GeometricPath
from trajgen.motion.types import CartesianTrajectory, JointTrajectory, JointTrajectoryPoint
from trajgen.robot_model import JointLimitsContainer, JointState, RobotModel
from trajgen.utils.errors import DegenerateInputError, IKError, LimitsViolatedError

logger = logging.getLogger(__name__)


def time_samples(duration: float, sampling_time: float) -> list[float]:
    """
    Sample times 0, dt, 2dt, ... strictly below duration, then duration itself.

    Regular samples closer than SAMPLE_DURATION_EPSILON to the end are dropped
    so the final sample is never added twice.
    """
    if sampling_time <= SAMPLE_DURATION_EPSILON:
        raise DegenerateInputError(f"Sampling time {sampling_time} too small")
    samples: list[float] = []
    i = 0
    while i * sampling_time < duration - SAMPLE_DURATION_EPSILON:
        samples.append(i * sampling_time)
        i += 1
    samples.append(float(duration))
    return samples


class JointTrajectoryGenerator:
    """
    Samples Cartesian paths into limit-checked joint trajectories.

    Holds only the read-only collaborators; every call owns its own seed and
    accumulating trajectory.
    """

    def __init__(
        self,
        robot_model: RobotModel,
        kinematics: KinematicsSolver,
        joint_limits: JointLimitsContainer | None = None,
        collision_checker: CollisionChecker | None = None,
        check_self_collision: bool = CHECK_SELF_COLLISION,
        ik_timeout: float = IK_TIMEOUT_S,
    ):
        self.robot_model = robot_model
        self.kinematics = kinematics
        self.joint_limits = joint_limits if joint_limits is not None else robot_model.joint_limits
        self.collision_checker = collision_checker
        self.check_self_collision = check_self_collision
        self.ik_timeout = ik_timeout

    def _solve(self, group_name: str, link_name: str, pose, seed: Mapping[str, float]) -> JointState | None:
        return compute_pose_ik(
            self.robot_model,
            self.kinematics,
            group_name,
            link_name,
            pose,
            self.robot_model.model_frame,
            seed,
            check_self_collision=self.check_self_collision,
            timeout=self.ik_timeout,
            collision_checker=self.collision_checker,
        )

    def _joint_names(self, group_name: str, initial_joint_position: Mapping[str, float]) -> list[str]:
        names = self.robot_model.active_joint_names(group_name)
        missing = [n for n in names if n not in initial_joint_position]
        if missing:
            raise ValueError(f"Initial joint position lacks active joints {missing} of group '{group_name}'")
        return names

    def sample_path(
        self,
        path: GeometricPath,
        group_name: str,
        link_name: str,
        initial_joint_position: Mapping[str, float],
        sampling_time: float,
    ) -> JointTrajectory:
        """
        Sample a continuous path every sampling_time; the last sample is at path.duration().

        First and last points are at rest. Interior velocities/accelerations
        assume constant acceleration over each interval.

        Raises:
            IKError: A sampled pose has no IK solution
            LimitsViolatedError: A sample exceeds the joint limits
            DegenerateInputError: sampling_time is too small
        """
        logger.debug("Generate joint trajectory from a Cartesian trajectory.")
        generation_begin = time.perf_counter()

        samples = time_samples(path.duration(), sampling_time)
        joint_names = self._joint_names(group_name, initial_joint_position)
        n = len(samples)

        ik_solution_last: JointState = {j: float(initial_joint_position[j]) for j in joint_names}
        joint_velocity_last: JointState = {j: 0.0 for j in joint_names}
        points: list[JointTrajectoryPoint] = []

        for k, t in enumerate(samples):
            pose = path.pose_at(t)
            ik_solution = self._solve(group_name, link_name, pose, ik_solution_last)
            if ik_solution is None:
                logger.error("Failed to compute inverse kinematics solution for sampled Cartesian pose.")
                raise IKError(f"No IK solution for pose sampled at {t:.6g}s")

            # Last interval may be shorter than the sampling time
            duration_current = sampling_time
            if k == n - 1 and n > 1:
                duration_current = t - samples[k - 1]
            if n == 1:
                duration_current = t

            if k > 0 and not verify_sample_joint_limits(
                ik_solution_last,
                joint_velocity_last,
                ik_solution,
                sampling_time,
                duration_current,
                self.joint_limits,
            ):
                logger.error(
                    "Inverse kinematics solution at %ss violates the joint velocity/acceleration/deceleration limits.",
                    t,
                )
                raise LimitsViolatedError(f"Joint limits violated at {t:.6g}s")

            positions: JointState = {}
            velocities: JointState = {}
            accelerations: JointState = {}
            for name in joint_names:
                positions[name] = ik_solution[name]
                if 0 < k < n - 1:
                    distance = ik_solution[name] - ik_solution_last[name]
                    acc = 2 * (distance - joint_velocity_last[name] * duration_current) / duration_current**2
                    vel = joint_velocity_last[name] + acc * duration_current
                else:
                    acc = 0.0
                    vel = 0.0
                velocities[name] = vel
                accelerations[name] = acc
                joint_velocity_last[name] = vel

            points.append(JointTrajectoryPoint(t, positions, velocities, accelerations))
            ik_solution_last = ik_solution
            logger.log(TRACE, "Sample %d/%d at %.4fs: %s", k + 1, n, t, positions)

        self._log_timing(generation_begin, len(points))
        return JointTrajectory(joint_names, points)

    def sample_poses(
        self,
        trajectory: CartesianTrajectory,
        group_name: str,
        initial_joint_position: Mapping[str, float],
        initial_joint_velocity: Mapping[str, float] | None = None,
    ) -> JointTrajectory:
        """
        Convert an explicit pose sequence, one joint point per pose.

        The first pose's time_from_start is its interval from the initial
        state and must therefore be positive. Velocities and accelerations are
        finite differences for every point.

        Raises:
            IKError: A pose has no IK solution
            LimitsViolatedError: A sample exceeds the joint limits
            DegenerateInputError: An interval is too small to differentiate
        """
        logger.debug("Generate joint trajectory from a Cartesian trajectory.")
        generation_begin = time.perf_counter()

        link_name = trajectory.link_name
        joint_names = self._joint_names(group_name, initial_joint_position)
        ik_solution_last: JointState = {j: float(initial_joint_position[j]) for j in joint_names}
        joint_velocity_last: JointState = {
            j: float((initial_joint_velocity or {}).get(j, 0.0)) for j in joint_names
        }
        duration_last = 0.0
        points: list[JointTrajectoryPoint] = []

        for i, sample in enumerate(trajectory.points):
            ik_solution = self._solve(group_name, link_name, sample.pose, ik_solution_last)
            if ik_solution is None:
                logger.error("Failed to compute inverse kinematics solution for sampled Cartesian pose.")
                raise IKError(f"No IK solution for pose sample {i}")

            if i == 0:
                duration_current = sample.time_from_start
                duration_last = duration_current
            else:
                duration_current = sample.time_from_start - trajectory.points[i - 1].time_from_start

            if not verify_sample_joint_limits(
                ik_solution_last,
                joint_velocity_last,
                ik_solution,
                duration_last,
                duration_current,
                self.joint_limits,
            ):
                logger.error(
                    "Inverse kinematics solution of the %dth sample violates the joint "
                    "velocity/acceleration/deceleration limits.",
                    i,
                )
                raise LimitsViolatedError(f"Joint limits violated at sample {i}")

            positions: JointState = {}
            velocities: JointState = {}
            accelerations: JointState = {}
            for name in joint_names:
                positions[name] = ik_solution[name]
                vel = (ik_solution[name] - ik_solution_last[name]) / duration_current
                velocities[name] = vel
                accelerations[name] = (vel - joint_velocity_last[name]) / (duration_current + duration_last) * 2
                joint_velocity_last[name] = vel

            points.append(JointTrajectoryPoint(sample.time_from_start, positions, velocities, accelerations))
            ik_solution_last = ik_solution
            duration_last = duration_current

        self._log_timing(generation_begin, len(points))
        return JointTrajectory(joint_names, points)

    @staticmethod
    def _log_timing(generation_begin: float, n_points: int) -> None:
        duration_ms = (time.perf_counter() - generation_begin) * 1000
        logger.debug(
            "Generate trajectory (N-Points: %d) took %.3f ms | %.3f ms per Point",
            n_points,
            duration_ms,
            duration_ms / max(n_points, 1),
        )
