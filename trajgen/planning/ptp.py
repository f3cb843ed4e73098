"""
Point-to-point motion in joint space.

All joints start and stop together on one normalized trapezoidal profile
whose velocity/acceleration are the tightest per-joint ratio limit/distance,
so no joint exceeds its own scaled bounds. Joints without acceleration or
deceleration limits do not constrain the ramp.
"""

import logging

from trajgen.motion.limits import verify_sample_joint_limits
from trajgen.motion.profile import TrapezoidalProfile
from trajgen.motion.sampling import time_samples
from trajgen.motion.types import JointTrajectory, JointTrajectoryPoint
from trajgen.planning.generator import MotionType, TrajectoryGenerator, register_generator
from trajgen.planning.request import MotionPlanInfo, MotionPlanRequest
from trajgen.robot_model import JointState
from trajgen.utils.errors import InvalidLimitsError, LimitsViolatedError

logger = logging.getLogger(__name__)


@register_generator(MotionType.PTP)
class PTPTrajectoryGenerator(TrajectoryGenerator):
    """Synchronized joint-space trapezoid from start to goal."""

    def extract_motion_plan_info(self, req: MotionPlanRequest) -> MotionPlanInfo:
        info = MotionPlanInfo(group_name=req.group_name)
        info.start_joint_position = self.start_joint_position(req)

        goal = req.goal_constraints[0]
        if goal.is_joint_goal():
            info.goal_joint_position = {jc.joint_name: float(jc.position) for jc in goal.joint_constraints}
        else:
            info.link_name = goal.position_constraints[0].link_name
            info.goal_pose = goal.goal_pose()
            info.goal_joint_position = self.solve_ik(
                req.group_name, info.link_name, info.goal_pose, info.start_joint_position
            )
        return info

    def _synchronized_profile(
        self,
        joint_names: list[str],
        start: JointState,
        goal: JointState,
        velocity_scaling: float,
        acceleration_scaling: float,
    ) -> TrapezoidalProfile:
        limits = self.planner_limits.joint_limits
        v_norm = float("inf")
        a_norm = float("inf")
        for name in joint_names:
            limit = limits.get_limit(name)
            if not limit.has_velocity_limits or limit.max_velocity <= 0.0:
                raise InvalidLimitsError(f"Joint '{name}' needs a positive velocity limit for PTP")
            # Unbounded ramps collapse the profile to constant velocity
            a_max = float("inf")
            if limit.has_acceleration_limits:
                a_max = abs(limit.max_acceleration)
            if limit.has_deceleration_limits:
                a_max = min(a_max, abs(limit.max_deceleration))
            distance = abs(goal[name] - start[name])
            if distance <= 0.0:
                continue
            v_norm = min(v_norm, limit.max_velocity * velocity_scaling / distance)
            a_norm = min(a_norm, a_max * acceleration_scaling / distance)

        if v_norm == float("inf"):
            # Start equals goal
            return TrapezoidalProfile(0.0, 1.0, 1.0)
        return TrapezoidalProfile(1.0, v_norm, a_norm)

    def plan(self, req: MotionPlanRequest, plan_info: MotionPlanInfo, sampling_time: float) -> JointTrajectory:
        joint_names = self.robot_model.active_joint_names(plan_info.group_name)
        start = plan_info.start_joint_position
        goal = plan_info.goal_joint_position
        profile = self._synchronized_profile(
            joint_names,
            start,
            goal,
            req.max_velocity_scaling_factor,
            req.max_acceleration_scaling_factor,
        )
        logger.debug("PTP profile: %s", profile)

        samples = time_samples(profile.duration, sampling_time)
        n = len(samples)
        points: list[JointTrajectoryPoint] = []
        position_last: JointState = dict(start)
        velocity_last: JointState = {name: 0.0 for name in joint_names}
        duration_last = sampling_time

        for k, t in enumerate(samples):
            s = profile.fraction(t)
            at_rest = k == 0 or k == n - 1
            s_dot = 0.0 if at_rest else profile.velocity(t)
            s_ddot = 0.0 if at_rest else profile.acceleration(t)

            positions = {j: start[j] + (goal[j] - start[j]) * s for j in joint_names}
            if k == n - 1:
                positions = {j: float(goal[j]) for j in joint_names}
            velocities = {j: (goal[j] - start[j]) * s_dot for j in joint_names}
            accelerations = {j: (goal[j] - start[j]) * s_ddot for j in joint_names}

            if k > 0:
                duration_current = t - samples[k - 1]
                if not verify_sample_joint_limits(
                    position_last,
                    velocity_last,
                    positions,
                    duration_last,
                    duration_current,
                    self.planner_limits.joint_limits,
                ):
                    raise LimitsViolatedError(f"PTP sample at {t:.6g}s violates the joint limits")
                duration_last = duration_current

            points.append(JointTrajectoryPoint(t, positions, velocities, accelerations))
            position_last = positions
            velocity_last = velocities

        return JointTrajectory(list(joint_names), points)
