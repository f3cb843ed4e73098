"""
Linear Cartesian motion of the controlled link.
"""

import logging

from trajgen.motion.paths import LinearPath
from trajgen.motion.types import JointTrajectory
from trajgen.planning.generator import MotionType, TrajectoryGenerator, register_generator
from trajgen.planning.request import MotionPlanInfo, MotionPlanRequest
from trajgen.utils.errors import InvalidMotionPlanError

logger = logging.getLogger(__name__)


@register_generator(MotionType.LIN)
class LINTrajectoryGenerator(TrajectoryGenerator):
    """
    Straight line from the start pose to the goal pose.

    A joint goal is turned into its pose of the group's tip link. Orientation
    is slerped with the same progress as the translation.
    """

    def extract_motion_plan_info(self, req: MotionPlanRequest) -> MotionPlanInfo:
        info = MotionPlanInfo(group_name=req.group_name)
        info.start_joint_position = self.start_joint_position(req)

        goal = req.goal_constraints[0]
        if goal.is_joint_goal():
            info.link_name = self.robot_model.tip_link(req.group_name)
            if not info.link_name:
                raise InvalidMotionPlanError(f"Group '{req.group_name}' has no tip link for a LIN motion")
            info.goal_joint_position = {jc.joint_name: float(jc.position) for jc in goal.joint_constraints}
            info.goal_pose = self.link_pose(info.link_name, info.goal_joint_position)
        else:
            info.link_name = goal.position_constraints[0].link_name
            info.goal_pose = goal.goal_pose()

        info.start_pose = self.link_pose(info.link_name, info.start_joint_position)
        return info

    def plan(self, req: MotionPlanRequest, plan_info: MotionPlanInfo, sampling_time: float) -> JointTrajectory:
        translation, rotation = LinearPath.distances(plan_info.start_pose, plan_info.goal_pose)
        logger.debug("LIN distances: %.6g m, %.6g rad", translation, rotation)

        profile = self.cartesian_trap_velocity_profile(
            req.max_velocity_scaling_factor,
            req.max_acceleration_scaling_factor,
            translation,
            rotation,
        )
        path = LinearPath(plan_info.start_pose, plan_info.goal_pose, profile)
        return self.sampler.sample_path(
            path,
            plan_info.group_name,
            plan_info.link_name,
            plan_info.start_joint_position,
            sampling_time,
        )
