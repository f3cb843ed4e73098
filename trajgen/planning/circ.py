"""
Circular Cartesian motion of the controlled link.

The arc is defined by an auxiliary point given as path constraint, named
either "center" (circle center, shortest arc) or "interim" (a point the
arc passes through).
"""

import logging

import numpy as np

from trajgen.motion.paths import CircularPath
from trajgen.motion.types import JointTrajectory
from trajgen.planning.generator import MotionType, TrajectoryGenerator, register_generator
from trajgen.planning.request import MotionPlanInfo, MotionPlanRequest
from trajgen.utils.errors import InvalidMotionPlanError

logger = logging.getLogger(__name__)

CIRC_AUX_NAMES = ("center", "interim")


@register_generator(MotionType.CIRC)
class CIRCTrajectoryGenerator(TrajectoryGenerator):
    """Arc from start pose to goal pose through/around the auxiliary point."""

    def cmd_specific_request_validation(self, req: MotionPlanRequest) -> None:
        aux = req.path_constraints
        if aux is None or aux.name not in CIRC_AUX_NAMES:
            raise InvalidMotionPlanError("No path constraint named 'center' or 'interim' given for CIRC")
        if len(aux.position_constraints) != 1 or not aux.position_constraints[0].primitive_positions:
            raise InvalidMotionPlanError(f"Path constraint '{aux.name}' needs exactly one position")

    def extract_motion_plan_info(self, req: MotionPlanRequest) -> MotionPlanInfo:
        info = MotionPlanInfo(group_name=req.group_name)
        info.start_joint_position = self.start_joint_position(req)

        goal = req.goal_constraints[0]
        if goal.is_joint_goal():
            info.link_name = self.robot_model.tip_link(req.group_name)
            if not info.link_name:
                raise InvalidMotionPlanError(f"Group '{req.group_name}' has no tip link for a CIRC motion")
            info.goal_joint_position = {jc.joint_name: float(jc.position) for jc in goal.joint_constraints}
            info.goal_pose = self.link_pose(info.link_name, info.goal_joint_position)
        else:
            info.link_name = goal.position_constraints[0].link_name
            info.goal_pose = goal.goal_pose()

        aux = req.path_constraints
        aux_link = aux.position_constraints[0].link_name
        if aux_link and aux_link != info.link_name:
            raise InvalidMotionPlanError(
                f"Path constraint link '{aux_link}' does not match the goal link '{info.link_name}'"
            )
        point = np.asarray(aux.position_constraints[0].primitive_positions[0], dtype=float)
        info.circ_path_point = (aux.name, point)
        info.start_pose = self.link_pose(info.link_name, info.start_joint_position)
        return info

    def plan(self, req: MotionPlanRequest, plan_info: MotionPlanInfo, sampling_time: float) -> JointTrajectory:
        kind, point = plan_info.circ_path_point
        if kind == "center":
            arc = CircularPath.from_center(plan_info.start_pose, plan_info.goal_pose, point)
        else:
            arc = CircularPath.from_interim(plan_info.start_pose, plan_info.goal_pose, point)

        arc_length, rotation = arc.distances()
        logger.debug("CIRC %s arc: radius %.6g m, angle %.6g rad", kind, arc.radius, arc.angle)

        profile = self.cartesian_trap_velocity_profile(
            req.max_velocity_scaling_factor,
            req.max_acceleration_scaling_factor,
            arc_length,
            rotation,
        )
        return self.sampler.sample_path(
            arc.with_profile(profile),
            plan_info.group_name,
            plan_info.link_name,
            plan_info.start_joint_position,
            sampling_time,
        )
