"""
Base trajectory generator and the registry of motion types.

Every motion type follows the same contract:
  validate request -> extract MotionPlanInfo -> plan joint trajectory -> respond

Motion types form a closed set (MotionType); each variant registers itself
with @register_generator and is created through create_generator.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import Enum
from importlib import import_module
from typing import ClassVar

from spatialmath import SE3

from trajgen.config import CHECK_SELF_COLLISION, DEFAULT_SAMPLING_TIME, IK_TIMEOUT_S
from trajgen.kinematics import CollisionChecker, KinematicsSolver, compute_link_fk, compute_pose_ik
from trajgen.motion.profile import TrapezoidalProfile, cartesian_trap_velocity_profile
from trajgen.motion.sampling import JointTrajectoryGenerator
from trajgen.motion.types import JointTrajectory, RobotTrajectory
from trajgen.planning.request import MotionPlanInfo, MotionPlanRequest, MotionPlanResponse
from trajgen.planning.validation import RequestValidator
from trajgen.robot_model import JointState, PlannerLimits, RobotModel
from trajgen.utils.errors import (
    ErrorKind,
    IKError,
    InvalidLimitsError,
    InvalidMotionPlanError,
    TrajectoryGenerationError,
)

logger = logging.getLogger(__name__)


class MotionType(Enum):
    """Supported motion primitives."""

    PTP = "PTP"  # Point-to-point in joint space
    LIN = "LIN"  # Straight Cartesian line
    CIRC = "CIRC"  # Cartesian circular arc

    @classmethod
    def from_string(cls, name: str) -> MotionType:
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise InvalidMotionPlanError(f"Unknown motion type '{name}'") from None


_GENERATORS: dict[MotionType, type[TrajectoryGenerator]] = {}
_VARIANT_MODULES = ("trajgen.planning.ptp", "trajgen.planning.lin", "trajgen.planning.circ")


def register_generator(motion_type: MotionType) -> Callable[[type[TrajectoryGenerator]], type[TrajectoryGenerator]]:
    """Class decorator registering a generator for a motion type."""

    def decorator(cls: type[TrajectoryGenerator]) -> type[TrajectoryGenerator]:
        existing = _GENERATORS.get(motion_type)
        if existing is not None and existing is not cls:
            raise ValueError(
                f"Motion type '{motion_type.value}' is already registered with class {existing.__name__}. "
                f"Cannot register with {cls.__name__}"
            )
        cls.motion_type = motion_type
        _GENERATORS[motion_type] = cls
        logger.debug("Registered generator '%s' -> %s", motion_type.value, cls.__name__)
        return cls

    return decorator


def registered_generators() -> dict[MotionType, type[TrajectoryGenerator]]:
    for module in _VARIANT_MODULES:
        import_module(module)
    return dict(_GENERATORS)


class TrajectoryGenerator(ABC):
    """
    Base class of trajectory generators.

    Derived generators never support a nonzero start velocity.
    """

    motion_type: ClassVar[MotionType]

    def __init__(
        self,
        robot_model: RobotModel,
        planner_limits: PlannerLimits,
        kinematics: KinematicsSolver,
        collision_checker: CollisionChecker | None = None,
        check_self_collision: bool = CHECK_SELF_COLLISION,
        ik_timeout: float = IK_TIMEOUT_S,
    ):
        self.robot_model = robot_model
        self.planner_limits = planner_limits
        self.kinematics = kinematics
        self.collision_checker = collision_checker
        self.check_self_collision = check_self_collision
        self.ik_timeout = ik_timeout
        self.validator = RequestValidator(robot_model)
        self.sampler = JointTrajectoryGenerator(
            robot_model,
            kinematics,
            planner_limits.joint_limits,
            collision_checker=collision_checker,
            check_self_collision=check_self_collision,
            ik_timeout=ik_timeout,
        )

    def generate(self, req: MotionPlanRequest, sampling_time: float = DEFAULT_SAMPLING_TIME) -> MotionPlanResponse:
        """
        Generate a robot trajectory with the given sampling time.

        Never raises for planning failures: the response carries the error
        kind and message. Planning time is recorded on every path.
        """
        logger.debug("Generating %s trajectory for group '%s'", self.motion_type.value, req.group_name)
        planning_start = time.perf_counter()

        try:
            self.validator.validate(req)
            self.cmd_specific_request_validation(req)
            plan_info = self.extract_motion_plan_info(req)
            joint_trajectory = self.plan(req, plan_info, sampling_time)
        except TrajectoryGenerationError as e:
            logger.error("%s planning failed: %s", self.motion_type.value, e)
            return self._failure_response(planning_start, e, req)

        return self._success_response(req, joint_trajectory, planning_start)

    # ---- hooks ----
    def cmd_specific_request_validation(self, req: MotionPlanRequest) -> None:
        """Extra checks of a motion type; default accepts everything."""
        return

    @abstractmethod
    def extract_motion_plan_info(self, req: MotionPlanRequest) -> MotionPlanInfo:
        """Extract the information needed for planning from a validated request."""

    @abstractmethod
    def plan(self, req: MotionPlanRequest, plan_info: MotionPlanInfo, sampling_time: float) -> JointTrajectory:
        """Produce the joint trajectory or raise a TrajectoryGenerationError."""

    # ---- shared helpers ----
    def start_joint_position(self, req: MotionPlanRequest) -> JointState:
        positions = req.start_state.positions()
        return {name: positions[name] for name in self.robot_model.active_joint_names(req.group_name)}

    def solve_ik(self, group_name: str, link_name: str, pose: SE3, seed: JointState) -> JointState:
        solution = compute_pose_ik(
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
        if solution is None:
            raise IKError(f"No IK solution for goal pose of link '{link_name}'")
        return solution

    def link_pose(self, link_name: str, joint_state: JointState) -> SE3:
        pose = compute_link_fk(self.kinematics, self.robot_model, link_name, joint_state)
        if pose is None:
            raise InvalidMotionPlanError(f"Failed to compute forward kinematics for link '{link_name}'")
        return pose

    def cartesian_trap_velocity_profile(
        self,
        max_velocity_scaling_factor: float,
        max_acceleration_scaling_factor: float,
        translational_distance: float,
        angular_distance: float,
    ) -> TrapezoidalProfile:
        """Trapezoidal profile over the longer of translational/rotational motion."""
        if self.planner_limits.cartesian_limits is None:
            raise InvalidLimitsError("Cartesian limits are required for Cartesian motions")
        return cartesian_trap_velocity_profile(
            max_velocity_scaling_factor,
            max_acceleration_scaling_factor,
            self.planner_limits.cartesian_limits,
            translational_distance,
            angular_distance,
        )

    # ---- responses ----
    def _success_response(
        self,
        req: MotionPlanRequest,
        joint_trajectory: JointTrajectory,
        planning_start: float,
    ) -> MotionPlanResponse:
        trajectory = RobotTrajectory.from_joint_trajectory(
            req.group_name, joint_trajectory, req.start_state.positions()
        )
        planning_time = time.perf_counter() - planning_start
        logger.info(
            "%s trajectory with %d points (%.3fs) planned in %.2f ms",
            self.motion_type.value,
            trajectory.waypoint_count,
            trajectory.duration,
            planning_time * 1000,
        )
        return MotionPlanResponse(
            error_kind=ErrorKind.SUCCESS,
            planning_time=planning_time,
            trajectory=trajectory,
            group_name=req.group_name,
            start_state=req.start_state,
        )

    @staticmethod
    def _failure_response(
        planning_start: float,
        error: TrajectoryGenerationError,
        req: MotionPlanRequest | None = None,
    ) -> MotionPlanResponse:
        return MotionPlanResponse(
            error_kind=error.kind,
            planning_time=time.perf_counter() - planning_start,
            message=error.original_message,
            group_name=req.group_name if req is not None else "",
            start_state=req.start_state if req is not None else None,
        )


def create_generator(
    motion_type: MotionType | str,
    robot_model: RobotModel,
    planner_limits: PlannerLimits,
    kinematics: KinematicsSolver,
    **kwargs,
) -> TrajectoryGenerator:
    """
    Instantiate the generator registered for a motion type.

    Raises:
        InvalidMotionPlanError: Unknown motion type
    """
    if isinstance(motion_type, str):
        motion_type = MotionType.from_string(motion_type)
    generators = registered_generators()
    cls = generators.get(motion_type)
    if cls is None:
        raise InvalidMotionPlanError(f"No generator registered for motion type '{motion_type.value}'")
    return cls(robot_model, planner_limits, kinematics, **kwargs)


class MotionPlanner:
    """
    Dispatches requests to the generator selected by req.planner_id.

    Generators are created once per motion type; they hold no per-call state.
    """

    def __init__(
        self,
        robot_model: RobotModel,
        planner_limits: PlannerLimits,
        kinematics: KinematicsSolver,
        **kwargs,
    ):
        self._generators = {
            mt: cls(robot_model, planner_limits, kinematics, **kwargs) for mt, cls in registered_generators().items()
        }

    def supported_motion_types(self) -> list[str]:
        return sorted(mt.value for mt in self._generators)

    def generate(self, req: MotionPlanRequest, sampling_time: float = DEFAULT_SAMPLING_TIME) -> MotionPlanResponse:
        planning_start = time.perf_counter()
        try:
            motion_type = MotionType.from_string(req.planner_id)
        except InvalidMotionPlanError as e:
            logger.error("%s", e)
            return TrajectoryGenerator._failure_response(planning_start, e, req)
        return self._generators[motion_type].generate(req, sampling_time)
