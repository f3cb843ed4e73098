# Robot model, joint groups and limit tables consumed by the planners
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

JointState = dict[str, float]


# -----------------------------
# Joint limits
# -----------------------------
@dataclass(frozen=True)
class JointLimit:
    """
    Limits of a single joint.

    Velocity is a symmetric bound. Acceleration and deceleration are
    independently optional; a missing bound is never checked.
    """

    max_velocity: float
    has_velocity_limits: bool = True
    min_position: float = -np.inf
    max_position: float = np.inf
    has_position_limits: bool = False
    max_acceleration: float = 0.0
    has_acceleration_limits: bool = False
    max_deceleration: float = 0.0
    has_deceleration_limits: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JointLimit:
        """
        Build from a plain mapping.

        Keys: max_velocity, min_position, max_position, max_acceleration,
        max_deceleration. A key that is present enables the matching limit.
        """
        has_pos = "min_position" in data or "max_position" in data
        return cls(
            max_velocity=float(data.get("max_velocity", 0.0)),
            has_velocity_limits="max_velocity" in data,
            min_position=float(data.get("min_position", -np.inf)),
            max_position=float(data.get("max_position", np.inf)),
            has_position_limits=has_pos,
            max_acceleration=float(data.get("max_acceleration", 0.0)),
            has_acceleration_limits="max_acceleration" in data,
            max_deceleration=float(data.get("max_deceleration", 0.0)),
            has_deceleration_limits="max_deceleration" in data,
        )


class JointLimitsContainer:
    """Immutable table of JointLimit keyed by joint name."""

    __slots__ = ("_limits",)

    def __init__(self, limits: Mapping[str, JointLimit] | None = None):
        self._limits: dict[str, JointLimit] = dict(limits or {})

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> JointLimitsContainer:
        return cls({name: JointLimit.from_dict(entry) for name, entry in data.items()})

    def __contains__(self, joint_name: object) -> bool:
        return joint_name in self._limits

    def __len__(self) -> int:
        return len(self._limits)

    def __iter__(self):
        return iter(self._limits)

    def joint_names(self) -> list[str]:
        return list(self._limits)

    def get_limit(self, joint_name: str) -> JointLimit:
        try:
            return self._limits[joint_name]
        except KeyError:
            raise KeyError(f"No limits defined for joint '{joint_name}'") from None

    def verify_velocity_limit(self, joint_name: str, velocity: float, tolerance: float = 0.0) -> bool:
        limit = self.get_limit(joint_name)
        return not (limit.has_velocity_limits and abs(velocity) > limit.max_velocity * (1.0 + tolerance))

    def verify_position_limit(self, joint_name: str, position: float) -> bool:
        limit = self.get_limit(joint_name)
        if not limit.has_position_limits:
            return True
        return limit.min_position <= position <= limit.max_position

    def verify_position_limits(self, positions: Mapping[str, float]) -> bool:
        return all(self.verify_position_limit(name, value) for name, value in positions.items())

    def subset(self, joint_names: Iterable[str]) -> JointLimitsContainer:
        return JointLimitsContainer({name: self.get_limit(name) for name in joint_names})


@dataclass(frozen=True)
class CartesianLimits:
    """
    Cartesian limits of the controlled link.

    max_rot_acc defaults to the rotational velocity scaled by the
    translational acceleration/velocity ratio.
    """

    max_trans_vel: float
    max_trans_acc: float
    max_trans_dec: float
    max_rot_vel: float
    max_rot_acc: float | None = None

    @property
    def rot_acc(self) -> float:
        if self.max_rot_acc is not None:
            return self.max_rot_acc
        return self.max_trans_acc / self.max_trans_vel * self.max_rot_vel


@dataclass(frozen=True)
class PlannerLimits:
    """Joint and Cartesian limits handed to every generator."""

    joint_limits: JointLimitsContainer
    cartesian_limits: CartesianLimits | None = None


# -----------------------------
# Robot model
# -----------------------------
@dataclass(frozen=True)
class JointGroup:
    """
    Named kinematic chain of the robot.

    Attributes:
        name: Group identifier used in requests
        joint_names: Active joints in chain order
        tip_link: Link controlled by Cartesian motions of this group
        ik_links: Links for which an IK solver is configured
    """

    name: str
    joint_names: tuple[str, ...]
    tip_link: str | None = None
    ik_links: frozenset[str] = field(default_factory=frozenset)


class RobotModel:
    """
    Read-only description of the robot.

    Answers group membership, active joints, per-joint position limits,
    IK availability per link and the model reference frame.
    """

    def __init__(
        self,
        groups: Sequence[JointGroup],
        joint_limits: JointLimitsContainer,
        model_frame: str = "world",
        links: Iterable[str] = (),
    ):
        self.model_frame = model_frame
        self.joint_limits = joint_limits
        self._groups: dict[str, JointGroup] = {g.name: g for g in groups}
        known_links = set(links)
        for g in groups:
            if g.tip_link:
                known_links.add(g.tip_link)
            known_links.update(g.ik_links)
        self._links = frozenset(known_links)

    @classmethod
    def from_rtb(
        cls,
        robot: Any,
        joint_limits: JointLimitsContainer | Mapping[str, Mapping[str, Any]],
        group_name: str = "manipulator",
        joint_names: Sequence[str] | None = None,
        tip_link: str = "tool0",
        model_frame: str = "world",
    ) -> RobotModel:
        """
        Build a single-group model from a roboticstoolbox robot.

        Position limits come from robot.qlim and override any position entry
        of joint_limits; velocity/acceleration limits come from joint_limits.

        Parameters
        ----------
        robot : roboticstoolbox.Robot | DHRobot
            Kinematic model providing n and qlim
        joint_limits : JointLimitsContainer | dict
            Dynamic limits keyed by joint name
        joint_names : sequence of str, optional
            Names of the robot joints in chain order (default joint_1..joint_n)
        """
        n = int(robot.n)
        names = tuple(joint_names) if joint_names else tuple(f"joint_{i + 1}" for i in range(n))
        if len(names) != n:
            raise ValueError(f"Expected {n} joint names, got {len(names)}")

        if not isinstance(joint_limits, JointLimitsContainer):
            joint_limits = JointLimitsContainer.from_dict(joint_limits)

        qlim: NDArray[np.float64] | None = getattr(robot, "qlim", None)
        merged: dict[str, JointLimit] = {}
        for i, name in enumerate(names):
            base = joint_limits.get_limit(name)
            if qlim is not None and np.all(np.isfinite(qlim[:, i])):
                base = JointLimit(
                    max_velocity=base.max_velocity,
                    has_velocity_limits=base.has_velocity_limits,
                    min_position=float(qlim[0, i]),
                    max_position=float(qlim[1, i]),
                    has_position_limits=True,
                    max_acceleration=base.max_acceleration,
                    has_acceleration_limits=base.has_acceleration_limits,
                    max_deceleration=base.max_deceleration,
                    has_deceleration_limits=base.has_deceleration_limits,
                )
            merged[name] = base

        group = JointGroup(group_name, names, tip_link, frozenset({tip_link}))
        logger.debug("Robot model from %s: group '%s' with %d joints", getattr(robot, "name", "robot"), group_name, n)
        return cls([group], JointLimitsContainer(merged), model_frame=model_frame)

    # ---- groups ----
    def has_group(self, group_name: str) -> bool:
        return group_name in self._groups

    def group_names(self) -> list[str]:
        return list(self._groups)

    def get_group(self, group_name: str) -> JointGroup:
        try:
            return self._groups[group_name]
        except KeyError:
            raise KeyError(f"Robot model has no planning group named '{group_name}'") from None

    def active_joint_names(self, group_name: str) -> list[str]:
        return list(self.get_group(group_name).joint_names)

    def tip_link(self, group_name: str) -> str | None:
        return self.get_group(group_name).tip_link

    def can_set_state_from_ik(self, group_name: str, link_name: str) -> bool:
        if not self.has_group(group_name):
            return False
        return link_name in self.get_group(group_name).ik_links

    # ---- links / joints ----
    def has_link(self, link_name: str) -> bool:
        return link_name in self._links

    def has_joint(self, joint_name: str) -> bool:
        return joint_name in self.joint_limits

    def satisfies_position_bounds(self, joint_name: str, position: float) -> bool:
        return self.joint_limits.verify_position_limit(joint_name, position)
