"""
Per-sample joint limit verification.

Velocities are estimated by finite differences of consecutive positions;
accelerations by the finite difference of consecutive velocities over the
half-sum of the previous and current intervals. This assumes a locally
constant acceleration and is a modeling choice, not an exact derivative.
"""

import logging
from collections.abc import Mapping

from trajgen.config import LIMIT_CHECK_TOLERANCE, SAMPLE_DURATION_EPSILON
from trajgen.robot_model import JointLimitsContainer
from trajgen.utils.errors import DegenerateInputError

logger = logging.getLogger(__name__)


def is_accelerating(velocity_last: float, velocity_current: float) -> bool:
    """Equal magnitudes count as accelerating."""
    return abs(velocity_last) <= abs(velocity_current)


def verify_sample_joint_limits(
    position_last: Mapping[str, float],
    velocity_last: Mapping[str, float],
    position_current: Mapping[str, float],
    duration_last: float,
    duration_current: float,
    joint_limits: JointLimitsContainer,
) -> bool:
    """
    Check velocity and acceleration/deceleration of one sample for every joint.

    Args:
        position_last: Joint positions of the previous sample
        velocity_last: Joint velocities of the previous sample
        position_current: Joint positions of the current sample
        duration_last: Length of the previous interval (s)
        duration_current: Length of the current interval (s)
        joint_limits: Limits table covering every joint of position_current

    Returns:
        True if all joints are within limits, False at the first violating joint

    Raises:
        DegenerateInputError: If duration_current is too small to differentiate
    """
    if duration_current <= SAMPLE_DURATION_EPSILON:
        logger.error("Sample duration too small, cannot compute the velocity")
        raise DegenerateInputError(f"Sample duration {duration_current} too small to compute the velocity")

    for name, position in position_current.items():
        velocity_current = (position - position_last[name]) / duration_current

        if not joint_limits.verify_velocity_limit(name, velocity_current, LIMIT_CHECK_TOLERANCE):
            logger.error(
                "Joint velocity limit of %s violated. Set the velocity scaling factor lower! "
                "Actual joint velocity is %s, while the limit is %s.",
                name,
                velocity_current,
                joint_limits.get_limit(name).max_velocity,
            )
            return False

        acceleration_current = (velocity_current - velocity_last[name]) / (duration_last + duration_current) * 2
        limit = joint_limits.get_limit(name)
        # Looser than a strict |a| > limit test by the relative LIMIT_CHECK_TOLERANCE
        slack = 1.0 + LIMIT_CHECK_TOLERANCE

        if is_accelerating(velocity_last[name], velocity_current):
            if limit.has_acceleration_limits and abs(acceleration_current) > abs(limit.max_acceleration) * slack:
                logger.error(
                    "Joint acceleration limit of %s violated. Set the acceleration scaling factor lower! "
                    "Actual joint acceleration is %s, while the limit is %s.",
                    name,
                    acceleration_current,
                    limit.max_acceleration,
                )
                return False
        else:
            if limit.has_deceleration_limits and abs(acceleration_current) > abs(limit.max_deceleration) * slack:
                logger.error(
                    "Joint deceleration limit of %s violated. Set the acceleration scaling factor lower! "
                    "Actual joint deceleration is %s, while the limit is %s.",
                    name,
                    acceleration_current,
                    limit.max_deceleration,
                )
                return False

    return True
