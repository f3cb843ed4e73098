"""
Tolerance based comparison of trajectory waypoints.
"""

import logging
from collections.abc import Sequence

import numpy as np

from trajgen.motion.types import WaypointState

logger = logging.getLogger(__name__)


def is_robot_state_equal(
    state1: WaypointState,
    state2: WaypointState,
    joint_names: Sequence[str],
    epsilon: float,
) -> bool:
    """True if positions, velocities and accelerations each differ by at most epsilon (2-norm)."""
    for attr in ("positions", "velocities", "accelerations"):
        v1 = state1.vector(attr, joint_names)
        v2 = state2.vector(attr, joint_names)
        if np.linalg.norm(v1 - v2) > epsilon:
            logger.debug("Joint %s of the two states are different. state1: %s state2: %s", attr, v1, v2)
            return False
    return True


def is_robot_state_stationary(state: WaypointState, joint_names: Sequence[str], epsilon: float) -> bool:
    """True if velocity and acceleration norms are both within epsilon of zero."""
    if np.linalg.norm(state.vector("velocities", joint_names)) > epsilon:
        logger.debug("Joint velocities are not zero.")
        return False
    if np.linalg.norm(state.vector("accelerations", joint_names)) > epsilon:
        logger.debug("Joint accelerations are not zero.")
        return False
    return True
