"""
Merging of independently generated trajectory segments.
"""

import logging

from trajgen.config import ROBOT_STATE_EQUALITY_EPSILON
from trajgen.motion.state import is_robot_state_equal
from trajgen.motion.types import RobotTrajectory

logger = logging.getLogger(__name__)


class TrajectoryAppender:
    """Appends segments onto an accumulated result without duplicating the shared boundary."""

    def __init__(self, epsilon: float = ROBOT_STATE_EQUALITY_EPSILON):
        self.epsilon = epsilon

    def merge(self, result: RobotTrajectory, source: RobotTrajectory) -> None:
        """
        Append source to result in place.

        If result's last waypoint equals source's first waypoint, that first
        waypoint is dropped and the rest keep their own durations; otherwise
        the whole source is appended with a zero-duration transition.
        """
        if source.empty():
            return

        if not result.empty() and is_robot_state_equal(
            result.last_waypoint(), source.first_waypoint(), result.joint_names, self.epsilon
        ):
            for i in range(1, source.waypoint_count):
                result.add_suffix_waypoint(source.waypoint(i), source.duration_from_previous(i))
            logger.debug("Merged %d waypoints on shared boundary", source.waypoint_count - 1)
        else:
            result.append(source, 0.0)
            logger.debug("Appended %d waypoints as new leg", source.waypoint_count)
