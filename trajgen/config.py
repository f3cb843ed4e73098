"""
Central configuration for trajectory generation tunables and shared constants.
"""

import logging
import os

TRACE: int = 5
logging.addLevelName(TRACE, "TRACE")
# Add Logger.trace if missing
if not hasattr(logging.Logger, "trace"):

    def _trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)

    logging.Logger.trace = _trace  # type: ignore[attr-defined]
    logging.TRACE = TRACE  # type: ignore[attr-defined]

TRACE_ENABLED = str(os.getenv("TRAJGEN_TRACE", "0")).lower() in ("1", "true", "yes", "on")

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    s = raw.strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return default


# Default time step between two trajectory samples (s)
DEFAULT_SAMPLING_TIME: float = float(os.getenv("TRAJGEN_SAMPLING_TIME", "0.1"))

# Per-sample inverse kinematics budget (s)
IK_TIMEOUT_S: float = float(os.getenv("TRAJGEN_IK_TIMEOUT_S", "0.05"))

# Self-collision checking of every IK solution during sampling
CHECK_SELF_COLLISION: bool = _env_bool("TRAJGEN_CHECK_SELF_COLLISION", False)

# Valid scaling factors lie in the half-open interval (MIN, MAX]
MIN_SCALING_FACTOR: float = 0.0001
MAX_SCALING_FACTOR: float = 1.0

# Start states moving faster than this (rad/s or m/s) are rejected
VELOCITY_TOLERANCE: float = 1e-8

# Intervals below this cannot be differentiated (s)
SAMPLE_DURATION_EPSILON: float = 1e-5

# Norm tolerance for treating two waypoints as the same physical state
ROBOT_STATE_EQUALITY_EPSILON: float = 1e-4

LOG_LEVEL_DEFAULT: str = os.getenv("TRAJGEN_LOG_LEVEL", "INFO")

# Relative slack on limit comparisons: a value is rejected only above limit * (1 + tolerance),
# not at the first bit past the limit as a strict |value| > limit check would. Set to 0.0 for strict.
LIMIT_CHECK_TOLERANCE: float = 1e-9
