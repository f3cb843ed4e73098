"""
CLI entry point for the trajgen-plan command.

Plans one motion for a roboticstoolbox DH model and prints the resulting
trajectory, e.g.:

    trajgen-plan --goal 1.0 0.5 --sampling-time 0.05 -v
"""

import argparse
import logging
import sys

import numpy as np
import roboticstoolbox as rtb
from spatialmath import SE3

from trajgen.config import DEFAULT_SAMPLING_TIME, LOG_LEVEL_DEFAULT, TRACE, TRACE_ENABLED
from trajgen.kinematics import RtbKinematics
from trajgen.planning import Constraints, MotionPlanner, MotionPlanRequest, StartState
from trajgen.robot_model import CartesianLimits, JointLimitsContainer, PlannerLimits, RobotModel

logger = logging.getLogger(__name__)

TIP_LINK = "tool0"
GROUP_NAME = "manipulator"


def _log_level(args: argparse.Namespace) -> int:
    if args.log_level:
        if args.log_level == "TRACE":
            return TRACE
        return getattr(logging, args.log_level)
    if args.verbose >= 3:
        return TRACE
    if args.verbose >= 2:
        return logging.DEBUG
    if args.verbose == 1:
        return logging.INFO
    if args.quiet:
        return logging.WARNING
    if TRACE_ENABLED:
        return TRACE
    return getattr(logging, LOG_LEVEL_DEFAULT.upper(), logging.INFO)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Plan a PTP/LIN/CIRC motion for a DH robot model")
    parser.add_argument("--robot", default="Planar2", help="Model class in roboticstoolbox.models.DH")
    parser.add_argument("--motion", default="PTP", choices=["PTP", "LIN", "CIRC"], help="Motion type")
    parser.add_argument("--start", type=float, nargs="+", help="Start joint positions (default: all zero)")
    parser.add_argument("--goal", type=float, nargs="+", required=True, help="Goal joint positions")
    parser.add_argument(
        "--interim",
        type=float,
        nargs=3,
        help="Interim point [x y z] of a CIRC motion",
    )
    parser.add_argument("--velocity-scaling", type=float, default=1.0, help="Velocity scaling factor")
    parser.add_argument("--acceleration-scaling", type=float, default=1.0, help="Acceleration scaling factor")
    parser.add_argument("--sampling-time", type=float, default=DEFAULT_SAMPLING_TIME, help="Sampling time (s)")
    parser.add_argument("--max-velocity", type=float, default=1.0, help="Joint velocity limit (rad/s)")
    parser.add_argument("--max-acceleration", type=float, default=2.0, help="Joint acceleration limit (rad/s^2)")
    parser.add_argument("--max-trans-vel", type=float, default=0.5, help="Cartesian velocity limit (m/s)")
    parser.add_argument("--max-trans-acc", type=float, default=1.0, help="Cartesian acceleration limit (m/s^2)")

    # Verbose logging options
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="Increase verbosity; -v=INFO, -vv=DEBUG, -vvv=TRACE"
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Enable quiet logging (WARNING level)")
    parser.add_argument(
        "--log-level",
        choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set specific log level",
    )
    return parser


def build_planner(robot, args: argparse.Namespace) -> tuple[MotionPlanner, RobotModel]:
    names = [f"joint_{i + 1}" for i in range(robot.n)]
    limits = JointLimitsContainer.from_dict(
        {
            name: {
                "max_velocity": args.max_velocity,
                "max_acceleration": args.max_acceleration,
                "max_deceleration": -args.max_acceleration,
            }
            for name in names
        }
    )
    robot_model = RobotModel.from_rtb(robot, limits, group_name=GROUP_NAME, joint_names=names, tip_link=TIP_LINK)

    # Arms with fewer than six joints only track the tool position in the plane
    mask = [1, 1, 0, 0, 0, 0] if robot.n < 6 else None
    kinematics = RtbKinematics(robot, names, tip_link=TIP_LINK, mask=mask)

    cartesian = CartesianLimits(
        max_trans_vel=args.max_trans_vel,
        max_trans_acc=args.max_trans_acc,
        max_trans_dec=-args.max_trans_acc,
        max_rot_vel=args.max_velocity,
    )
    planner = MotionPlanner(robot_model, PlannerLimits(robot_model.joint_limits, cartesian), kinematics)
    return planner, robot_model


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=_log_level(args),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        robot = getattr(rtb.models.DH, args.robot)()
    except AttributeError:
        logger.error("Unknown DH robot model: %s", args.robot)
        return 2

    if len(args.goal) != robot.n or (args.start and len(args.start) != robot.n):
        logger.error("%s has %d joints, start/goal must have as many positions", args.robot, robot.n)
        return 2

    planner, robot_model = build_planner(robot, args)
    names = robot_model.active_joint_names(GROUP_NAME)
    start = args.start or [0.0] * robot.n

    path_constraints = None
    if args.motion == "CIRC":
        if args.interim is None:
            logger.error("CIRC needs --interim x y z")
            return 2
        path_constraints = Constraints.from_pose_goal(TIP_LINK, SE3(*args.interim))
        path_constraints.name = "interim"

    req = MotionPlanRequest(
        planner_id=args.motion,
        group_name=GROUP_NAME,
        start_state=StartState(names, list(start), [0.0] * robot.n),
        goal_constraints=[Constraints.from_joint_goal(dict(zip(names, args.goal)))],
        path_constraints=path_constraints,
        max_velocity_scaling_factor=args.velocity_scaling,
        max_acceleration_scaling_factor=args.acceleration_scaling,
    )

    res = planner.generate(req, args.sampling_time)
    if not res.success:
        print(f"{args.motion} planning failed ({res.error_kind.name}): {res.message}")
        return 1

    traj = res.trajectory
    print(
        f"{args.motion} trajectory: {traj.waypoint_count} points, duration {traj.duration:.4f}s, "
        f"planned in {res.planning_time * 1000:.2f} ms"
    )
    np.set_printoptions(precision=4, suppress=True)
    joint_trajectory = traj.to_joint_trajectory()
    for point, q, qd in zip(
        joint_trajectory.points, joint_trajectory.positions_array(), joint_trajectory.velocities_array()
    ):
        print(f"  t={point.time_from_start:7.4f}  q={q}  qd={qd}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
