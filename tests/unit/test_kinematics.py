import logging

import numpy as np
import pytest
import roboticstoolbox as rtb
from spatialmath import SE3

from trajgen.kinematics import RtbKinematics, compute_link_fk, compute_pose_ik, unwrap_angles


def test_unwrap_angles_moves_solution_near_current():
    q = unwrap_angles([3.0, -3.0, 0.5], [-3.0, 3.0, 0.4])
    assert np.allclose(q, [3.0 - 2 * np.pi, -3.0 + 2 * np.pi, 0.5])


class TestComputePoseIK:
    def solve(self, model, kin, **overrides):
        args = dict(
            group_name="gantry",
            link_name="tool0",
            pose=SE3(0.1, 0.2, 0.3),
            frame_id="world",
            seed={"x": 0.0, "y": 0.0, "z": 0.0},
        )
        args.update(overrides)
        return compute_pose_ik(model, kin, **args)

    def test_solution_over_active_joints(self, gantry_model, gantry_kinematics):
        assert self.solve(gantry_model, gantry_kinematics) == {"x": 0.1, "y": 0.2, "z": 0.3}

    @pytest.mark.parametrize(
        "override",
        [{"group_name": "arm"}, {"link_name": "base_link"}, {"frame_id": "table"}],
    )
    def test_rejected_before_solving(self, gantry_model, gantry_kinematics, override):
        assert self.solve(gantry_model, gantry_kinematics, **override) is None
        assert gantry_kinematics.ik_calls == []

    def test_partial_seed_defaults_to_zero(self, gantry_model, gantry_kinematics):
        self.solve(gantry_model, gantry_kinematics, seed={"y": 0.7, "other": 1.0})
        assert gantry_kinematics.ik_calls[0][2] == {"x": 0.0, "y": 0.7, "z": 0.0}

    def test_no_solution(self, gantry_model, gantry_kinematics):
        assert self.solve(gantry_model, gantry_kinematics, pose=SE3(10.0, 0.0, 0.0)) is None

    def test_collision_only_checked_when_enabled(self, gantry_model, gantry_kinematics, colliding_checker):
        assert self.solve(gantry_model, gantry_kinematics, collision_checker=colliding_checker) is not None
        assert colliding_checker.calls == 0

        result = self.solve(
            gantry_model, gantry_kinematics, collision_checker=colliding_checker, check_self_collision=True
        )
        assert result is None
        assert colliding_checker.calls == 1

    def test_collision_check_without_checker_warns(self, gantry_model, gantry_kinematics, caplog):
        with caplog.at_level(logging.WARNING, logger="trajgen.kinematics"):
            assert self.solve(gantry_model, gantry_kinematics, check_self_collision=True) is not None
        assert "no collision checker" in caplog.text


def test_compute_link_fk(gantry_model, gantry_kinematics):
    pose = compute_link_fk(gantry_kinematics, gantry_model, "tool0", {"x": 1.0, "y": 2.0, "z": 3.0})
    assert np.allclose(pose.t, [1.0, 2.0, 3.0])
    assert compute_link_fk(gantry_kinematics, gantry_model, "elbow", {"x": 1.0}) is None


# -----------------------------
# roboticstoolbox backend
# -----------------------------
@pytest.fixture(scope="module")
def planar2():
    return rtb.models.DH.Planar2()


@pytest.fixture
def planar_kinematics(planar2):
    return RtbKinematics(planar2, ["joint_1", "joint_2"], tip_link="tool0", mask=[1, 1, 0, 0, 0, 0])


def test_rtb_fk_at_zero(planar_kinematics):
    pose = planar_kinematics.solve_fk("tool0", {"joint_1": 0.0, "joint_2": 0.0})
    assert np.allclose(pose.t, [2.0, 0.0, 0.0])
    assert planar_kinematics.solve_fk("elbow", {"joint_1": 0.0}) is None


def test_rtb_ik_reaches_fk_pose(planar2, planar_kinematics):
    q = {"joint_1": 0.3, "joint_2": 0.6}
    target = planar_kinematics.solve_fk("tool0", q)

    solution = planar_kinematics.solve_ik(
        "manipulator", "tool0", target, {"joint_1": 0.25, "joint_2": 0.55}, timeout=5.0
    )

    assert solution is not None
    assert set(solution) == {"joint_1", "joint_2"}
    reached = planar_kinematics.solve_fk("tool0", solution)
    assert np.allclose(reached.t, target.t, atol=1e-6)


def test_rtb_ik_unknown_link(planar_kinematics):
    assert planar_kinematics.solve_ik("manipulator", "elbow", SE3(), {}, timeout=1.0) is None
