import pytest

from hapticbridge.bridge_sim import SimBridge
from hapticbridge.messages import (
    ButtonEvent,
    Header,
    Pose,
    PoseStamped,
    Vector3,
    Wrench,
    WrenchStamped,
)
from hapticbridge.teleop import zero_feedback


def _make():
    sent = {"target": [], "feedback": [], "gripper": [], "vis": []}
    bridge = SimBridge(
        publish_target=sent["target"].append,
        publish_feedback=sent["feedback"].append,
        publish_gripper=sent["gripper"].append,
        publish_visualisation=sent["vis"].append,
    )
    return bridge, sent


def _stylus(x, y, z):
    return PoseStamped(pose=Pose(position=Vector3(x, y, z)))


def _wrench(x, y, z):
    return WrenchStamped(wrench=Wrench(force=Vector3(x, y, z)))


def test_allowed_movement_flags_small_steps():
    bridge, _ = _make()
    assert bridge.allowed_movement(Vector3(0.1, 0.0, 0.0), Vector3())
    assert not bridge.allowed_movement(Vector3(1.0, 0.0, 0.0), Vector3())


def test_large_step_is_taken_and_clamped():
    bridge, sent = _make()
    out = bridge.on_phantom_pose(_stylus(0.0, 0.1, 0.0))
    assert out.pose.position.x == pytest.approx(0.7)
    assert sent["vis"] == [out]
    assert sent["target"] == []


def test_small_step_repeats_previous_pose():
    bridge, sent = _make()
    first = bridge.on_phantom_pose(_stylus(0.0, 0.1, 0.0))
    second = bridge.on_phantom_pose(_stylus(0.0, 0.101, 0.0))
    assert second == first
    assert len(sent["vis"]) == 2


def test_pose_goes_to_arm_while_white_held():
    bridge, sent = _make()
    bridge.on_button(ButtonEvent(white_button=True))
    out = bridge.on_phantom_pose(_stylus(0.0, 0.1, 0.0))
    assert sent["target"] == [out]
    assert sent["vis"] == []


def test_grey_button_toggles_on_every_held_event():
    bridge, sent = _make()
    assert bridge.on_button(ButtonEvent(grey_button=True)) == (0.05, 0.05)
    assert bridge.on_button(ButtonEvent(grey_button=True)) == (-0.05, -0.05)
    assert bridge.on_button(ButtonEvent(grey_button=False)) is None
    assert sent["gripper"] == [(0.05, 0.05), (-0.05, -0.05)]


def test_white_release_stops_arm_and_feedback():
    bridge, sent = _make()
    robot = PoseStamped(header=Header(frame_id="base"), pose=Pose(Vector3(0.3, 0.1, 0.4)))
    bridge.on_robot_pose(robot)
    bridge.on_button(ButtonEvent(white_button=True))
    bridge.on_button(ButtonEvent(white_button=False))
    assert sent["target"] == [robot]
    assert sent["feedback"] == [zero_feedback()]


def test_white_release_without_robot_pose_only_zeroes_feedback():
    bridge, sent = _make()
    bridge.on_button(ButtonEvent(white_button=True))
    bridge.on_button(ButtonEvent(white_button=False))
    assert sent["target"] == []
    assert sent["feedback"] == [zero_feedback()]


def test_wrench_ignored_without_white():
    bridge, sent = _make()
    out = bridge.on_wrench(_wrench(1.0, 1.0, 1.0))
    assert out == zero_feedback()
    assert sent["feedback"] == [out]


def test_wrench_scaled_and_clamped_with_white():
    bridge, sent = _make()
    bridge.on_button(ButtonEvent(white_button=True))
    small = bridge.on_wrench(_wrench(0.3, 0.2, 0.1))
    assert small.force.x == pytest.approx(0.2)
    assert small.force.y == pytest.approx(-0.3)
    assert small.force.z == pytest.approx(-0.1)
    big = bridge.on_wrench(_wrench(10.0, 10.0, 10.0))
    assert big.force == Vector3(2.0, -2.0, -2.0)
    assert sent["feedback"] == [small, big]