import pytest

from hapticbridge.bridge_franka import FrankaBridge, GripperClient
from hapticbridge.messages import (
    ButtonEvent,
    GraspGoal,
    MoveGoal,
    Pose,
    PoseStamped,
    Vector3,
    Wrench,
    WrenchStamped,
)
from hapticbridge.teleop import (
    FRANKA_SCALING,
    clamp_force,
    clamp_workspace,
    map_phantom_pose,
    scale_force,
    zero_feedback,
)


def _make(ready=True):
    sent = {"target": [], "feedback": [], "vis": [], "move": [], "grasp": []}
    move = GripperClient("/panda_gripper/move", sent["move"].append, lambda t: ready)
    grasp = GripperClient("/panda_gripper/grasp", sent["grasp"].append, lambda t: ready)
    bridge = FrankaBridge(
        publish_target=sent["target"].append,
        publish_feedback=sent["feedback"].append,
        publish_visualisation=sent["vis"].append,
        move_client=move,
        grasp_client=grasp,
    )
    return bridge, sent


def _stylus(x, y, z):
    return PoseStamped(pose=Pose(position=Vector3(x, y, z)))


def test_allowed_movement_flags_large_jumps():
    bridge, _ = _make()
    assert bridge.allowed_movement(Vector3(1.0, 0.0, 0.0), Vector3())
    assert not bridge.allowed_movement(Vector3(0.1, 0.0, 0.0), Vector3())


def test_large_jump_is_ignored():
    bridge, sent = _make()
    out = bridge.on_phantom_pose(_stylus(0.0, 0.1, 0.0))
    assert out == clamp_workspace(PoseStamped())
    assert sent["vis"] == [out]


def test_small_step_is_taken():
    bridge, sent = _make()
    msg = _stylus(0.0, -0.01, 0.01)
    out = bridge.on_phantom_pose(msg)
    assert out == clamp_workspace(map_phantom_pose(msg, FRANKA_SCALING))
    assert bridge.last_wished_pose == map_phantom_pose(msg, FRANKA_SCALING)


def test_pose_goes_to_arm_while_white_held():
    bridge, sent = _make()
    bridge.on_button(ButtonEvent(white_button=True))
    out = bridge.on_phantom_pose(_stylus(0.0, -0.01, 0.01))
    assert sent["target"] == [out]
    assert sent["vis"] == []


def test_grey_press_toggles_between_grasp_and_move():
    bridge, sent = _make()
    first = bridge.on_button(ButtonEvent(grey_button=True))
    assert first == GraspGoal(0.08, 0.1, 60.0, 0.01, 0.01)
    assert bridge.on_button(ButtonEvent(grey_button=True)) is None
    assert bridge.on_button(ButtonEvent(grey_button=False)) is None
    second = bridge.on_button(ButtonEvent(grey_button=True))
    assert second == MoveGoal(0.0, 0.1)
    assert sent["grasp"] == [first]
    assert sent["move"] == [second]


def test_unavailable_server_sends_nothing():
    bridge, sent = _make(ready=False)
    assert bridge.send_gripper_move(0.0) is None
    assert bridge.send_gripper_grasp(0.08) is None
    assert sent["move"] == [] and sent["grasp"] == []


def test_gripper_client_without_server():
    client = GripperClient("/panda_gripper/move")
    assert client.wait_for_server(0.1) is False
    with pytest.raises(RuntimeError):
        client.send_goal(MoveGoal(0.0, 0.1))


def test_gripper_client_records_goals():
    received = []
    client = GripperClient("/panda_gripper/move", received.append)
    goal = MoveGoal(0.04, 0.1)
    assert client.wait_for_server(0.1) is True
    client.send_goal(goal)
    assert received == [goal]
    assert client.sent_goals == [goal]


def test_white_release_stops_arm_and_feedback():
    bridge, sent = _make()
    robot = PoseStamped(pose=Pose(Vector3(0.3, 0.1, 0.4)))
    bridge.on_robot_pose(robot)
    bridge.on_button(ButtonEvent(white_button=True))
    bridge.on_button(ButtonEvent(white_button=False))
    assert sent["target"] == [robot]
    assert sent["feedback"] == [zero_feedback()]


def test_wrench_without_white_gives_zero():
    bridge, sent = _make()
    out = bridge.on_wrench(WrenchStamped(wrench=Wrench(force=Vector3(1.0, 2.0, 3.0))))
    assert out == zero_feedback()
    assert sent["feedback"] == [out]


def test_wrench_with_white_uses_half_scale():
    bridge, sent = _make()
    bridge.on_button(ButtonEvent(white_button=True))
    wrench = Wrench(force=Vector3(0.8, -0.6, 10.0))
    out = bridge.on_wrench(WrenchStamped(wrench=wrench))
    assert out == clamp_force(scale_force(wrench, 0.5))
    assert out.force.z == -2.0
    assert sent["feedback"] == [out]